"""Generic cache-aside store for external lookups (CVE, JEP, GitHub, opcodes).

One :class:`LookupCache` instance exists per data source. Values are kept
for a fixed TTL; every successful insert sweeps the entries that have
expired so the cache only ever holds recently used keys. Failed fetches are
never stored, so the next call simply tries again.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Dict, Generic, Hashable, Optional, TypeVar

from arisa.cache.timed_entry import Clock, TimedStore
from arisa.errors import FetchError

V = TypeVar("V")

DEFAULT_TTL_SECONDS = 3600.0

Fetcher = Callable[[], Awaitable[V]]


def normalize_key(key: Hashable) -> str:
    """Case-fold and trim a lookup key so ``CVE-2024-1`` and ``cve-2024-1 `` collide."""
    return str(key).strip().lower()


class LookupCache(Generic[V]):
    """TTL cache in front of an async fetch routine.

    Parameters
    ----------
    name:
        Data source name, used in logs and ``repr``.
    ttl_seconds:
        Default time-to-live for entries.
    single_flight:
        When True, concurrent misses on the same key await one shared fetch
        instead of each hitting the upstream source.
    normalize:
        Key normalizer applied before every lookup.
    clock:
        Monotonic clock, injectable for tests.
    """

    def __init__(
        self,
        name: str,
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        single_flight: bool = False,
        normalize: Callable[[Hashable], str] = normalize_key,
        clock: Optional[Clock] = None,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.name = name
        self.ttl_seconds = float(ttl_seconds)
        self.single_flight = single_flight
        self._normalize = normalize
        self._store: TimedStore[str, V] = TimedStore(clock)
        self._in_flight: Dict[str, asyncio.Task[V]] = {}

    def __repr__(self) -> str:
        return f"<LookupCache {self.name!r} entries={len(self._store)} ttl={self.ttl_seconds:g}s>"

    def get(self, key: Hashable, *, ttl: Optional[float] = None) -> Optional[V]:
        """Return the cached value for ``key`` if it is still fresh, else None."""
        entry = self._store.lookup(self._normalize(key))
        if entry is None:
            return None
        if not entry.is_fresh(self._store.now(), self._effective_ttl(ttl)):
            return None
        return entry.value

    async def get_or_fetch(self, key: Hashable, fetch: Fetcher[V], *, ttl: Optional[float] = None) -> V:
        """Return a fresh cached value or call ``fetch`` and cache its result.

        Raises
        ------
        FetchError
            When ``fetch`` fails. Exceptions other than :class:`FetchError` are
            wrapped, with the original chained as ``__cause__``.
        """
        effective_ttl = self._effective_ttl(ttl)
        normalized = self._normalize(key)

        entry = self._store.lookup(normalized)
        if entry is not None and entry.is_fresh(self._store.now(), effective_ttl):
            return entry.value

        if not self.single_flight:
            return await self._fetch_and_store(normalized, fetch, effective_ttl)

        task = self._in_flight.get(normalized)
        if task is None:
            task = asyncio.ensure_future(self._fetch_and_store(normalized, fetch, effective_ttl))
            self._in_flight[normalized] = task
            task.add_done_callback(lambda done, k=normalized: self._release(k, done))
        # A cancelled waiter must not cancel the fetch other waiters share.
        return await asyncio.shield(task)

    def invalidate(self, key: Hashable) -> bool:
        return self._store.discard(self._normalize(key))

    def sweep(self, ttl: Optional[float] = None) -> int:
        """Drop expired entries and return how many were removed."""
        return self._store.evict_older_than(self._effective_ttl(ttl))

    def clear(self) -> None:
        self._store.clear()

    def in_flight(self, key: Hashable) -> bool:
        return self._normalize(key) in self._in_flight

    def __contains__(self, key: object) -> bool:
        return isinstance(key, Hashable) and self.get(key) is not None

    def __len__(self) -> int:
        return len(self._store)

    def _effective_ttl(self, ttl: Optional[float]) -> float:
        if ttl is None:
            return self.ttl_seconds
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        return float(ttl)

    async def _fetch_and_store(self, key: str, fetch: Fetcher[V], ttl: float) -> V:
        try:
            value = await fetch()
        except FetchError:
            raise
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            raise FetchError(str(exc) or type(exc).__name__) from exc

        self._store.stamp(key, value)
        # A short per-call ttl must not evict entries still fresh under the cache default.
        self._store.evict_older_than(max(ttl, self.ttl_seconds))
        return value

    def _release(self, key: str, task: asyncio.Task[V]) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]
        if not task.cancelled():
            # Marks the exception retrieved when every waiter was cancelled.
            task.exception()
