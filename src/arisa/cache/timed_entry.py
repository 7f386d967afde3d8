"""Time-keyed entries shared by the cooldown tracker and the lookup caches.

Both stores keep one timestamped entry per key and periodically drop the
entries that have outlived a horizon. :class:`TimedStore` holds the mapping,
the clock and the eviction scan; subclasses decide what "expired" means for
their use case.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, Generic, Hashable, Optional, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

Clock = Callable[[], float]


@dataclass(frozen=True, slots=True)
class TimedEntry(Generic[V]):
    """Immutable value stamped with the monotonic time it was stored."""

    value: V
    stored_at: float

    def age(self, now: float) -> float:
        return now - self.stored_at

    def is_fresh(self, now: float, max_age: float) -> bool:
        """Return True while the entry is younger than ``max_age`` seconds."""
        return self.age(now) < max_age


class TimedStore(Generic[K, V]):
    """Mapping of keys to :class:`TimedEntry` objects with age based eviction.

    Entries are only ever replaced wholesale, never mutated. All methods are
    synchronous so a read-modify-write on one key cannot interleave with
    another coroutine on the event loop.
    """

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock: Clock = clock or time.monotonic
        self._entries: Dict[K, TimedEntry[V]] = {}

    def now(self) -> float:
        return self._clock()

    def lookup(self, key: K) -> Optional[TimedEntry[V]]:
        return self._entries.get(key)

    def stamp(self, key: K, value: V, now: Optional[float] = None) -> TimedEntry[V]:
        """Store ``value`` under ``key`` stamped with ``now`` (default: the clock)."""
        entry = TimedEntry(value=value, stored_at=self.now() if now is None else now)
        self._entries[key] = entry
        return entry

    def discard(self, key: K) -> bool:
        return self._entries.pop(key, None) is not None

    def evict_older_than(self, max_age: float) -> int:
        """Drop every entry whose age is at least ``max_age`` seconds.

        Returns the number of entries removed. An empty store is a no-op.
        """
        if not self._entries:
            return 0
        now = self.now()
        stale = [key for key, entry in self._entries.items() if not entry.is_fresh(now, max_age)]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
