"""Per (command, user) rate limiting for slash commands."""

from __future__ import annotations

import math
from typing import NamedTuple, Optional

from arisa.cache.timed_entry import Clock, TimedStore
from arisa.errors import Throttled


class CooldownKey(NamedTuple):
    """One throttling slot: a command name and a Discord user snowflake."""

    command: str
    user_id: int


class CooldownTracker:
    """Track the last successful invocation of each command by each user.

    ``check_and_record`` performs its check and its write without yielding
    to the event loop, so two concurrent invocations on the same key can
    never both pass, while different keys never wait on each other.
    """

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._store: TimedStore[CooldownKey, None] = TimedStore(clock)

    def check_and_record(self, command: str, user_id: int, window_seconds: float) -> None:
        """Record an invocation or raise :class:`Throttled` if it comes too soon.

        A throttled attempt leaves the stored timestamp untouched, so spamming
        a command never extends the window.

        Raises
        ------
        Throttled
            When the previous successful call is less than ``window_seconds`` old.
        ValueError
            If ``window_seconds`` is negative or ``user_id`` is not a valid snowflake.
        """
        if window_seconds < 0:
            raise ValueError("window_seconds must be >= 0")
        if user_id < 0 or user_id >= 2**64:
            raise ValueError(f"user_id out of range: {user_id}")

        key = CooldownKey(command, user_id)
        now = self._store.now()
        entry = self._store.lookup(key)

        if entry is not None and window_seconds > 0:
            elapsed = entry.age(now)
            if elapsed < window_seconds:
                raise Throttled(max(1, math.ceil(window_seconds - elapsed)))

        self._store.stamp(key, None, now=now)

    def remaining(self, command: str, user_id: int, window_seconds: float) -> float:
        """Return the seconds left on the window without recording anything."""
        entry = self._store.lookup(CooldownKey(command, user_id))
        if entry is None:
            return 0.0
        return max(0.0, window_seconds - entry.age(self._store.now()))

    def last_used(self, command: str, user_id: int) -> Optional[float]:
        entry = self._store.lookup(CooldownKey(command, user_id))
        return entry.stored_at if entry else None

    def cleanup(self, max_age_seconds: float) -> int:
        """Forget every slot whose last invocation is ``max_age_seconds`` old or older.

        This only bounds memory; throttling stays correct without it as long
        as the horizon is longer than every cooldown window.
        """
        return self._store.evict_older_than(max_age_seconds)

    def __len__(self) -> int:
        return len(self._store)
