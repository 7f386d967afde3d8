"""Cooldown tracking and TTL lookup caches shared by every command."""

from arisa.cache.cooldown_tracker import CooldownKey, CooldownTracker
from arisa.cache.lookup_cache import LookupCache, normalize_key
from arisa.cache.timed_entry import TimedEntry, TimedStore

__all__ = [
    "CooldownKey",
    "CooldownTracker",
    "LookupCache",
    "TimedEntry",
    "TimedStore",
    "normalize_key",
]
