"""Random picks for embed footers and the bot presence."""

from __future__ import annotations

import random
from typing import Sequence, Tuple

import discord

FALLBACK_QUOTE = "segfault yourself"

STATUSES = (discord.Status.online, discord.Status.idle, discord.Status.dnd)

ACTIVITY_TYPES = (
    discord.ActivityType.playing,
    discord.ActivityType.listening,
    discord.ActivityType.watching,
    discord.ActivityType.competing,
)


def random_quote(quotes: Sequence[str]) -> str:
    return random.choice(quotes) if quotes else FALLBACK_QUOTE


def random_status() -> discord.Status:
    return random.choice(STATUSES)


def random_activity(quotes: Sequence[str]) -> discord.Activity:
    return discord.Activity(type=random.choice(ACTIVITY_TYPES), name=random_quote(quotes))


def random_interval_minutes(bounds: Tuple[int, int]) -> int:
    low, high = bounds
    return random.randint(low, high)
