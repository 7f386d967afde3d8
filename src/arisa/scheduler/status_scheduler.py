"""Rotates the bot presence to a random quote every few minutes."""

from __future__ import annotations

import asyncio
from typing import Callable, Sequence, Tuple

import discord

from arisa.util.logger import get_logger
from arisa.util.quotes import random_activity, random_interval_minutes, random_status

logger = get_logger("status_scheduler")


class StatusScheduler:
    def __init__(
        self,
        get_quotes: Callable[[], Sequence[str]],
        get_interval_bounds: Callable[[], Tuple[int, int]],
    ) -> None:
        self._get_quotes = get_quotes
        self._get_interval_bounds = get_interval_bounds
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def update_presence(self, bot: discord.Bot) -> None:
        status = random_status()
        await bot.change_presence(activity=random_activity(self._get_quotes()), status=status)
        logger.debug("[STATUS] Updated presence to %s", status)

    async def _run_loop(self, bot: discord.Bot) -> None:
        try:
            while True:
                minutes = random_interval_minutes(self._get_interval_bounds())
                await asyncio.sleep(minutes * 60)
                try:
                    await self.update_presence(bot)
                except asyncio.CancelledError:
                    raise
                except Exception as exc:
                    logger.warning("[STATUS] Failed to update presence: %s", exc)
        except asyncio.CancelledError:
            logger.info("[STATUS] Status rotation cancelled")
            raise

    def start(self, bot: discord.Bot) -> None:
        if self.running:
            logger.warning("[STATUS] Status task already running")
            return
        self._task = asyncio.create_task(self._run_loop(bot))

    async def shutdown(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        logger.info("[STATUS] Scheduler shutdown complete")
