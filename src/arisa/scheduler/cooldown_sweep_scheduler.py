"""Periodic sweep that keeps the cooldown tracker bounded.

Runs as a single asyncio task bound to the bot's lifetime. Each pass removes
slots older than the retention horizon; errors inside one pass are logged and
the loop keeps going.
"""

from __future__ import annotations

import asyncio
from typing import Callable

from arisa.cache.cooldown_tracker import CooldownTracker
from arisa.util.logger import get_logger

logger = get_logger("cooldown_sweep_scheduler")


class CooldownSweepScheduler:
    """
    Background task calling :meth:`CooldownTracker.cleanup` on an interval.

    Args:
        tracker: The tracker to sweep.
        get_interval: Callable returning seconds between passes (read at start).
        get_max_age: Callable returning the retention horizon in seconds (read every pass).
    """

    def __init__(
        self,
        tracker: CooldownTracker,
        get_interval: Callable[[], float],
        get_max_age: Callable[[], float],
    ) -> None:
        self._tracker = tracker
        self._get_interval = get_interval
        self._get_max_age = get_max_age
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def sweep_once(self) -> int:
        removed = self._tracker.cleanup(self._get_max_age())
        if removed:
            logger.debug("[COOLDOWN SWEEP] Removed %d expired cooldown slots (%d remain)", removed, len(self._tracker))
        return removed

    async def _run_loop(self, interval: float) -> None:
        logger.info("[COOLDOWN SWEEP] Starting periodic sweep (interval=%.1fs)", interval)
        try:
            while True:
                await asyncio.sleep(interval)
                try:
                    self.sweep_once()
                except Exception as exc:
                    logger.error("[COOLDOWN SWEEP] Unexpected error during sweep: %s", exc)
        except asyncio.CancelledError:
            logger.info("[COOLDOWN SWEEP] Periodic sweep cancelled")
            raise

    def start(self) -> None:
        """Start the background sweep task if not already running."""
        if self.running:
            logger.warning("[COOLDOWN SWEEP] Sweep task already running")
            return
        interval = self._get_interval()
        self._task = asyncio.create_task(self._run_loop(interval))

    async def shutdown(self) -> None:
        """Cancel the sweep task and wait for it to finish."""
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        logger.info("[COOLDOWN SWEEP] Scheduler shutdown complete")
