"""Shared state handed to every cog.

Owns the cooldown tracker, one lookup cache per remote data source, the HTTP
client and the background schedulers. Built once in ``main.create_bot`` and
closed during shutdown.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from arisa.cache.cooldown_tracker import CooldownTracker
from arisa.cache.lookup_cache import LookupCache
from arisa.cache.timed_entry import Clock
from arisa.configuration.app_configuration import AppConfig, LimitsSettings
from arisa.datatypes.lookup_datatypes import CveRecord, JepRecord
from arisa.scheduler.cooldown_sweep_scheduler import CooldownSweepScheduler
from arisa.scheduler.status_scheduler import StatusScheduler
from arisa.services.github_service import GitHubRecord
from arisa.services.http_client import HttpClient
from arisa.services.opcode_service import InstructionTable
from arisa.util.logger import get_logger

logger = get_logger("app_context")


@dataclass
class AppContext:
    config: AppConfig
    cooldowns: CooldownTracker
    http: HttpClient
    cve_cache: LookupCache[CveRecord]
    jep_cache: LookupCache[JepRecord]
    opcode_cache: LookupCache[InstructionTable]
    github_cache: LookupCache[GitHubRecord]
    sweep_scheduler: CooldownSweepScheduler
    status_scheduler: StatusScheduler

    @classmethod
    def from_config(cls, config: AppConfig, clock: Optional[Clock] = None) -> "AppContext":
        ttl = config.cache_ttl_seconds
        single_flight = config.cache_single_flight
        tracker = CooldownTracker(clock=clock)

        def cache(name: str) -> LookupCache:
            return LookupCache(name, ttl_seconds=ttl, single_flight=single_flight, clock=clock)

        return cls(
            config=config,
            cooldowns=tracker,
            http=HttpClient(config.http),
            cve_cache=cache("cve"),
            jep_cache=cache("jep"),
            opcode_cache=cache("opcode"),
            github_cache=cache("github"),
            sweep_scheduler=CooldownSweepScheduler(
                tracker,
                get_interval=lambda: config.cooldown_sweep.interval_seconds,
                get_max_age=lambda: config.cooldown_sweep.max_age_seconds,
            ),
            status_scheduler=StatusScheduler(
                get_quotes=lambda: config.quotes,
                get_interval_bounds=lambda: config.status_interval_minutes,
            ),
        )

    @property
    def limits(self) -> LimitsSettings:
        return self.config.limits

    @property
    def quotes(self) -> List[str]:
        return self.config.quotes

    async def close(self) -> None:
        """Stop background tasks and release the HTTP session."""
        await self.status_scheduler.shutdown()
        await self.sweep_scheduler.shutdown()
        await self.http.close()
        logger.info("Application context closed")
