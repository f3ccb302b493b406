"""Periodic domain refresh on the running event loop."""

from __future__ import annotations

import asyncio
import logging

from pulseboard.ingest import Domain
from pulseboard.ingest.resolver import DataSourceResolver

logger = logging.getLogger(__name__)


class RefreshScheduler:
    """One task per domain: refresh, then sleep for the domain's interval."""

    def __init__(
        self,
        resolver: DataSourceResolver,
        intervals: dict[Domain, float] | None = None,
    ) -> None:
        self.resolver = resolver
        self.intervals = intervals or resolver.cache.intervals
        self._tasks: dict[Domain, asyncio.Task] = {}

    @property
    def running(self) -> bool:
        return any(not task.done() for task in self._tasks.values())

    def start(self, domains: list[Domain] | None = None) -> None:
        for domain in domains or list(Domain):
            if domain in self._tasks and not self._tasks[domain].done():
                continue
            self._tasks[domain] = asyncio.create_task(self._run(domain), name=f"refresh-{domain.value}")

    async def stop(self) -> None:
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

    async def _run(self, domain: Domain) -> None:
        interval = self.intervals[domain]
        logger.info("Refreshing %s every %ss", domain.value, interval)
        if not self.resolver.cache.is_stale(domain):
            await asyncio.sleep(interval)
        while True:
            if not self.resolver.is_released(domain):
                try:
                    await self.resolver.refresh(domain)
                except Exception:
                    logger.exception("Refresh of %s failed", domain.value)
            await asyncio.sleep(interval)
