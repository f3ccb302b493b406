"""Dashboard session: resolve, refresh and recompute the view model."""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any

from dotenv import load_dotenv

from pulseboard.ingest import Domain
from pulseboard.ingest.client import DashboardClient
from pulseboard.ingest.resolver import DataSourceResolver
from pulseboard.jobs.refresh import RefreshScheduler
from pulseboard.logic.dashboard import DashboardView, compute_dashboard_view

logger = logging.getLogger(__name__)

VIEW_DOMAINS = {Domain.OVERVIEW_LATEST, Domain.CAMPAIGNS, Domain.REVENUE}


class DashboardSession:
    def __init__(
        self,
        client: DashboardClient | None = None,
        resolver: DataSourceResolver | None = None,
    ) -> None:
        self.client = client or DashboardClient()
        self.resolver = resolver or DataSourceResolver(self.client)
        self.scheduler = RefreshScheduler(self.resolver)
        self.view: DashboardView = self.recompute()
        self._unsubscribe = self.resolver.subscribe(self._on_change)

    def recompute(self) -> DashboardView:
        return compute_dashboard_view(
            self.resolver.current(Domain.OVERVIEW_LATEST),
            self.resolver.current(Domain.CAMPAIGNS) or [],
            self.resolver.current(Domain.REVENUE) or [],
        )

    def _on_change(self, domain: Domain, data: Any) -> None:
        if domain in VIEW_DOMAINS:
            self.view = self.recompute()

    async def open(self) -> DashboardView:
        await self.resolver.force_refresh()
        self.scheduler.start()
        return self.view

    async def close(self) -> None:
        await self.scheduler.stop()
        self._unsubscribe()
        await self.client.close()


def _log_view(session: DashboardSession) -> None:
    view = session.view
    status = session.resolver.status()
    if status.using_mock_data:
        logger.warning("Backend unavailable; showing demo data")
    if view.latest:
        logger.info(
            "Revenue %.0f, users %s, conversions %s, growth %+.1f%%",
            view.latest.revenue,
            view.latest.users,
            view.latest.conversions,
            view.latest.growth,
        )
    logger.info(
        "%s campaigns, %s revenue points, overall revenue growth %+.1f%%",
        len(view.campaign_rows),
        len(view.revenue_rows),
        view.revenue_growth,
    )


async def run_session(duration: float | None = None) -> DashboardView:
    load_dotenv()
    session = DashboardSession()
    try:
        await session.open()
        _log_view(session)
        if duration is None:
            await asyncio.Event().wait()
        else:
            await asyncio.sleep(duration)
    finally:
        await session.close()
    return session.view


if __name__ == "__main__":
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))
    seconds = os.environ.get("SESSION_SECONDS")
    asyncio.run(run_session(float(seconds) if seconds else None))
