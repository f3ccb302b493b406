"""Best-effort data resolution with synthetic fallback."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any, Mapping

from pulseboard.ingest import DOMAINS, Domain
from pulseboard.ingest.cache import DomainCache, Source
from pulseboard.ingest.client import RECORD_TYPES, DashboardClient
from pulseboard.ingest.mock import MockDataGenerator
from pulseboard.ingest.models import CampaignConversion, OverviewMetrics, RevenueDataPoint
from pulseboard.ingest.results import (
    FetchResult,
    MutationRejected,
    Ok,
    ReadAction,
    WriteAction,
    read_policy,
    write_policy,
)
from pulseboard.utils.dates import format_timestamp, now_in_tz
from pulseboard.utils.retry import retry_async

logger = logging.getLogger(__name__)

Subscriber = Callable[[Domain, Any], None]


@dataclass(frozen=True, slots=True)
class DemoStatus:
    using_mock_data: bool
    overview: bool
    campaigns: bool
    revenue: bool
    health: bool


class DataSourceResolver:
    """Always answers with data for a domain, real or synthetic.

    Read failures never reach the caller: after the retry policy gives up the
    domain is served from :class:`MockDataGenerator`. Writes are merged into
    the cache as soon as they return; only a rejected request (4xx) raises.
    """

    def __init__(
        self,
        client: DashboardClient,
        *,
        cache: DomainCache | None = None,
        generator: MockDataGenerator | None = None,
        retry_delay: float | None = None,
    ) -> None:
        self.client = client
        self.cache = cache or DomainCache()
        self.generator = generator or MockDataGenerator()
        self._retry_delay = retry_delay
        self._released: set[Domain] = set()
        self._subscribers: list[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)
        return lambda: self._subscribers.remove(callback)

    def current(self, domain: Domain) -> Any:
        entry = self.cache.get(domain)
        return entry.data if entry else None

    def release(self, domain: Domain) -> None:
        """Stop applying responses for a domain nobody is displaying."""
        self._released.add(domain)
        self.cache.invalidate(domain)

    def is_released(self, domain: Domain) -> bool:
        return domain in self._released

    async def resolve(self, domain: Domain) -> Any:
        self._released.discard(domain)
        entry = self.cache.get(domain)
        if entry is not None and not self.cache.is_stale(domain):
            return entry.data
        return await self.refresh(domain)

    async def refresh(self, domain: Domain) -> Any:
        generation = self.cache.generation(domain)
        max_attempts = DOMAINS[domain].max_attempts
        fallback_active = self.cache.fallback_active(domain)

        def should_retry(result: FetchResult, attempt: int) -> bool:
            action = read_policy(
                result,
                attempt=attempt,
                max_attempts=max_attempts,
                fallback_active=fallback_active,
            )
            if action is ReadAction.RETRY:
                logger.info("Retrying %s (attempt %s/%s): %s", domain.value, attempt, max_attempts, result.message)
            return action is ReadAction.RETRY

        result = await retry_async(
            lambda: self.client.fetch(domain),
            should_retry=should_retry,
            base_delay=self._retry_delay,
        )
        if isinstance(result, Ok):
            data, source = result.value, Source.REMOTE
        else:
            logger.warning("Serving synthetic %s data (%s: %s)", domain.value, result.kind.value, result.message)
            data, source = self.generator.generate(domain), Source.FALLBACK

        if domain in self._released or self.cache.generation(domain) != generation:
            logger.debug("Discarding late %s response", domain.value)
            current = self.cache.get(domain)
            return current.data if current else data
        self.cache.store(domain, data, source)
        self._notify(domain, data)
        return data

    async def force_refresh(self) -> dict[Domain, Any]:
        self.cache.invalidate_all()
        domains = list(Domain)
        results = await asyncio.gather(*(self.refresh(domain) for domain in domains))
        return dict(zip(domains, results))

    async def create_overview(
        self, *, revenue: float, users: int, conversions: int, growth: float
    ) -> OverviewMetrics:
        body = {"revenue": revenue, "users": users, "conversions": conversions, "growth": growth}
        record = await self._create(Domain.OVERVIEW_ALL, body, echo_prefix="mock-created")
        self._merge(Domain.OVERVIEW_LATEST, record)
        self._merge(Domain.OVERVIEW_ALL, record)
        # Refetch the full history on the next resolve.
        self.cache.invalidate(Domain.OVERVIEW_ALL)
        return record

    async def create_campaign(self, *, campaign: str, conversions: int) -> CampaignConversion:
        body = {"campaign": campaign, "conversions": conversions}
        record = await self._create(Domain.CAMPAIGNS, body, echo_prefix="mock-campaign-created")
        self._merge(Domain.CAMPAIGNS, record)
        return record

    async def create_revenue_point(self, *, revenue: float) -> RevenueDataPoint:
        body = {"revenue": revenue}
        record = await self._create(Domain.REVENUE, body, echo_prefix="mock-revenue-created")
        self._merge(Domain.REVENUE, record)
        return record

    def status(self) -> DemoStatus:
        overview = self.cache.fallback_active(Domain.OVERVIEW_LATEST)
        campaigns = self.cache.fallback_active(Domain.CAMPAIGNS)
        revenue = self.cache.fallback_active(Domain.REVENUE)
        return DemoStatus(
            using_mock_data=overview or campaigns or revenue,
            overview=overview,
            campaigns=campaigns,
            revenue=revenue,
            health=self.cache.fallback_active(Domain.HEALTH),
        )

    async def _create(self, domain: Domain, body: Mapping[str, Any], *, echo_prefix: str) -> Any:
        now = now_in_tz()
        # Validates the submission before anything leaves the process.
        local = RECORD_TYPES[domain].from_payload({**body, "date": format_timestamp(now)})
        result = await self.client.create(domain, body)
        action = write_policy(result)
        if action is WriteAction.REJECT:
            logger.warning("Create on %s rejected: %s", domain.value, result.message)
            raise MutationRejected(result)
        if action is WriteAction.ECHO:
            logger.warning("Create on %s failed (%s); keeping local copy", domain.value, result.kind.value)
            return replace(local, id=f"{echo_prefix}-{int(now.timestamp() * 1000)}")
        return result.value

    def _merge(self, domain: Domain, record: Any) -> None:
        entry = self.cache.merge(domain, record)
        self._notify(domain, entry.data)

    def _notify(self, domain: Domain, data: Any) -> None:
        for callback in list(self._subscribers):
            callback(domain, data)
