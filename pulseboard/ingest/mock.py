"""Synthetic records served when the backend cannot be reached."""

from __future__ import annotations

import random
from collections.abc import Callable
from typing import Any

import pendulum

from pulseboard.ingest import Domain
from pulseboard.ingest.models import CampaignConversion, HealthStatus, OverviewMetrics, RevenueDataPoint
from pulseboard.utils.dates import now_in_tz

HISTORY_LENGTH = 30
MOCK_HEALTH_STATUS = "mock-healthy"

MOCK_CAMPAIGNS = [
    "Facebook Ads",
    "Google Ads",
    "Email Marketing",
    "Social Media",
    "Influencer Marketing",
]

# Half-open integer ranges, growth is a closed float range.
OVERVIEW_REVENUE_RANGE = (50_000, 150_000)
USERS_RANGE = (5_000, 15_000)
CONVERSIONS_RANGE = (500, 1_500)
GROWTH_RANGE = (-10.0, 10.0)
CAMPAIGN_CONVERSIONS_RANGE = (100, 600)
REVENUE_POINT_RANGE = (25_000, 75_000)


class MockDataGenerator:
    def __init__(
        self,
        rng: random.Random | None = None,
        clock: Callable[[], pendulum.DateTime] | None = None,
    ) -> None:
        self._rng = rng or random.Random()
        self._clock = clock or now_in_tz

    def generate(self, domain: Domain) -> Any:
        if domain is Domain.OVERVIEW_LATEST:
            return self.overview()
        if domain is Domain.OVERVIEW_ALL:
            return self.overview_history()
        if domain is Domain.CAMPAIGNS:
            return self.campaigns()
        if domain is Domain.REVENUE:
            return self.revenue()
        return HealthStatus(MOCK_HEALTH_STATUS)

    def overview(self) -> OverviewMetrics:
        now = self._clock()
        return self._overview_at(f"mock-{_stamp(now)}", now)

    def overview_history(self, count: int = HISTORY_LENGTH) -> list[OverviewMetrics]:
        now = self._clock()
        stamp = _stamp(now)
        return [
            self._overview_at(f"mock-{stamp}-{index}", day)
            for index, day in enumerate(_daily_timestamps(now, count))
        ]

    def campaigns(self) -> list[CampaignConversion]:
        now = self._clock()
        stamp = _stamp(now)
        return [
            CampaignConversion(
                id=f"mock-campaign-{stamp}-{index}",
                campaign=name,
                conversions=self._rng.randrange(*CAMPAIGN_CONVERSIONS_RANGE),
                date=now,
            )
            for index, name in enumerate(MOCK_CAMPAIGNS)
        ]

    def revenue(self, count: int = HISTORY_LENGTH) -> list[RevenueDataPoint]:
        now = self._clock()
        stamp = _stamp(now)
        return [
            RevenueDataPoint(
                id=f"mock-revenue-{stamp}-{index}",
                date=day,
                revenue=float(self._rng.randrange(*REVENUE_POINT_RANGE)),
            )
            for index, day in enumerate(_daily_timestamps(now, count))
        ]

    def _overview_at(self, record_id: str, when: pendulum.DateTime) -> OverviewMetrics:
        return OverviewMetrics(
            id=record_id,
            revenue=float(self._rng.randrange(*OVERVIEW_REVENUE_RANGE)),
            users=self._rng.randrange(*USERS_RANGE),
            conversions=self._rng.randrange(*CONVERSIONS_RANGE),
            growth=self._rng.uniform(*GROWTH_RANGE),
            date=when,
        )


def _daily_timestamps(end: pendulum.DateTime, count: int) -> list[pendulum.DateTime]:
    return [end.subtract(days=count - 1 - index) for index in range(count)]


def _stamp(when: pendulum.DateTime) -> int:
    return int(when.timestamp() * 1000)
