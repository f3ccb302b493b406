"""Chart-ready series built from raw records."""

from __future__ import annotations

from typing import Sequence

import pendulum

from pulseboard.ingest.models import (
    CampaignConversion,
    ChartSeriesPoint,
    OverviewMetrics,
    RevenueDataPoint,
)
from pulseboard.utils.dates import now_in_tz

CAMPAIGN_LABEL_LIMIT = 15
COMPACT_LABEL_LIMIT = 12
COMPACT_CAMPAIGN_COUNT = 10
ELLIPSIS = "..."


def truncate_label(name: str, limit: int = CAMPAIGN_LABEL_LIMIT) -> str:
    if len(name) > limit:
        return name[:limit] + ELLIPSIS
    return name


def revenue_series(points: Sequence[RevenueDataPoint]) -> list[ChartSeriesPoint]:
    return [ChartSeriesPoint(date=point.date, value=point.revenue) for point in points]


def campaign_series(campaigns: Sequence[CampaignConversion], *, compact: bool = False) -> list[ChartSeriesPoint]:
    """Bar chart input; compact charts show fewer campaigns with shorter labels."""
    limit = COMPACT_LABEL_LIMIT if compact else CAMPAIGN_LABEL_LIMIT
    selected = campaigns[:COMPACT_CAMPAIGN_COUNT] if compact else campaigns
    return [
        ChartSeriesPoint(
            date=campaign.date,
            value=campaign.conversions,
            label=truncate_label(campaign.campaign, limit),
        )
        for campaign in selected
    ]


def overview_series(history: Sequence[OverviewMetrics], field: str = "revenue") -> list[ChartSeriesPoint]:
    return [ChartSeriesPoint(date=record.date, value=getattr(record, field)) for record in history]


def user_growth_series(
    latest: OverviewMetrics | None,
    days: int = 10,
    now: pendulum.DateTime | None = None,
) -> list[ChartSeriesPoint]:
    """Project daily user counts backwards from the latest figure and growth rate."""
    if latest is None:
        return []
    today = now or now_in_tz()
    rate = latest.growth / 100
    points = []
    for offset in range(days - 1, -1, -1):
        users = round(latest.users * (1 - rate * offset / 10))
        points.append(ChartSeriesPoint(date=today.subtract(days=offset), value=max(users, 0)))
    return points
