"""Dashboard view model computation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from pulseboard.ingest.models import (
    CampaignConversion,
    CategoryPoint,
    ChartSeriesPoint,
    OverviewMetrics,
    RevenueDataPoint,
    TrendIndicator,
)
from pulseboard.logic.aggregates import Summary, field_summary, monthly_revenue
from pulseboard.logic.breakdowns import (
    UserActivity,
    age_demographics,
    location_breakdown,
    metric_distribution,
    user_activity,
)
from pulseboard.logic.ranking import PerformanceTier, classify_tier, estimated_roi, tier_distribution, top_performer
from pulseboard.logic.series import campaign_series, revenue_series, user_growth_series
from pulseboard.logic.signals import metric_trends, overall_growth, period_growth


@dataclass(frozen=True, slots=True)
class CampaignRow:
    campaign: CampaignConversion
    tier: PerformanceTier
    estimated_roi: float


@dataclass(frozen=True, slots=True)
class RevenueRow:
    point: RevenueDataPoint
    growth: float | None


@dataclass(slots=True)
class DashboardView:
    latest: OverviewMetrics | None
    trends: dict[str, TrendIndicator] = field(default_factory=dict)
    distribution: list[CategoryPoint] = field(default_factory=list)
    revenue_chart: list[ChartSeriesPoint] = field(default_factory=list)
    revenue_summary: Summary | None = None
    revenue_growth: float = 0.0
    monthly_revenue: list[CategoryPoint] = field(default_factory=list)
    revenue_rows: list[RevenueRow] = field(default_factory=list)
    campaign_chart: list[ChartSeriesPoint] = field(default_factory=list)
    campaign_summary: Summary | None = None
    campaign_rows: list[CampaignRow] = field(default_factory=list)
    tier_chart: list[CategoryPoint] = field(default_factory=list)
    top_campaign: CampaignConversion | None = None
    user_growth: list[ChartSeriesPoint] = field(default_factory=list)
    demographics: list[CategoryPoint] = field(default_factory=list)
    locations: list[CategoryPoint] = field(default_factory=list)
    activity: UserActivity | None = None


def compute_dashboard_view(
    latest: OverviewMetrics | None,
    campaigns: Sequence[CampaignConversion],
    revenue: Sequence[RevenueDataPoint],
) -> DashboardView:
    users = latest.users if latest else 0
    growth_by_row = period_growth(revenue)
    return DashboardView(
        latest=latest,
        trends=metric_trends(latest.growth if latest else None),
        distribution=metric_distribution(latest),
        revenue_chart=revenue_series(revenue),
        revenue_summary=field_summary(revenue, "revenue"),
        revenue_growth=overall_growth(revenue),
        monthly_revenue=monthly_revenue(revenue),
        revenue_rows=[RevenueRow(point, growth) for point, growth in zip(revenue, growth_by_row)],
        campaign_chart=campaign_series(campaigns),
        campaign_summary=field_summary(campaigns, "conversions"),
        campaign_rows=[
            CampaignRow(campaign, classify_tier(campaign.conversions), estimated_roi(campaign.conversions))
            for campaign in campaigns
        ],
        tier_chart=tier_distribution(campaigns),
        top_campaign=top_performer(campaigns),
        user_growth=user_growth_series(latest),
        demographics=age_demographics(users),
        locations=location_breakdown(users),
        activity=user_activity(users),
    )
