"""Campaign tiering and ranking."""

from __future__ import annotations

from enum import Enum
from typing import Callable, Iterable, Sequence, TypeVar

from pulseboard.ingest.models import CampaignConversion, CategoryPoint

T = TypeVar("T")

ROI_PER_CONVERSION = 25


class PerformanceTier(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    AVERAGE = "Average"
    POOR = "Poor"


# Ordered best first: (tier, exclusive lower bound, distribution label, color)
TIERS = [
    (PerformanceTier.EXCELLENT, 200, "Excellent (200+)", "#22c55e"),
    (PerformanceTier.GOOD, 100, "Good (100-200)", "#3b82f6"),
    (PerformanceTier.AVERAGE, 50, "Average (50-100)", "#f59e0b"),
    (PerformanceTier.POOR, None, "Poor (<50)", "#ef4444"),
]


def classify_tier(conversions: int) -> PerformanceTier:
    for tier, floor, _, _ in TIERS[:-1]:
        if conversions > floor:
            return tier
    return PerformanceTier.POOR


def tier_distribution(campaigns: Iterable[CampaignConversion]) -> list[CategoryPoint]:
    counts = {tier: 0 for tier, _, _, _ in TIERS}
    for campaign in campaigns:
        counts[classify_tier(campaign.conversions)] += 1
    return [
        CategoryPoint(name=label, value=counts[tier], color=color)
        for tier, _, label, color in TIERS
        if counts[tier] > 0
    ]


def top_n(records: Sequence[T], key: Callable[[T], float], n: int) -> list[T]:
    """Highest ``key`` first; equal keys keep their original order."""
    if n <= 0:
        return []
    return sorted(records, key=key, reverse=True)[:n]


def top_performer(campaigns: Sequence[CampaignConversion]) -> CampaignConversion | None:
    ranked = top_n(campaigns, lambda c: c.conversions, 1)
    return ranked[0] if ranked else None


def estimated_roi(conversions: int) -> float:
    return float(conversions * ROI_PER_CONVERSION)
