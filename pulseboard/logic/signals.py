"""Trend and growth signals derived from metric records."""

from __future__ import annotations

import os
from datetime import datetime
from typing import Protocol, Sequence

from pulseboard.ingest.models import TrendDirection, TrendIndicator

# Secondary metrics follow the headline growth at a damped rate.
TREND_MULTIPLIERS = {
    "revenue": 1.0,
    "users": float(os.environ.get("USERS_TREND_MULTIPLIER", 0.8)),
    "conversions": float(os.environ.get("CONVERSIONS_TREND_MULTIPLIER", 0.6)),
    "growth": 1.0,
}


class Dated(Protocol):
    date: datetime


def direction_for(growth: float) -> TrendDirection:
    if growth > 0:
        return TrendDirection.UP
    if growth < 0:
        return TrendDirection.DOWN
    return TrendDirection.NEUTRAL


def trend_indicator(growth: float, multiplier: float = 1.0) -> TrendIndicator:
    return TrendIndicator(change=abs(growth * multiplier), direction=direction_for(growth))


def metric_trends(growth: float | None) -> dict[str, TrendIndicator]:
    """Trend cards for the overview: every metric inherits the headline direction."""
    if growth is None:
        return {}
    return {metric: trend_indicator(growth, multiplier) for metric, multiplier in TREND_MULTIPLIERS.items()}


def percent_change(new: float | None, old: float | None) -> float | None:
    if new is None or old in (None, 0):
        return None
    return (new - old) / old * 100


def overall_growth(records: Sequence[Dated], field: str = "revenue") -> float:
    """Growth from the earliest to the latest record, in percent."""
    if len(records) < 2:
        return 0.0
    ordered = sorted(records, key=lambda record: record.date)
    first = getattr(ordered[0], field)
    last = getattr(ordered[-1], field)
    if not first:
        return 0.0
    return (last - first) / first * 100


def period_growth(records: Sequence[Dated], field: str = "revenue") -> list[float | None]:
    """Growth of each record against the one before it, ``None`` where undefined."""
    changes: list[float | None] = []
    previous = None
    for record in records:
        value = getattr(record, field)
        changes.append(percent_change(value, previous))
        previous = value
    return changes
