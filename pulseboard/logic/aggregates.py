"""Summary statistics over record sequences."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Sequence

import numpy as np
import pandas as pd

from pulseboard.ingest.models import CategoryPoint, RevenueDataPoint
from pulseboard.utils.dates import month_label


@dataclass(frozen=True, slots=True)
class Summary:
    count: int
    total: float
    average: float
    maximum: float
    minimum: float


EMPTY_SUMMARY = Summary(count=0, total=0.0, average=0.0, maximum=0.0, minimum=0.0)


def summarize(values: Iterable[float]) -> Summary:
    arr = np.asarray(list(values), dtype=float)
    if arr.size == 0:
        return EMPTY_SUMMARY
    total = float(arr.sum())
    return Summary(
        count=int(arr.size),
        total=total,
        average=total / arr.size,
        maximum=float(arr.max()),
        minimum=float(arr.min()),
    )


def field_summary(records: Iterable[Any], field: str) -> Summary:
    return summarize(getattr(record, field) for record in records)


def monthly_revenue(points: Sequence[RevenueDataPoint]) -> list[CategoryPoint]:
    """Sum revenue per calendar month, months in order of first appearance."""
    if not points:
        return []
    frame = pd.DataFrame(
        {
            "month": [month_label(point.date) for point in points],
            "revenue": [point.revenue for point in points],
        }
    )
    grouped = frame.groupby("month", sort=False)["revenue"].sum()
    return [CategoryPoint(name=str(month), value=float(total)) for month, total in grouped.items()]
