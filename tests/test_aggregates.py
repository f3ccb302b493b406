import pendulum
import pytest

from pulseboard.ingest.models import RevenueDataPoint
from pulseboard.logic.aggregates import field_summary, monthly_revenue, summarize


def test_summarize(revenue_points):
    summary = field_summary(revenue_points, "revenue")
    assert summary.count == 3
    assert summary.total == sum(p.revenue for p in revenue_points)
    assert summary.average == summary.total / 3
    assert summary.maximum == 52000.0
    assert summary.minimum == 45000.0


def test_summarize_empty_is_zero():
    summary = summarize([])
    assert summary.count == 0
    assert summary.total == 0
    assert summary.average == 0
    assert field_summary([], "revenue").maximum == 0


def test_monthly_revenue_groups_by_calendar_month():
    points = [
        RevenueDataPoint("a", pendulum.datetime(2024, 1, 5), 100.0),
        RevenueDataPoint("b", pendulum.datetime(2024, 2, 1), 250.0),
        RevenueDataPoint("c", pendulum.datetime(2024, 1, 20), 50.0),
        RevenueDataPoint("d", pendulum.datetime(2025, 1, 3), 10.0),
    ]
    buckets = monthly_revenue(points)
    assert [(b.name, b.value) for b in buckets] == [
        ("Jan 2024", 150.0),
        ("Feb 2024", 250.0),
        ("Jan 2025", 10.0),
    ]


def test_monthly_revenue_preserves_total(generator):
    points = generator.revenue(count=75)
    buckets = monthly_revenue(points)
    assert sum(b.value for b in buckets) == pytest.approx(sum(p.revenue for p in points))
    assert monthly_revenue([]) == []
