"""Distribution breakdowns for donut and share charts."""

from __future__ import annotations

from dataclasses import dataclass

from pulseboard.ingest.models import CategoryPoint, OverviewMetrics

# Revenue is shown in thousands and conversions scaled up so the three
# magnitudes fit one chart.
METRIC_DISTRIBUTION = [
    ("Revenue", "revenue", 1 / 1000, "#8884d8"),
    ("Users", "users", 1, "#82ca9d"),
    ("Conversions", "conversions", 10, "#ffc658"),
]

AGE_SHARES = [
    ("18-24", 0.20),
    ("25-34", 0.30),
    ("35-44", 0.25),
    ("45-54", 0.15),
    ("55+", 0.10),
]

LOCATION_SHARES = [
    ("United States", 0.28),
    ("United Kingdom", 0.17),
    ("Canada", 0.14),
    ("Australia", 0.11),
    ("Germany", 0.09),
    ("Others", 0.21),
]

NEW_USER_SHARE = 0.25
ACTIVE_USER_SHARE = 0.68


@dataclass(frozen=True, slots=True)
class UserActivity:
    total: int
    new: int
    active: int


def metric_distribution(latest: OverviewMetrics | None) -> list[CategoryPoint]:
    if latest is None:
        return []
    return [
        CategoryPoint(name=name, value=getattr(latest, field) * scale, color=color)
        for name, field, scale, color in METRIC_DISTRIBUTION
    ]


def _shares(users: int, shares: list[tuple[str, float]]) -> list[CategoryPoint]:
    if users <= 0:
        return []
    return [CategoryPoint(name=name, value=round(users * share)) for name, share in shares]


def age_demographics(users: int) -> list[CategoryPoint]:
    return _shares(users, AGE_SHARES)


def location_breakdown(users: int) -> list[CategoryPoint]:
    return _shares(users, LOCATION_SHARES)


def user_activity(users: int) -> UserActivity:
    return UserActivity(
        total=users,
        new=round(users * NEW_USER_SHARE),
        active=round(users * ACTIVE_USER_SHARE),
    )
