"""Dashboard domain records and their JSON codecs."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

import pendulum

from pulseboard.utils.dates import format_timestamp, parse_timestamp


def _require(payload: Mapping[str, Any], key: str) -> Any:
    if key not in payload or payload[key] is None:
        raise ValueError(f"Missing field {key!r}")
    return payload[key]


def _as_float(payload: Mapping[str, Any], key: str) -> float:
    value = _require(payload, key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Field {key!r} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ValueError(f"Field {key!r} must be finite, got {value!r}")
    return float(value)


def _as_int(payload: Mapping[str, Any], key: str) -> int:
    value = _as_float(payload, key)
    return int(round(value))


def _as_text(payload: Mapping[str, Any], key: str) -> str:
    value = _require(payload, key)
    if not isinstance(value, str):
        raise ValueError(f"Field {key!r} must be a string, got {value!r}")
    return value


def _as_timestamp(payload: Mapping[str, Any], key: str) -> pendulum.DateTime:
    value = _require(payload, key)
    try:
        return parse_timestamp(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Field {key!r} is not a timestamp: {value!r}") from exc


def _non_negative(**fields: float) -> None:
    for name, value in fields.items():
        if not value >= 0:
            raise ValueError(f"{name} must be non-negative, got {value}")


@dataclass(frozen=True, slots=True)
class OverviewMetrics:
    id: str
    revenue: float
    users: int
    conversions: int
    growth: float
    date: pendulum.DateTime

    def __post_init__(self) -> None:
        _non_negative(revenue=self.revenue, users=self.users, conversions=self.conversions)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> OverviewMetrics:
        return cls(
            id=str(payload.get("id") or ""),
            revenue=_as_float(payload, "revenue"),
            users=_as_int(payload, "users"),
            conversions=_as_int(payload, "conversions"),
            growth=_as_float(payload, "growth"),
            date=_as_timestamp(payload, "date"),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "revenue": self.revenue,
            "users": self.users,
            "conversions": self.conversions,
            "growth": self.growth,
            "date": format_timestamp(self.date),
        }


@dataclass(frozen=True, slots=True)
class CampaignConversion:
    id: str
    campaign: str
    conversions: int
    date: pendulum.DateTime

    def __post_init__(self) -> None:
        _non_negative(conversions=self.conversions)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> CampaignConversion:
        return cls(
            id=str(payload.get("id") or ""),
            campaign=_as_text(payload, "campaign"),
            conversions=_as_int(payload, "conversions"),
            date=_as_timestamp(payload, "date"),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "campaign": self.campaign,
            "conversions": self.conversions,
            "date": format_timestamp(self.date),
        }


@dataclass(frozen=True, slots=True)
class RevenueDataPoint:
    id: str
    date: pendulum.DateTime
    revenue: float
    source: str | None = None
    region: str | None = None

    def __post_init__(self) -> None:
        _non_negative(revenue=self.revenue)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> RevenueDataPoint:
        return cls(
            id=str(payload.get("id") or ""),
            date=_as_timestamp(payload, "date"),
            revenue=_as_float(payload, "revenue"),
            source=payload.get("source") or None,
            region=payload.get("region") or None,
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "date": format_timestamp(self.date),
            "revenue": self.revenue,
        }
        if self.source:
            payload["source"] = self.source
        if self.region:
            payload["region"] = self.region
        return payload


@dataclass(frozen=True, slots=True)
class HealthStatus:
    status: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> HealthStatus:
        return cls(status=_as_text(payload, "status"))

    def to_payload(self) -> dict[str, Any]:
        return {"status": self.status}


@dataclass(frozen=True, slots=True)
class ChartSeriesPoint:
    date: pendulum.DateTime | None
    value: float
    label: str | None = None


@dataclass(frozen=True, slots=True)
class CategoryPoint:
    name: str
    value: float
    color: str | None = None


class TrendDirection(str, Enum):
    UP = "up"
    DOWN = "down"
    NEUTRAL = "neutral"


@dataclass(frozen=True, slots=True)
class TrendIndicator:
    change: float
    direction: TrendDirection
