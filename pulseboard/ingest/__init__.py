"""Ingestion helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum


class Domain(str, Enum):
    OVERVIEW_LATEST = "overview-latest"
    OVERVIEW_ALL = "overview-all"
    CAMPAIGNS = "campaigns"
    REVENUE = "revenue"
    HEALTH = "health"


@dataclass(frozen=True, slots=True)
class DomainConfig:
    path: str
    refresh_seconds: float
    max_attempts: int
    many: bool


def _interval(domain: Domain, default: float) -> float:
    env_key = f"REFRESH_{domain.name}_SECONDS"
    return float(os.environ.get(env_key, default))


DOMAINS: dict[Domain, DomainConfig] = {
    Domain.OVERVIEW_LATEST: DomainConfig("/overview/latest", _interval(Domain.OVERVIEW_LATEST, 30), 3, False),
    Domain.OVERVIEW_ALL: DomainConfig("/overview", _interval(Domain.OVERVIEW_ALL, 60), 3, True),
    Domain.CAMPAIGNS: DomainConfig("/campaigns", _interval(Domain.CAMPAIGNS, 30), 3, True),
    Domain.REVENUE: DomainConfig("/revenue", _interval(Domain.REVENUE, 30), 3, True),
    Domain.HEALTH: DomainConfig("/health", _interval(Domain.HEALTH, 60), 5, False),
}


def refresh_intervals() -> dict[Domain, float]:
    return {domain: config.refresh_seconds for domain, config in DOMAINS.items()}
