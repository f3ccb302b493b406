"""Datetime helpers."""

from __future__ import annotations

import os
from datetime import datetime

import pendulum

DEFAULT_TZ = "UTC"
DEFAULT_LOCALE = "en"


def timezone_name() -> str:
    return os.environ.get("TIMEZONE", DEFAULT_TZ)


def export_locale() -> str:
    return os.environ.get("EXPORT_LOCALE", DEFAULT_LOCALE)


def now_in_tz() -> pendulum.DateTime:
    tz = pendulum.timezone(timezone_name())
    return pendulum.now(tz)


def parse_timestamp(value: str | datetime) -> pendulum.DateTime:
    """Parse an ISO-8601 string (or datetime) into an aware pendulum DateTime."""
    if isinstance(value, pendulum.DateTime):
        return value
    if isinstance(value, datetime):
        return pendulum.instance(value)
    parsed = pendulum.parse(value)
    if not isinstance(parsed, pendulum.DateTime):
        # Bare dates ("2024-01-01") come back as pendulum.Date.
        parsed = pendulum.datetime(parsed.year, parsed.month, parsed.day)
    return parsed


def format_timestamp(value: datetime) -> str:
    return pendulum.instance(value).to_iso8601_string()


def localized_date(value: datetime, locale: str | None = None) -> str:
    """Render the calendar day of ``value`` the way the locale writes short dates."""
    return pendulum.instance(value).format("L", locale=locale or export_locale())


def month_label(value: datetime) -> str:
    return pendulum.instance(value).format("MMM YYYY", locale="en")
