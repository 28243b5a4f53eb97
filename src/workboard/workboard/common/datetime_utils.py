from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Optional

from ..core.constants import DAYS_PER_WEEK


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD (or an ISO date-time starting with it) into date."""
    return datetime.strptime(value.strip()[:10], "%Y-%m-%d").date()


def coerce_date(value: Any) -> Optional[date]:
    """Normalize a stored date value.

    The store can hand back:
    - datetime.date / datetime.datetime
    - ISO strings, either "2024-01-01" or the legacy "2024-01-01T00:00:00.000Z"
    - None / empty string (missing)
    """

    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return parse_iso_date(value)
    raise TypeError(f"Unsupported date value type: {type(value)!r}")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def start_of_week(day: date) -> date:
    # Weeks start on Monday.
    return day - timedelta(days=day.weekday())


def days_between(start: date, end: date) -> int:
    return (end - start).days


def week_of_month(day: date) -> int:
    """1-based week number of ``day`` inside its month (Monday-start grid)."""
    first_week_start = start_of_week(day.replace(day=1))
    return days_between(first_week_start, start_of_week(day)) // DAYS_PER_WEEK + 1


def format_display_date(day: date) -> str:
    return day.strftime("%Y.%m.%d")

