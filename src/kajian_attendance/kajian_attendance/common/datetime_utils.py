from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_clock_time(value: str) -> time:
    """Parse HH:MM or HH:MM:SS into a wall-clock time."""
    v = value.strip()
    fmt = "%H:%M:%S" if v.count(":") == 2 else "%H:%M"
    return datetime.strptime(v, fmt).time()


def parse_iso_datetime(value: str) -> datetime:
    return datetime.fromisoformat(value.strip())


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def coerce_date(value) -> date:
    """Accept a date, datetime or YYYY-MM-DD string (store rows vary by driver)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_iso_date(str(value))


def coerce_datetime(value):
    if value is None or isinstance(value, datetime):
        return value
    return parse_iso_datetime(str(value))


def coerce_time(value) -> Optional[time]:
    """Accept a time, a timedelta (mysql-connector TIME) or an HH:MM[:SS] string."""
    if value is None or isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        seconds = int(value.total_seconds()) % 86400
        return time(seconds // 3600, seconds % 3600 // 60, seconds % 60)
    if isinstance(value, str):
        return parse_clock_time(value)
    raise TypeError(f"Unsupported TIME value: {value!r}")
