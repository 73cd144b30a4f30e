from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time(0, 0, 0))


def end_of_day(day: date) -> datetime:
    """Last whole second of ``day`` (23:59:59)."""
    return datetime.combine(day, time(23, 59, 59))


def iter_days(start: date, end: date):
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def to_iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def format_hhmm(value: Optional[datetime]) -> str:
    return value.strftime("%H:%M") if value else "-"
