from __future__ import annotations

from datetime import date, datetime

ISO_DATE = "%Y-%m-%d"
CLOCK_TIME = "%H:%M"


def parse_iso_date(value: str) -> date:
    """Leave dates arrive from the client as YYYY-MM-DD."""
    return datetime.strptime(value, ISO_DATE).date()


def now_local() -> datetime:
    """Server wall-clock time. Work dates and clock stamps are derived from it."""
    return datetime.now()


def format_clock_time(value: datetime) -> str:
    return value.strftime(CLOCK_TIME)
