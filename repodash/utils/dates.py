"""Date helpers for timestamps and the trailing monthly window."""
from datetime import date
from datetime import datetime
from datetime import timedelta
from datetime import timezone
from typing import Any


def parse_timestamp(value: Any) -> datetime | None:
    """
    Parse a GitHub ISO-8601 timestamp into an aware UTC datetime.

    >>> parse_timestamp('2024-01-15T10:30:00Z')
    datetime.datetime(2024, 1, 15, 10, 30, tzinfo=datetime.timezone.utc)
    """
    if not value:
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        try:
            dt = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
        except (ValueError, TypeError):
            return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def month_key(value: datetime) -> tuple[int, int]:
    return (value.year, value.month)


def format_month_label(year: int, month: int) -> str:
    """'Jan 2024' style label for a month key."""
    return date(year, month, 1).strftime('%b %Y')


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return (index // 12, index % 12 + 1)


def trailing_months(now: datetime | None = None, count: int = 12) -> list[tuple[int, int]]:
    """The `count` calendar months ending at the month of `now`, oldest first."""
    now = now or utc_now()
    return [
        shift_month(now.year, now.month, -offset)
        for offset in range(count - 1, -1, -1)
    ]


def is_older_than(value: Any, months: float, now: datetime | None = None) -> bool:
    """
    True when the timestamp lies more than `months` months before `now`.

    Fractional months use a 30-day month, so 1 / 4.3 is roughly a week.
    """
    ts = parse_timestamp(value)
    if ts is None:
        return False
    now = now or utc_now()
    whole = int(months)
    year, month = shift_month(now.year, now.month, -whole)
    # Clamp the day the way a calendar does for short months
    day = now.day
    while True:
        try:
            cutoff = now.replace(year=year, month=month, day=day)
            break
        except ValueError:
            day -= 1
    cutoff -= timedelta(days=(months - whole) * 30)
    return ts < cutoff
