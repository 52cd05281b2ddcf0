"""Formatting helpers for durations, counts and relative times."""
from datetime import datetime
from decimal import Decimal
from decimal import ROUND_HALF_UP
from typing import Any

import humanize

from repodash.utils.dates import parse_timestamp
from repodash.utils.dates import utc_now


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round with halves going up, as dashboards usually expect.

    >>> round_half_up(2.5), round(2.5)
    (3.0, 2)
    """
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def format_duration(seconds: float) -> str:
    """
    >>> format_duration(125)
    '2m 5s'
    >>> format_duration(3665)
    '1h 1m 5s'
    """
    seconds = max(0, int(seconds))
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)

    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if secs or not parts:
        parts.append(f"{secs}s")
    return ' '.join(parts)


def format_count(value: int) -> str:
    return humanize.intcomma(value)


def format_relative_time(value: Any, now: datetime | None = None) -> str:
    """'3 days ago' style text for a timestamp; '-' when it cannot be parsed."""
    ts = parse_timestamp(value)
    if ts is None:
        return '-'
    return humanize.naturaltime(ts, when=now or utc_now())


def format_date(value: Any) -> str:
    """'Jan 15, 2024' style date; '-' when it cannot be parsed."""
    ts = parse_timestamp(value)
    if ts is None:
        return '-'
    return f"{ts.strftime('%b')} {ts.day}, {ts.year}"
