from __future__ import annotations

import math
from datetime import date, datetime, time, timezone

# Average month length used for age calculations
DAYS_PER_MONTH = 30.44
SECONDS_PER_MONTH = DAYS_PER_MONTH * 24 * 60 * 60


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """Convert a datetime to UTC, assuming UTC for naive values."""
    if dt.tzinfo is None or dt.tzinfo.utcoffset(dt) is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def as_utc_datetime(value: date | datetime) -> datetime:
    """Promote a date to midnight UTC; normalize datetimes to UTC."""
    if isinstance(value, datetime):
        return to_utc(value)
    return datetime.combine(value, time(0, 0), tzinfo=timezone.utc)


def months_between(start: date | datetime, end: datetime) -> int:
    """Whole average-length months elapsed from `start` to `end`.

    Negative spans (birth date in the future) yield a negative count.
    """
    delta = to_utc(end) - as_utc_datetime(start)
    return math.floor(delta.total_seconds() / SECONDS_PER_MONTH)
