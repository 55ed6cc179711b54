"""Date-time helpers for deadline calculations."""

import math
from datetime import date, datetime, timezone

SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400


def utcnow() -> datetime:
    """Return the current time as a naive UTC timestamp, the storage convention."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware timestamp to naive UTC; naive values are assumed UTC already."""

    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def hours_until(deadline: datetime, now: datetime) -> float:
    """Fractional hours from ``now`` to ``deadline`` (negative once passed)."""

    return (to_naive_utc(deadline) - to_naive_utc(now)).total_seconds() / SECONDS_PER_HOUR


def ceil_hours_until(deadline: datetime, now: datetime) -> int:
    seconds = (to_naive_utc(deadline) - to_naive_utc(now)).total_seconds()
    return math.ceil(seconds / SECONDS_PER_HOUR)


def ceil_days_until(deadline: datetime, now: datetime) -> int:
    seconds = (to_naive_utc(deadline) - to_naive_utc(now)).total_seconds()
    return math.ceil(seconds / SECONDS_PER_DAY)


def utc_day(value: datetime) -> date:
    """Return the UTC calendar day of the timestamp."""

    return to_naive_utc(value).date()


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """First instant of the month and first instant of the next one."""

    start = datetime(year, month, 1)
    if month == 12:
        return start, datetime(year + 1, 1, 1)
    return start, datetime(year, month + 1, 1)
