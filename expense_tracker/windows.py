"""Date windows used by the analytics and budget queries.

Every window is a ``(start, end)`` pair of naive server-local datetimes and
both bounds are inclusive.
"""

import calendar
from datetime import datetime, time, timedelta
from typing import Optional, Tuple

Window = Tuple[datetime, datetime]

PERIODS = ("week", "month", "year")


def _now(now: Optional[datetime]) -> datetime:
    return now if now is not None else datetime.now()


def add_months(year: int, month: int, n: int):
    """
    Add n months to given (year, month)
    Returns new (year, month)
    """
    new_month = month + n
    new_year = year + (new_month - 1) // 12
    new_month = ((new_month - 1) % 12) + 1
    return new_year, new_month


def start_of_month(now: datetime) -> datetime:
    return datetime(now.year, now.month, 1)


def start_of_year(now: datetime) -> datetime:
    return datetime(now.year, 1, 1)


def period_window(period: str, now: Optional[datetime] = None) -> Window:
    """Window for a category breakdown; unknown periods get the month window."""
    now = _now(now)
    if period == "week":
        return now - timedelta(days=7), now
    if period == "year":
        return start_of_year(now), now
    return start_of_month(now), now


def trend_window(months: int, now: Optional[datetime] = None) -> Window:
    now = _now(now)
    year, month = add_months(now.year, now.month, -months)
    if year < datetime.min.year:
        # reaching back past year 1 means every expense is in range
        return datetime.min, now
    return datetime(year, month, 1), now


def today_window(now: Optional[datetime] = None) -> Window:
    now = _now(now)
    return (
        datetime.combine(now.date(), time.min),
        datetime.combine(now.date(), time.max),
    )


def calendar_month_window(now: Optional[datetime] = None) -> Window:
    now = _now(now)
    last_day = calendar.monthrange(now.year, now.month)[1]
    return (
        start_of_month(now),
        datetime.combine(now.date().replace(day=last_day), time.max),
    )
