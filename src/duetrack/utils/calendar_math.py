"""Calendar arithmetic for recurring days of the month.

Any day-of-month that does not exist in the target month (e.g. day 31 in
February) is clamped to the month's last day. ``relativedelta`` applies the
month shift first and then clamps ``day``, which is exactly that policy.
"""

import calendar
from datetime import date, timedelta

from dateutil.relativedelta import relativedelta


def day_in_month(year: int, month: int, day: int) -> date:
    """Return ``day`` of the given month, clamped to the month's last day."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last_day))


def shift_to_day(reference: date, months: int, day: int) -> date:
    """Advance ``reference`` by whole months and force the day of month.

    Args:
        reference: Starting date
        months: Number of months to move (may be negative)
        day: Day of month to force (1-31), clamped to the target month

    Returns:
        The shifted date
    """
    return reference + relativedelta(months=months, day=day)


def next_occurrence(day: int, today: date) -> date:
    """Return the next date on-or-after ``today`` that falls on ``day``."""
    candidate = shift_to_day(today, 0, day)
    if candidate < today:
        candidate = shift_to_day(today, 1, day)
    return candidate


def month_bounds(today: date) -> tuple[date, date]:
    """Return first and last day of the month containing ``today``."""
    start = today.replace(day=1)
    end = start + relativedelta(months=1) - timedelta(days=1)
    return start, end


def days_between(start: date, end: date) -> int:
    """Whole days from ``start`` to ``end`` (negative when ``end`` is earlier)."""
    return (end - start).days
