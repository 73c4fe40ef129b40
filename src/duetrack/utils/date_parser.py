"""Date parsing utilities."""

from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from duetrack.utils.calendar_math import month_bounds


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "January 15, 2024") and a few
    relative forms resolved against ``today``: "today", "yesterday",
    "tomorrow", "last month", "this month", "next month" (first day of the
    month) and offsets such as "+3d", "-2w" or "+1m".

    Args:
        date_str: Date string
        today: Reference date (defaults to the system date)

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    if date_str is None or not date_str.strip():
        raise ValueError("Empty date string")
    text = date_str.strip().lower()
    today = today or date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "this month": today.replace(day=1),
        "next month": (today + relativedelta(months=1)).replace(day=1),
    }
    if text in relative_dates:
        return relative_dates[text]

    if text[0] in "+-" and len(text) > 2 and text[1:-1].isdigit():
        count = int(text[1:-1]) * (-1 if text[0] == "-" else 1)
        unit = text[-1]
        if unit == "d":
            return today + timedelta(days=count)
        if unit == "w":
            return today + timedelta(weeks=count)
        if unit == "m":
            return today + relativedelta(months=count)

    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}") from e


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get start and end dates for a named period.

    Args:
        period: One of this-month, last-month, next-month, this-year
        today: Reference date (defaults to the system date)

    Returns:
        Tuple of (start_date, end_date), both inclusive

    Raises:
        ValueError: If the period is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()

    if period == "this-month":
        return month_bounds(today)
    if period == "last-month":
        return month_bounds(today - relativedelta(months=1))
    if period == "next-month":
        return month_bounds(today + relativedelta(months=1))
    if period == "this-year":
        return today.replace(month=1, day=1), today.replace(month=12, day=31)

    raise ValueError(
        f"Unknown period: '{period}'. Supported periods: this-month, last-month, next-month, this-year"
    )
