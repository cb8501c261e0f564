"""
Date interval helpers.

Booking stays are half-open ranges [check_in, check_out): a guest leaving on
the 12th and another arriving on the 12th never collide. Maintenance windows
are closed ranges [start, end].

All dates are YYYY-MM-DD strings, which compare correctly as strings.
"""

import math
from datetime import date, datetime, timedelta

DATE_FORMAT = '%Y-%m-%d'


def parse_date(value) -> date:
    """
    Parse a YYYY-MM-DD string (or pass through a date).

    Raises:
        ValueError: If the string is not a valid date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value, DATE_FORMAT).date()


def to_date_string(value) -> str:
    """Normalize a date or string to YYYY-MM-DD."""
    return parse_date(value).strftime(DATE_FORMAT)


def nights(check_in: str, check_out: str) -> int:
    """
    Number of nights between two dates.

    Zero or negative spans count as a single night.

    Args:
        check_in: Check-in date (YYYY-MM-DD)
        check_out: Check-out date (YYYY-MM-DD)

    Returns:
        int: ceil(days), at least 1
    """
    span = parse_date(check_out) - parse_date(check_in)
    days = math.ceil(span.total_seconds() / 86400)
    return max(days, 1)


def overlaps(start_a: str, end_a: str, start_b: str, end_b: str) -> bool:
    """Half-open overlap test: touching boundaries do not overlap."""
    return start_a < end_b and start_b < end_a


def overlaps_closed(start_a: str, end_a: str, start_b: str, end_b: str) -> bool:
    """Closed-interval overlap test (both ends inclusive)."""
    return start_a <= end_b and start_b <= end_a


def contains_date(day: str, start: str, end: str) -> bool:
    """Inclusive containment, used for maintenance windows."""
    return start <= day <= end


def date_range(start: str, end: str) -> list:
    """
    List every date in [start, end).

    Args:
        start: First date (YYYY-MM-DD)
        end: Exclusive end date (YYYY-MM-DD)

    Returns:
        list: YYYY-MM-DD strings
    """
    current = parse_date(start)
    stop = parse_date(end)
    dates = []
    while current < stop:
        dates.append(current.strftime(DATE_FORMAT))
        current += timedelta(days=1)
    return dates


def add_days(day: str, days: int) -> str:
    """Shift a YYYY-MM-DD date by a number of days."""
    return (parse_date(day) + timedelta(days=days)).strftime(DATE_FORMAT)


def month_bounds(year: int, month: int) -> tuple:
    """First day of the month and first day of the next month."""
    start = date(year, month, 1)
    if month == 12:
        end = date(year + 1, 1, 1)
    else:
        end = date(year, month + 1, 1)
    return start.strftime(DATE_FORMAT), end.strftime(DATE_FORMAT)
