"""Calendar helpers for month windows and reporting periods."""

import calendar
from datetime import date

from .exceptions import InvalidPeriodError


def validate_year_month(year, month):
    """Return ``(year, month)`` as ints or raise ``InvalidPeriodError``."""
    try:
        year, month = int(year), int(month)
    except (TypeError, ValueError):
        raise InvalidPeriodError("Year and month must be integers")

    if not 1 <= month <= 12:
        raise InvalidPeriodError(f"Invalid month: {month}. Use 1-12")
    if not 1 <= year <= 9999:
        raise InvalidPeriodError(f"Invalid year: {year}")
    return year, month


def month_window(year, month):
    """Inclusive ``(first_day, last_day)`` of a calendar month."""
    year, month = validate_year_month(year, month)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def month_key(year, month) -> str:
    """Summary key, e.g. ``2025_03``."""
    year, month = validate_year_month(year, month)
    return f"{year}_{month:02d}"


def parse_period(period: str):
    """Parse ``YYYY-MM`` into ``(year, month)``."""
    try:
        year, month = period.split('-')
    except (AttributeError, ValueError):
        raise InvalidPeriodError("Invalid period format. Use YYYY-MM")
    return validate_year_month(year, month)


def add_months(day: date, months: int) -> date:
    """Shift a date by whole months, clamping the day to the target month."""
    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def iter_months(start: date, end: date):
    """Yield ``(year, month)`` for every month touched by ``[start, end]``."""
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        yield year, month
        month += 1
        if month > 12:
            year, month = year + 1, 1
