"""Calendar-month helpers.

All ranges returned here are inclusive on both ends, matching how
transactions are filtered (``start <= tx.date <= end``).
"""

import calendar
from collections.abc import Iterator
from datetime import date


def month_start(d: date) -> date:
    """First day of the month containing ``d``."""
    return d.replace(day=1)


def month_end(d: date) -> date:
    """Last day of the month containing ``d``."""
    last_day = calendar.monthrange(d.year, d.month)[1]
    return d.replace(day=last_day)


def shift_months(d: date, months: int) -> date:
    """Move ``d`` by a number of calendar months, clamping the day.

    ``shift_months(date(2024, 3, 31), -1)`` is ``date(2024, 2, 29)``.
    """
    index = d.year * 12 + (d.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def month_range(d: date) -> tuple[date, date]:
    """Return (first_day, last_day) of the month containing ``d``."""
    return month_start(d), month_end(d)


def iterate_months(anchor: date, months_back: int) -> Iterator[tuple[date, date]]:
    """Yield inclusive month ranges for the last ``months_back`` months.

    Ends with the month containing ``anchor``; oldest first.
    """
    for offset in range(months_back - 1, -1, -1):
        yield month_range(shift_months(month_start(anchor), -offset))


def format_month(d: date) -> str:
    """Format a month label, e.g. ``Jan 2024``."""
    return d.strftime("%b %Y")


def parse_month(value: str) -> date:
    """Parse ``YYYY-MM`` into the first day of that month.

    Raises:
        ValueError: If the value is not a valid month.
    """
    try:
        year_str, month_str = value.split("-")
        return date(int(year_str), int(month_str), 1)
    except ValueError as e:
        raise ValueError(f"Invalid month '{value}', expected YYYY-MM") from e


def days_between(start: date, end: date) -> int:
    """Whole days from ``start`` to ``end`` (negative if end is earlier)."""
    return (end - start).days
