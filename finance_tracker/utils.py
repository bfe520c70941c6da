# finance_tracker/utils.py
from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime
from typing import Tuple


def as_date(value) -> date:
    """
    Reduce a date, datetime or ISO string to a calendar date.
    Time of day is dropped.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return datetime.fromisoformat(value.strip()).date()
    raise ValueError(f"Unrecognized date value: {value!r}")


def month_bounds(day) -> Tuple[date, date]:
    """
    Return the first and last calendar day of the month containing *day*.
    """
    d = as_date(day)
    last = monthrange(d.year, d.month)[1]
    return date(d.year, d.month, 1), date(d.year, d.month, last)


def add_months(original_date: date, months: int) -> date:
    month_index = original_date.month - 1 + months
    year = original_date.year + month_index // 12
    month = month_index % 12 + 1
    day = min(original_date.day, monthrange(year, month)[1])
    return date(year, month, day)
