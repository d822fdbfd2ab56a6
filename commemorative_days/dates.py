# -*- coding: utf-8 -*-
"""
Month arithmetic shared by the resolver, the month index and any grid renderer.

Months are 0-based (January = 0); weekdays use Monday = 0 ... Sunday = 6,
the same numbering as ``datetime.date.weekday()``.
"""

from __future__ import annotations

import calendar
from typing import Optional, Tuple


# ---- Reference tables ----
MONTHS: Tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

WEEKDAYS: Tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


# ---- Arithmetic ----
def days_in_month(year: int, month: int) -> int:
    """Number of days in ``month`` (0-based) of ``year``, leap years included."""
    return calendar.monthrange(year, month + 1)[1]


def weekday_of(year: int, month: int, day: int) -> int:
    return calendar.weekday(year, month + 1, day)


def start_weekday(year: int, month: int) -> int:
    """Weekday of the 1st, Monday = 0 ... Sunday = 6."""
    return weekday_of(year, month, 1)


def weeks_needed(year: int, month: int) -> int:
    """
    Rows of seven cells needed to show the month when the first row is
    padded with ``start_weekday`` leading blanks.
    """
    cells = start_weekday(year, month) + days_in_month(year, month)
    return -(-cells // 7)


def is_valid_day(year: int, month: int, day: Optional[int]) -> bool:
    if not isinstance(day, int) or isinstance(day, bool):
        return False
    return 1 <= day <= days_in_month(year, month)


def month_index(month_name: str) -> Optional[int]:
    try:
        return MONTHS.index(month_name)
    except ValueError:
        return None
