# -*- coding: utf-8 -*-
"""
Resolve "n-th weekday of the month" rules to a day of month.

Example: Ada Lovelace Day is the second Tuesday of October. October 1st 2024
is a Tuesday, so ``resolve(1, "Tuesday", 2, 2024, 9)`` returns 8.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional, Union

from .dates import WEEKDAYS, days_in_month, start_weekday, weekday_of

LAST = -1

OCCURRENCES: Mapping[str, int] = MappingProxyType(
    {
        "first": 1,
        "second": 2,
        "third": 3,
        "fourth": 4,
        "last": LAST,
    }
)


def occurrence_rank(value: Union[str, int, None]) -> Optional[int]:
    """
    Map an occurrence name ("first" ... "fourth", "last") to its code.
    Positive integer ranks pass through unchanged; anything else is None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 or value == LAST else None
    if isinstance(value, str):
        return OCCURRENCES.get(value.strip().lower())
    return None


def resolve(
    first_weekday: int,
    day_name: str,
    occurrence: int,
    year: int,
    month: int,
) -> Optional[int]:
    """
    Day of month for the ``occurrence``-th ``day_name`` in ``month`` (0-based).

    ``first_weekday`` is the weekday of the 1st (Monday = 0). Positive ranks
    are not bounded by the month length; the caller validates the range.
    Returns None for an unknown weekday name or occurrence code.
    """
    if day_name not in WEEKDAYS:
        return None
    target = WEEKDAYS.index(day_name)

    if isinstance(occurrence, bool) or not isinstance(occurrence, int):
        return None

    if occurrence > 0:
        delta = (target - first_weekday + 7) % 7
        return 1 + delta + (occurrence - 1) * 7

    if occurrence == LAST:
        last_day = days_in_month(year, month)
        delta = (weekday_of(year, month, last_day) - target + 7) % 7
        return last_day - delta

    return None


def resolve_date(
    day_name: str,
    occurrence: Union[str, int],
    year: int,
    month: int,
) -> Optional[int]:
    rank = occurrence_rank(occurrence)
    if rank is None:
        return None
    return resolve(start_weekday(year, month), day_name, rank, year, month)
