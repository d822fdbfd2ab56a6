# -*- coding: utf-8 -*-
"""
Resolve the rules that fall in one month into dated events.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from .dates import MONTHS, is_valid_day, start_weekday
from .occurrence import occurrence_rank, resolve
from .rules import FloatingRule

logger = logging.getLogger(__name__)

Describe = Callable[[str], str]


@dataclass(frozen=True)
class ResolvedEvent:
    day: Optional[int]
    name: str
    description: str = ""
    description_url: Optional[str] = None


def _enrich(rule: FloatingRule, describe: Optional[Describe]) -> str:
    if rule.description:
        return rule.description
    if describe is None or not rule.description_url:
        return ""
    try:
        return describe(rule.description_url) or ""
    except Exception as e:
        # any provider failure degrades to an empty description
        logger.warning("Could not fetch description for %r from %s: %s",
                       rule.name, rule.description_url, e)
        return ""


def events_for_month(
    rules: Iterable[FloatingRule],
    year: int,
    month: int,
    describe: Optional[Describe] = None,
) -> List[ResolvedEvent]:
    """
    Events of ``month`` (0-based) in ``year``, in rule order.

    Rules for other months, with an unknown weekday or occurrence, or whose
    day falls outside the month (e.g. a fifth Monday that does not exist)
    are left out. ``describe(url)`` is called for rules that have a URL but
    no description; if it fails the description is empty.
    """
    month_name = MONTHS[month]
    first_weekday = start_weekday(year, month)

    events: List[ResolvedEvent] = []
    for rule in rules:
        if rule.month_name != month_name:
            continue

        rank = occurrence_rank(rule.occurrence)
        day = None if rank is None else resolve(first_weekday, rule.day_name, rank, year, month)
        if not is_valid_day(year, month, day):
            logger.debug("Dropping %r for %s %d: resolved day %r",
                         rule.name, month_name, year, day)
            continue

        events.append(
            ResolvedEvent(
                day=day,
                name=rule.name,
                description=_enrich(rule, describe),
                description_url=rule.description_url,
            )
        )
    return events
