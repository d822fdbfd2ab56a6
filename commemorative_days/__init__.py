# -*- coding: utf-8 -*-
"""
commemorative_days
~~~~~~~~~~~~~~~~~~

Resolve floating commemorative days ("second Tuesday of October") to dates
and publish them as an iCalendar file.

Basic usage::

    from commemorative_days import JsonRuleSource, events_for_month, build_ics

    rules = JsonRuleSource("days.json").load_rules()
    events = events_for_month(rules, 2024, 9)          # October 2024
    ics = build_ics(lambda y, m: events_for_month(rules, y, m), 2024, 2025)
"""

from __future__ import annotations

from .dates import (
    MONTHS,
    WEEKDAYS,
    days_in_month,
    is_valid_day,
    month_index,
    start_weekday,
    weekday_of,
    weeks_needed,
)
from .describe import DescriptionProvider, WebDescriptionProvider
from .events import ResolvedEvent, events_for_month
from .exceptions import (
    CalendarWriteError,
    CommemorativeDaysError,
    DescriptionFetchError,
    RuleSourceError,
)
from .ics import build_ics, escape_text, make_uid, unescape_text
from .occurrence import OCCURRENCES, occurrence_rank, resolve, resolve_date
from .rules import FloatingRule, JsonRuleSource, RuleSource

__all__ = [
    "MONTHS",
    "WEEKDAYS",
    "OCCURRENCES",
    "days_in_month",
    "start_weekday",
    "weekday_of",
    "weeks_needed",
    "is_valid_day",
    "month_index",
    "occurrence_rank",
    "resolve",
    "resolve_date",
    "FloatingRule",
    "RuleSource",
    "JsonRuleSource",
    "ResolvedEvent",
    "events_for_month",
    "DescriptionProvider",
    "WebDescriptionProvider",
    "build_ics",
    "escape_text",
    "unescape_text",
    "make_uid",
    "CommemorativeDaysError",
    "RuleSourceError",
    "DescriptionFetchError",
    "CalendarWriteError",
]
