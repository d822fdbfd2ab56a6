# -*- coding: utf-8 -*-
"""Exceptions raised by commemorative_days."""


class CommemorativeDaysError(Exception):
    """Base class for all errors raised by this package."""


class RuleSourceError(CommemorativeDaysError):
    """The rule data could not be read or is not a list of rules."""


class DescriptionFetchError(CommemorativeDaysError):
    """A description could not be retrieved from its URL."""


class CalendarWriteError(CommemorativeDaysError):
    """The finished calendar document could not be written."""
