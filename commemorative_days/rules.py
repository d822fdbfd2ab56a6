# -*- coding: utf-8 -*-
"""
Floating rules and where they come from.

A rule record in ``days.json`` looks like::

    {
      "monthName": "October",
      "dayName": "Tuesday",
      "occurrence": "second",
      "name": "Ada Lovelace Day",
      "descriptionURL": "https://findingada.com/about/when-is-ald/"
    }
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol, Union

from .exceptions import RuleSourceError

logger = logging.getLogger(__name__)

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


@dataclass(frozen=True)
class FloatingRule:
    month_name: str
    day_name: str
    occurrence: Union[str, int]
    name: str
    description: Optional[str] = None
    description_url: Optional[str] = None


class RuleSource(Protocol):
    def load_rules(self) -> List[FloatingRule]:
        ...


def is_clean_url(url: Optional[str]) -> bool:
    """True for a non-empty URL without CR, LF or other control characters."""
    return bool(url) and not _CONTROL_CHARS.search(url)


def rule_from_record(record: dict) -> Optional[FloatingRule]:
    """
    Build a FloatingRule from one JSON record, or None if a required field
    is missing. ``occurence`` is accepted as a spelling of ``occurrence``.
    """
    occurrence = record.get("occurrence", record.get("occurence"))
    required = (record.get("monthName"), record.get("dayName"), record.get("name"))
    if not all(isinstance(v, str) for v in required):
        return None
    if not isinstance(occurrence, (str, int)) or isinstance(occurrence, bool):
        return None

    description = record.get("description")
    url = record.get("descriptionURL")
    if isinstance(url, str) and url and not is_clean_url(url):
        logger.warning("Ignoring descriptionURL with control characters for %r", record["name"])
        url = None
    return FloatingRule(
        month_name=record["monthName"],
        day_name=record["dayName"],
        occurrence=occurrence,
        name=record["name"],
        description=description if isinstance(description, str) and description else None,
        description_url=url if isinstance(url, str) and url else None,
    )


class JsonRuleSource:
    """Reads rules from a JSON file holding an array of rule records."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def load_rules(self) -> List[FloatingRule]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise RuleSourceError(f"cannot read rules from {self.path}: {e}") from e
        except json.JSONDecodeError as e:
            raise RuleSourceError(f"invalid JSON in {self.path}: {e}") from e

        if not isinstance(data, list):
            raise RuleSourceError(f"{self.path}: expected a JSON array of rules")

        rules: List[FloatingRule] = []
        for i, record in enumerate(data):
            rule = rule_from_record(record) if isinstance(record, dict) else None
            if rule is None:
                logger.warning("Skipping malformed rule #%d in %s", i, self.path)
                continue
            rules.append(rule)
        return rules
