# -*- coding: utf-8 -*-
"""
Generate an iCalendar (.ics) file of commemorative days.

- Rules are read from days.json (see commemorative_days.rules)
- Range: START_YEAR..END_YEAR inclusive, overridable on the command line
- Output: days.ics

Usage:
  gen-commemorative-cal
  gen-commemorative-cal --start-year 2024 --end-year 2026 --no-fetch -o out.ics
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence, Union

from .describe import WebDescriptionProvider
from .events import ResolvedEvent, events_for_month
from .exceptions import CalendarWriteError, RuleSourceError
from .ics import CALENDAR_NAME, build_ics, count_events
from .rules import FloatingRule, JsonRuleSource

logger = logging.getLogger(__name__)


# ---- Configuration ----
RULES_FILE = "days.json"
OUTPUT_FILE = "days.ics"
START_YEAR = 2020
END_YEAR = 2030
FETCH_TIMEOUT = 10  # seconds
FETCH_MIN_INTERVAL = 1.0  # seconds between description requests


def generate(
    rules: Sequence[FloatingRule],
    start_year: int,
    end_year: int,
    fetch_descriptions: bool = True,
    stamp: Optional[str] = None,
    calendar_name: str = CALENDAR_NAME,
) -> str:
    describe = None
    if fetch_descriptions:
        describe = WebDescriptionProvider(timeout=FETCH_TIMEOUT, min_interval=FETCH_MIN_INTERVAL)

    def month_events(year: int, month: int) -> List[ResolvedEvent]:
        return events_for_month(rules, year, month, describe=describe)

    return build_ics(month_events, start_year, end_year, stamp=stamp, calendar_name=calendar_name)


def write_calendar(path: Union[str, Path], text: str) -> None:
    """
    Write ``text`` to a temporary file beside ``path``, then move it into
    place. A failed write leaves any existing file at ``path`` untouched.
    """
    path = Path(path)
    try:
        fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    except OSError as e:
        raise CalendarWriteError(f"cannot write {path}: {e}") from e

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
        # mkstemp files start out 0600
        os.chmod(tmp, path.stat().st_mode & 0o777 if path.exists() else 0o644)
        os.replace(tmp, path)
    except OSError as e:
        try:
            os.unlink(tmp)
        except OSError:
            logger.warning("Could not remove temporary file %s", tmp)
        raise CalendarWriteError(f"cannot write {path}: {e}") from e


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Generate an .ics file of commemorative days.")
    ap.add_argument("--rules", default=RULES_FILE, help="Rule file (JSON array).")
    ap.add_argument("-o", "--output", default=OUTPUT_FILE, help="Output .ics path.")
    ap.add_argument("--start-year", type=int, default=START_YEAR, help="First year (inclusive).")
    ap.add_argument("--end-year", type=int, default=END_YEAR, help="Last year (inclusive).")
    ap.add_argument("--no-fetch", action="store_true",
                    help="Do not fetch missing descriptions from descriptionURL.")
    ap.add_argument("--stamp", default=None,
                    help="Fixed DTSTAMP (YYYYMMDDTHHMMSSZ) for reproducible output.")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return ap.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.start_year > args.end_year:
        print(f"Error: start year {args.start_year} is after end year {args.end_year}",
              file=sys.stderr)
        return 2

    try:
        rules = JsonRuleSource(args.rules).load_rules()
        ics_text = generate(
            rules,
            args.start_year,
            args.end_year,
            fetch_descriptions=not args.no_fetch,
            stamp=args.stamp,
        )
        write_calendar(args.output, ics_text)
    except (RuleSourceError, CalendarWriteError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Generated: {args.output}")
    print(f"Years: {args.start_year} ~ {args.end_year}")
    print(f"Events: {count_events(ics_text)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
