# -*- coding: utf-8 -*-
"""
Render resolved events as an iCalendar (.ics) document.

- One all-day, non-blocking VEVENT per event (DTSTART == DTEND)
- UID is derived from date + name, so it is stable between runs
- Lines are CRLF-terminated
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, List, Mapping, Optional, Sequence, Tuple, Union

from .dates import is_valid_day
from .events import ResolvedEvent
from .rules import is_clean_url


# ---- Calendar constants ----
PRODID = "-//Commemorative Days Calendar//EN"
CALENDAR_NAME = "Commemorative Days"
CALENDAR_TIMEZONE = "UTC"
UID_DOMAIN = "commemorative-days"
EVENT_TRANSP = "TRANSPARENT"  # does not block time
CRLF = "\r\n"

EventsByMonth = Union[
    Callable[[int, int], Sequence[ResolvedEvent]],
    Mapping[Tuple[int, int], Sequence[ResolvedEvent]],
]


# ---- Field formatting ----
def dtstamp_utc(now: Optional[datetime] = None) -> str:
    """
    UTC timestamp for DTSTAMP. A naive ``now`` is taken to be UTC already;
    an aware one is converted.
    """
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    now = now.astimezone(timezone.utc)
    return now.strftime("%Y%m%dT%H%M%SZ")


def format_date_ics(year: int, month: int, day: int) -> str:
    """YYYYMMDD for a 0-based ``month``."""
    return f"{year:04d}{month + 1:02d}{day:02d}"


def escape_text(text: str) -> str:
    """
    Escape a TEXT value. The backslash must go first, otherwise the
    backslashes inserted for ; , and newline would be doubled.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return (
        text.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\n", "\\n")
    )


def unescape_text(text: str) -> str:
    out: List[str] = []
    i = 0
    while i < len(text):
        c = text[i]
        if c == "\\" and i + 1 < len(text):
            nxt = text[i + 1]
            out.append("\n" if nxt in "nN" else nxt)
            i += 2
        else:
            out.append(c)
            i += 1
    return "".join(out)


def make_uid(year: int, month: int, day: int, name: str) -> str:
    clean_name = "".join(ch for ch in name if ch.isascii() and ch.isalnum())
    return f"{format_date_ics(year, month, day)}-{clean_name}@{UID_DOMAIN}"


def event_url(event: ResolvedEvent) -> Optional[str]:
    """The event URL, or None if it is missing or holds control characters."""
    return event.description_url if is_clean_url(event.description_url) else None


def long_text(event: ResolvedEvent) -> str:
    """Description followed by a "More information" line when there is a URL."""
    parts = [event.description or ""]
    url = event_url(event)
    if url:
        parts.append(f"More information: {url}")
    return "\n\n".join(p for p in parts if p)


# ---- Document ----
def _lookup(events_by_month: EventsByMonth) -> Callable[[int, int], Sequence[ResolvedEvent]]:
    if isinstance(events_by_month, Mapping):
        return lambda year, month: events_by_month.get((year, month), ())
    return events_by_month


def event_lines(year: int, month: int, event: ResolvedEvent, stamp: str) -> List[str]:
    ds = format_date_ics(year, month, event.day)
    lines = [
        "BEGIN:VEVENT",
        f"UID:{make_uid(year, month, event.day, event.name)}",
        f"DTSTAMP:{stamp}",
        f"DTSTART;VALUE=DATE:{ds}",
        f"DTEND;VALUE=DATE:{ds}",
        f"SUMMARY:{escape_text(event.name)}",
    ]
    url = event_url(event)
    if url:
        lines.append(f"URL:{url}")

    description = long_text(event)
    if description:
        lines.append(f"DESCRIPTION:{escape_text(description)}")

    lines.append(f"TRANSP:{EVENT_TRANSP}")
    lines.append("END:VEVENT")
    return lines


def build_ics(
    events_by_month: EventsByMonth,
    start_year: int,
    end_year: int,
    stamp: Optional[str] = None,
    calendar_name: str = CALENDAR_NAME,
    calendar_description: Optional[str] = None,
) -> str:
    """
    Build the whole document for ``start_year``..``end_year`` inclusive.

    ``events_by_month`` is either ``f(year, month) -> events`` or a mapping
    keyed by ``(year, month)``; months are 0-based. Events are written
    year by year, month by month, in list order. Events whose day is not
    inside the month are skipped. Pass a fixed ``stamp`` for reproducible
    output.
    """
    if start_year > end_year:
        raise ValueError(f"start_year {start_year} is after end_year {end_year}")

    get_events = _lookup(events_by_month)
    stamp = stamp or dtstamp_utc()
    if calendar_description is None:
        calendar_description = f"Commemorative days calendar ({start_year}–{end_year})"

    lines: List[str] = []
    lines.append("BEGIN:VCALENDAR")
    lines.append("VERSION:2.0")
    lines.append(f"PRODID:{PRODID}")
    lines.append("CALSCALE:GREGORIAN")
    lines.append("METHOD:PUBLISH")
    lines.append(f"X-WR-CALNAME:{escape_text(calendar_name)}")
    lines.append(f"X-WR-TIMEZONE:{CALENDAR_TIMEZONE}")
    lines.append(f"X-WR-CALDESC:{escape_text(calendar_description)}")

    for year in range(start_year, end_year + 1):
        for month in range(12):
            for event in get_events(year, month):
                if not is_valid_day(year, month, event.day):
                    continue
                lines.extend(event_lines(year, month, event, stamp))

    lines.append("END:VCALENDAR")
    return CRLF.join(lines) + CRLF


def count_events(document: str) -> int:
    return document.count(f"{CRLF}BEGIN:VEVENT{CRLF}")
