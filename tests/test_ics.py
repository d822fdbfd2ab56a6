"""
tests/test_ics.py

Covers:
  - TEXT escaping order and its inverse
  - UID stability / uniqueness
  - Document envelope, event blocks and optional fields
  - Determinism with a fixed DTSTAMP
"""

from datetime import datetime, timedelta, timezone

import pytest

from commemorative_days.events import ResolvedEvent
from commemorative_days.ics import (
    build_ics,
    count_events,
    dtstamp_utc,
    escape_text,
    format_date_ics,
    long_text,
    make_uid,
    unescape_text,
)

STAMP = "20240101T120000Z"


def lines_of(document):
    assert document.endswith("\r\n")
    return document[:-2].split("\r\n")


# ── Field formatting ─────────────────────────────────────────────────────────

class TestEscaping:

    def test_each_special_character(self):
        assert escape_text("a\\b") == "a\\\\b"
        assert escape_text("a;b") == "a\\;b"
        assert escape_text("a,b") == "a\\,b"
        assert escape_text("a\nb") == "a\\nb"

    def test_backslash_escaped_first(self):
        assert escape_text("\\;") == "\\\\\\;"

    def test_carriage_returns_normalised(self):
        assert escape_text("a\r\nb\rc") == "a\\nb\\nc"

    def test_round_trip(self):
        original = "a,b;c\nd\\e"
        assert unescape_text(escape_text(original)) == original

    def test_unescape_uppercase_n(self):
        assert unescape_text("a\\Nb") == "a\nb"


class TestFormatting:

    def test_format_date_zero_based_month(self):
        assert format_date_ics(2024, 0, 5) == "20240105"
        assert format_date_ics(2024, 11, 31) == "20241231"

    def test_dtstamp_utc(self):
        cet = timezone(timedelta(hours=1))
        assert dtstamp_utc(datetime(2024, 3, 1, 13, 4, 5, tzinfo=cet)) == "20240301T120405Z"

    def test_dtstamp_naive_taken_as_utc(self):
        assert dtstamp_utc(datetime(2024, 3, 1, 13, 4, 5)) == "20240301T130405Z"

    def test_dtstamp_defaults_to_now(self):
        stamp = dtstamp_utc()
        assert len(stamp) == 16 and stamp.endswith("Z") and stamp[8] == "T"

    def test_long_text(self):
        assert long_text(ResolvedEvent(1, "x")) == ""
        assert long_text(ResolvedEvent(1, "x", "Text")) == "Text"
        assert long_text(ResolvedEvent(1, "x", "", "https://e.org")) == \
            "More information: https://e.org"
        assert long_text(ResolvedEvent(1, "x", "Text", "https://e.org")) == \
            "Text\n\nMore information: https://e.org"


class TestUid:

    def test_stable(self):
        assert make_uid(2024, 9, 8, "Ada Lovelace Day") == make_uid(2024, 9, 8, "Ada Lovelace Day")

    def test_format(self):
        assert make_uid(2024, 9, 8, "Ada Lovelace Day!") == \
            "20241008-AdaLovelaceDay@commemorative-days"

    def test_differs_by_month_and_year(self):
        uids = {
            make_uid(2024, 9, 8, "Day"),
            make_uid(2024, 10, 8, "Day"),
            make_uid(2025, 9, 8, "Day"),
        }
        assert len(uids) == 3

    def test_no_collision_between_month_and_day_digits(self):
        # 11 February vs 1 December
        assert make_uid(2024, 1, 11, "Day") != make_uid(2024, 11, 1, "Day")


# ── Document ─────────────────────────────────────────────────────────────────

@pytest.fixture
def events():
    return {
        (2024, 4): [ResolvedEvent(27, "Memorial Day")],
        (2024, 9): [
            ResolvedEvent(8, "Ada Lovelace Day", "Women in STEM, worldwide",
                          "https://findingada.com/"),
            ResolvedEvent(32, "Corrupt"),
        ],
    }


class TestBuildIcs:

    def test_envelope(self, events):
        lines = lines_of(build_ics(events, 2024, 2024, stamp=STAMP))
        assert lines[:8] == [
            "BEGIN:VCALENDAR",
            "VERSION:2.0",
            "PRODID:-//Commemorative Days Calendar//EN",
            "CALSCALE:GREGORIAN",
            "METHOD:PUBLISH",
            "X-WR-CALNAME:Commemorative Days",
            "X-WR-TIMEZONE:UTC",
            "X-WR-CALDESC:Commemorative days calendar (2024–2024)",
        ]
        assert lines[-1] == "END:VCALENDAR"

    def test_crlf_only(self, events):
        document = build_ics(events, 2024, 2024, stamp=STAMP)
        assert "\n" not in document.replace("\r\n", "")

    def test_minimal_event_block(self, events):
        lines = lines_of(build_ics(events, 2024, 2024, stamp=STAMP))
        start = lines.index("BEGIN:VEVENT")
        assert lines[start:start + 8] == [
            "BEGIN:VEVENT",
            "UID:20240527-MemorialDay@commemorative-days",
            f"DTSTAMP:{STAMP}",
            "DTSTART;VALUE=DATE:20240527",
            "DTEND;VALUE=DATE:20240527",
            "SUMMARY:Memorial Day",
            "TRANSP:TRANSPARENT",
            "END:VEVENT",
        ]

    def test_event_with_url_and_description(self, events):
        lines = lines_of(build_ics(events, 2024, 2024, stamp=STAMP))
        start = lines.index("UID:20241008-AdaLovelaceDay@commemorative-days") - 1
        assert lines[start:start + 10] == [
            "BEGIN:VEVENT",
            "UID:20241008-AdaLovelaceDay@commemorative-days",
            f"DTSTAMP:{STAMP}",
            "DTSTART;VALUE=DATE:20241008",
            "DTEND;VALUE=DATE:20241008",
            "SUMMARY:Ada Lovelace Day",
            "URL:https://findingada.com/",
            "DESCRIPTION:Women in STEM\\, worldwide\\n\\nMore information: https://findingada.com/",
            "TRANSP:TRANSPARENT",
            "END:VEVENT",
        ]

    def test_out_of_range_day_skipped(self, events):
        document = build_ics(events, 2024, 2024, stamp=STAMP)
        assert "Corrupt" not in document
        assert count_events(document) == 2

    def test_month_then_rule_order(self):
        def month_events(year, month):
            return [ResolvedEvent(2, f"B{year}{month}"), ResolvedEvent(1, f"A{year}{month}")]

        document = build_ics(month_events, 2024, 2025, stamp=STAMP)
        summaries = [l[len("SUMMARY:"):] for l in lines_of(document) if l.startswith("SUMMARY:")]
        expected = [f"{p}{y}{m}" for y in (2024, 2025) for m in range(12) for p in ("B", "A")]
        assert summaries == expected

    def test_summary_escaped(self):
        document = build_ics({(2024, 0): [ResolvedEvent(1, "Bread; butter, jam")]},
                             2024, 2024, stamp=STAMP)
        assert "SUMMARY:Bread\\; butter\\, jam\r\n" in document

    def test_empty_range(self):
        lines = lines_of(build_ics({}, 2030, 2030, stamp=STAMP))
        assert "BEGIN:VEVENT" not in lines
        assert len(lines) == 9

    def test_custom_name_and_description(self):
        document = build_ics({}, 2024, 2025, stamp=STAMP, calendar_name="Days, etc",
                             calendar_description="Mine")
        assert "X-WR-CALNAME:Days\\, etc\r\n" in document
        assert "X-WR-CALDESC:Mine\r\n" in document

    def test_idempotent_with_fixed_stamp(self, events):
        assert build_ics(events, 2024, 2024, stamp=STAMP) == build_ics(events, 2024, 2024, stamp=STAMP)

    def test_only_dtstamp_varies_between_runs(self, events):
        a = build_ics(events, 2024, 2024, stamp="20240101T000000Z")
        b = build_ics(events, 2024, 2024, stamp="20250101T000000Z")
        diff = [(x, y) for x, y in zip(lines_of(a), lines_of(b)) if x != y]
        assert diff and all(x.startswith("DTSTAMP:") for x, _ in diff)

    @pytest.mark.parametrize("url", [
        "https://e.org/a\nSUMMARY:Injected",
        "https://e.org/a\r\nSUMMARY:Injected",
        "https://e.org/a\rX",
        "https://e.org/\x00a",
    ])
    def test_url_with_control_characters_omitted(self, url):
        document = build_ics({(2024, 0): [ResolvedEvent(1, "X", "Text", url)]}, 2024, 2024, stamp=STAMP)
        assert "\n" not in document.replace("\r\n", "")
        assert "\r" not in document.replace("\r\n", "")
        lines = lines_of(document)
        assert not any(l.startswith("URL:") for l in lines)
        assert "SUMMARY:Injected" not in lines
        assert "DESCRIPTION:Text" in lines
        assert count_events(document) == 1

    def test_reversed_range_rejected(self):
        with pytest.raises(ValueError):
            build_ics({}, 2025, 2024)
