"""ICS document output."""

from datetime import datetime, time, timezone

import pytest

from webreg_calendar.events import synthesize_events
from webreg_calendar.ics_export import (
    build_ics_document,
    escape_text,
    fold_line,
    read_descriptions,
    suggested_filename,
    unescape_text,
    unfold_lines,
)
from webreg_calendar.models import SessionKind, SessionRecord
from webreg_calendar.parser import parse_schedule_text

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)

CSE100 = "\n".join([
    "CSE 100\tAdvanced Data Structures\tA00\tLE\tSahoo, Debashis\tL\t4.00\tMWF\t9:00a-9:50a\tPETER\t108",
    "A01\tDI\tW\t8:00p-8:50p\tPETER\t108",
    "Final Exam\tFI\tW 03/18/2026\t8:00a-10:59a\tPETER\t108",
])


@pytest.fixture
def winter_doc() -> str:
    records = parse_schedule_text(CSE100).records
    events = synthesize_events(records, "Winter", 2026).events
    return build_ics_document(events, "Winter", 2026, now=NOW).decode("utf-8")


def test_escape_order():
    assert escape_text("a\\b;c,d") == "a\\\\b\\;c\\,d"
    assert escape_text("one\r\ntwo\rthree\nfour") == "one\\ntwo\\nthree\\nfour"
    # a backslash followed by "n" must not turn into a newline on the way back
    assert unescape_text(escape_text("C:\\new")) == "C:\\new"


@pytest.mark.parametrize("text", [
    "Course: CSE 100 - Advanced Data Structures\nSection: A01",
    "Sahoo, Debashis; Lab\\Room",
    "",
])
def test_escape_round_trip(text):
    assert unescape_text(escape_text(text)) == text


def test_document_structure(winter_doc):
    lines = winter_doc.split("\r\n")
    assert lines[0] == "BEGIN:VCALENDAR"
    assert lines[-2] == "END:VCALENDAR"
    assert lines[-1] == ""
    assert "\n" not in winter_doc.replace("\r\n", "")
    assert "CALSCALE:GREGORIAN" in lines
    assert "METHOD:PUBLISH" in lines
    assert "X-WR-CALNAME:UCSD Winter 2026 Schedule" in lines
    assert "X-WR-TIMEZONE:America/Los_Angeles" in lines
    assert lines.count("BEGIN:VTIMEZONE") == 1
    assert lines.index("BEGIN:VTIMEZONE") < lines.index("BEGIN:VEVENT")
    assert lines.count("BEGIN:VEVENT") == 5
    assert lines.count("DTSTAMP:20260101T000000Z") == 5
    assert all(len(ln.encode("utf-8")) <= 75 for ln in lines)


def _event_lines(lines: list[str]) -> list[str]:
    out, inside = [], False
    for ln in lines:
        if ln == "BEGIN:VEVENT":
            inside = True
        elif ln == "END:VEVENT":
            inside = False
        elif inside:
            out.append(ln)
    return out


def test_event_times_are_tzid_qualified(winter_doc):
    lines = unfold_lines(winter_doc)
    starts = [ln for ln in _event_lines(lines) if ln.startswith("DTSTART")]
    assert len(starts) == 5
    assert all(ln.startswith("DTSTART;TZID=America/Los_Angeles:") for ln in starts)
    assert not any(ln.endswith("Z") for ln in starts)
    # the VTIMEZONE transitions stay floating
    assert "DTSTART:20070311T020000" in lines
    assert "DTSTART;TZID=America/Los_Angeles:20260318T080000" in lines
    assert "DTEND;TZID=America/Los_Angeles:20260318T105900" in lines
    assert "DTSTART;TZID=America/Los_Angeles:20260105T090000" in lines


def test_recurrence_and_text_properties(winter_doc):
    lines = unfold_lines(winter_doc)
    # 2026-03-13 23:59:59 PDT
    assert lines.count("RRULE:FREQ=WEEKLY;UNTIL=20260314T065959Z") == 4
    assert "SUMMARY:CSE 100 - Final Exam" in lines
    assert "LOCATION:PETER 108" in lines
    assert "UID:CSE100-final-exam-A01-winter-2026@ucsd.edu" in lines
    assert "UID:CSE100-lecture-A00-F-winter-2026@ucsd.edu" in lines


def test_events_are_sorted_and_output_is_stable(winter_doc):
    lines = unfold_lines(winter_doc)
    starts = [ln.split(":", 1)[1] for ln in _event_lines(lines) if ln.startswith("DTSTART")]
    assert starts == sorted(starts)

    records = parse_schedule_text(CSE100).records
    events = synthesize_events(records, "Winter", 2026).events
    again = build_ics_document(list(reversed(events)), "Winter", 2026, now=NOW).decode("utf-8")
    assert again == winter_doc


def test_descriptions_survive_the_document(winter_doc):
    descriptions = read_descriptions(winter_doc)
    assert len(descriptions) == 5
    final = [d for d in descriptions if "Section: A01" in d and "Instructor" in d]
    assert final
    assert descriptions[0].split("\n")[0] == "Course: CSE 100 - Advanced Data Structures"
    assert "Instructor: Sahoo, Debashis" in descriptions[0].split("\n")


def test_long_description_is_folded_and_recovered():
    record = SessionRecord(
        course_code="CSE 100",
        kind=SessionKind.LECTURE,
        course_title="A Very Long Title, With Commas; And Semicolons, That Keeps Going café Past Seventy-Five Octets",
        days="M",
        start_time=time(9, 0),
        end_time=time(9, 50),
    )
    events = synthesize_events([record], "Fall", 2025).events
    doc = build_ics_document(events, "Fall", 2025, now=NOW)
    raw_lines = doc.decode("utf-8").split("\r\n")
    assert any(ln.startswith(" ") for ln in raw_lines)
    assert all(len(ln.encode("utf-8")) <= 75 for ln in raw_lines)
    assert read_descriptions(doc)[0].split("\n")[0] == f"Course: CSE 100 - {record.course_title}"


def test_fold_line_respects_utf8_boundaries():
    line = "DESCRIPTION:" + "é" * 60
    parts = fold_line(line)
    assert len(parts) > 1
    assert "".join([parts[0]] + [p[1:] for p in parts[1:]]) == line
    assert all(len(p.encode("utf-8")) <= 75 for p in parts)


def test_empty_calendar_still_valid():
    doc = build_ics_document([], "Fall", 2025, now=NOW).decode("utf-8")
    assert "BEGIN:VTIMEZONE" in doc
    assert "BEGIN:VEVENT" not in doc
    assert doc.rstrip("\r\n").endswith("END:VCALENDAR")


@pytest.mark.parametrize("term, year, name", [
    ("Winter", 2026, "ucsd-winter-2026-schedule.ics"),
    ("fall", 2025, "ucsd-fall-2025-schedule.ics"),
    ("SS1", 2026, "ucsd-summer-session-1-2026-schedule.ics"),
])
def test_suggested_filename(term, year, name):
    assert suggested_filename(term, year) == name
