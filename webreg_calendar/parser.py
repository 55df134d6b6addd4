"""
Turn a WebReg schedule text dump into SessionRecords.

WebReg prints one course as a block of narrow rows: the main row carries the
course code, title, instructor and lecture meeting; following rows carry only a
section code and a meeting (discussion, lab) or an exam. SessionAggregator
walks the lines once, carrying the current course state from row to row.
"""

import logging
from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass

from .days import DAYS_MISSING, DAYS_TBA, normalize_days
from .fields import (
    clean_instructor,
    is_building_code,
    is_days_field,
    is_instructor,
    is_room_code,
    is_section_code,
    is_session_type,
    is_tba,
    is_time_range,
    is_units,
    normalize_course_code,
    normalize_section_code,
    parse_exam_date,
    parse_time_range,
    split_day_time,
    split_fields,
    split_location,
)
from .lines import LineKind, classify_line
from .models import ParseResult, SessionKind, SessionRecord

logger = logging.getLogger(__name__)

MIN_INPUT_LENGTH = 20

INSUFFICIENT_INPUT_REASON = (
    "Not enough text to parse. Copy the full schedule from WebReg's List view "
    "(including the course rows) and try again."
)


@dataclass
class ParserState:
    """Course context carried from one line to the next during a single parse."""

    course_code: str = ""
    course_title: str = ""
    instructor: str = ""
    section_code: str = ""


@dataclass
class _Meeting:
    # Values picked out of the fields of one row
    section_code: str = ""
    kind: SessionKind | None = None
    instructor: str = ""
    days: str = ""
    time_field: str = ""
    building: str = ""
    room: str = ""
    units: str = ""
    title: str = ""
    exam: tuple | None = None
    tba: bool = False


def _read_fields(fields: list[str], title_slot: int | None = None) -> _Meeting:
    """Assign each field of a row to at most one slot.

    Closed vocabularies (section code, session type) are tested before the
    open-ended shapes (building, room), and a day+time token that lost its
    separator is split before anything else.
    """
    m = _Meeting()
    for idx, raw in enumerate(fields):
        f = raw.strip()
        if not f:
            continue
        if not m.exam:
            exam = parse_exam_date(f)
            if exam:
                m.exam = exam
                continue
        day_time = None if is_time_range(f) else split_day_time(f)
        if day_time and not m.time_field:
            m.days = m.days or day_time[0]
            m.time_field = day_time[1]
            continue
        if not m.section_code and is_section_code(f):
            m.section_code = normalize_section_code(f)
        elif m.kind is None and is_session_type(f):
            m.kind = SessionKind.from_code(f)
        elif not m.instructor and is_instructor(f):
            m.instructor = clean_instructor(f)
        elif not m.time_field and is_time_range(f):
            m.time_field = f
        elif not m.units and is_units(f):
            m.units = f
        elif is_tba(f):
            m.tba = True
        elif idx == title_slot and not m.title and _is_title(f):
            m.title = f
        elif not m.days and is_days_field(f):
            m.days = normalize_days(f)
        elif not m.building and split_location(f):
            m.building, m.room = split_location(f)
        elif not m.building and is_building_code(f):
            m.building = f.upper()
        elif m.building and not m.room and is_room_code(f):
            m.room = f.upper()
        else:
            logger.debug("Unassigned field %r", f)
    return m


def _is_title(field: str) -> bool:
    return " " in field or any(c.islower() for c in field)


def _apply_meeting(record: SessionRecord, m: _Meeting) -> None:
    times = parse_time_range(m.time_field) if m.time_field else None
    if times:
        record.start_time, record.end_time = times
    elif m.time_field:
        logger.debug("Unparseable time range %r for %s", m.time_field, record.course_code)
    if record.is_exam:
        record.days = ""
        return
    if m.days:
        record.days = m.days
    elif m.time_field:
        # A time without a day is flagged, never guessed
        record.days = DAYS_MISSING
    else:
        record.days = DAYS_TBA
    record.building = m.building
    record.room = m.room


class SessionAggregator:
    """Single-pass line scanner.

    One instance per parse; all course context lives on ``self.state``.
    """

    def __init__(self) -> None:
        self.state = ParserState()
        self.records: list[SessionRecord] = []
        self.skipped: list[str] = []
        self._handlers: dict[LineKind, Callable[[str, list[str]], None]] = {
            LineKind.HEADER: self._on_header,
            LineKind.MAIN_COURSE: self._on_main_course,
            LineKind.MIDTERM: self._on_midterm,
            LineKind.FINAL_EXAM: self._on_final_exam,
            LineKind.SECONDARY_SESSION: self._on_secondary_session,
            LineKind.ORPHAN_INSTRUCTOR: self._on_orphan_instructor,
            LineKind.UNRECOGNIZED: self._on_unrecognized,
        }
        missing = set(LineKind) - set(self._handlers)
        if missing:
            raise RuntimeError(f"No handler for line kinds: {sorted(k.name for k in missing)}")

    @property
    def handled_kinds(self) -> set[LineKind]:
        return set(self._handlers)

    def feed(self, line: str) -> None:
        text = line.strip()
        if not text:
            return
        fields = split_fields(text)
        kind = classify_line(text, fields)
        self._handlers[kind](text, fields)

    def _emit(self, record: SessionRecord) -> None:
        self.records.append(record)

    def _skip(self, line: str, reason: str) -> None:
        logger.debug("Skipping line (%s): %s", reason, line[:80])
        self.skipped.append(line)

    def _on_header(self, line: str, fields: list[str]) -> None:
        logger.debug("Header row: %s", line[:80])

    def _on_main_course(self, line: str, fields: list[str]) -> None:
        code = normalize_course_code(fields[0])
        m = _read_fields(fields[1:], title_slot=0)
        record = SessionRecord(
            course_code=code,
            kind=m.kind if m.kind and not m.kind.is_exam else SessionKind.LECTURE,
            course_title=m.title,
            section_code=m.section_code,
            instructor=m.instructor,
            units=m.units,
        )
        _apply_meeting(record, m)
        self.state = ParserState(
            course_code=code,
            course_title=m.title,
            instructor=m.instructor,
            section_code=m.section_code,
        )
        self._emit(record)

    def _on_secondary_session(self, line: str, fields: list[str]) -> None:
        if not self.state.course_code:
            self._skip(line, "secondary session without a course")
            return
        m = _read_fields(fields)
        if m.section_code:
            self.state.section_code = m.section_code
        kind = m.kind if m.kind and not m.kind.is_exam else SessionKind.DISCUSSION
        record = SessionRecord(
            course_code=self.state.course_code,
            kind=kind,
            course_title=self.state.course_title,
            section_code=m.section_code or self.state.section_code,
            instructor=m.instructor or self.state.instructor,
            units=m.units,
        )
        _apply_meeting(record, m)
        self._emit(record)

    def _on_exam(self, line: str, fields: list[str], kind: SessionKind) -> None:
        if not self.state.course_code:
            self._skip(line, "exam without a course")
            return
        m = _read_fields(fields)
        record = SessionRecord(
            course_code=self.state.course_code,
            kind=kind,
            course_title=self.state.course_title,
            section_code=self.state.section_code,
            instructor=self.state.instructor,
            building=m.building,
            room=m.room,
        )
        if m.exam:
            record.exam_day, record.exam_date = m.exam
        else:
            logger.debug("No exam date on %s line for %s", kind.value, record.course_code)
        _apply_meeting(record, m)
        self._emit(record)

    def _on_midterm(self, line: str, fields: list[str]) -> None:
        self._on_exam(line, fields, SessionKind.MIDTERM)

    def _on_final_exam(self, line: str, fields: list[str]) -> None:
        self._on_exam(line, fields, SessionKind.FINAL_EXAM)

    def _on_orphan_instructor(self, line: str, fields: list[str]) -> None:
        if not self.state.course_code:
            self._skip(line, "instructor without a course")
            return
        if self.state.instructor:
            self._skip(line, "instructor already known")
            return
        name = clean_instructor(line)
        self.state.instructor = name
        if self.records:
            last = self.records[-1]
            if last.course_code == self.state.course_code and not last.instructor:
                last.instructor = name

    def _on_unrecognized(self, line: str, fields: list[str]) -> None:
        self._skip(line, "unrecognized")

    def result(self, line_count: int = 0) -> ParseResult:
        return ParseResult(records=list(self.records), skipped_lines=list(self.skipped), line_count=line_count)


def parse_schedule_text(text: str) -> ParseResult:
    """Parse a WebReg List-view dump (copy-paste or OCR text).

    Input shorter than MIN_INPUT_LENGTH characters yields a result flagged
    ``insufficient_input`` instead of an empty record list.
    """
    if not text or len(text.strip()) < MIN_INPUT_LENGTH:
        logger.info("Input too short to parse (%d chars)", len((text or "").strip()))
        return ParseResult(insufficient_input=True, error=INSUFFICIENT_INPUT_REASON)

    lines = [ln for ln in text.splitlines() if ln.strip()]
    aggregator = SessionAggregator()
    for ln in lines:
        aggregator.feed(ln)
    result = aggregator.result(line_count=len(lines))
    logger.info(
        "Parsed %d records from %d lines (%d skipped)",
        len(result.records), len(lines), len(result.skipped_lines),
    )
    return result


def parsing_stats(records: list[SessionRecord]) -> dict:
    """Totals for the summary: records, distinct courses, and a count per kind."""
    by_kind = Counter(r.kind.value for r in records)
    return {
        "total": len(records),
        "courses": len({r.course_code for r in records}),
        "by_kind": dict(by_kind),
        "needs_review": sum(1 for r in records if r.needs_review),
        "tba": sum(1 for r in records if r.is_tba),
    }
