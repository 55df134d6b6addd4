"""
Record types shared by the parser, the event synthesizer and the review helpers.
"""

from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum

from .days import DAYS_MISSING, DAYS_TBA, is_day_pattern


class SessionKind(Enum):
    LECTURE = "Lecture"
    DISCUSSION = "Discussion"
    LAB = "Lab"
    MIDTERM = "Midterm"
    FINAL_EXAM = "Final Exam"

    @classmethod
    def from_code(cls, code: str) -> "SessionKind | None":
        """Map a WebReg type code ("LE", "di", ...) or display name to a kind."""
        value = (code or "").strip()
        for kind, short in _KIND_CODES.items():
            if value.upper() == short or value.lower() == kind.value.lower():
                return kind
        return None

    @property
    def code(self) -> str:
        return _KIND_CODES[self]

    @property
    def is_exam(self) -> bool:
        return self in (SessionKind.MIDTERM, SessionKind.FINAL_EXAM)


_KIND_CODES = {
    SessionKind.LECTURE: "LE",
    SessionKind.DISCUSSION: "DI",
    SessionKind.LAB: "LA",
    SessionKind.MIDTERM: "MI",
    SessionKind.FINAL_EXAM: "FI",
}


@dataclass
class SessionRecord:
    """One scheduled meeting of a course.

    ``days`` holds a canonical pattern ("MWF"), or DAYS_TBA when the row had
    neither day nor time, or DAYS_MISSING when a time was printed without a day.
    Exams carry ``exam_date``/``exam_day`` instead of a weekly pattern.
    """

    course_code: str
    kind: SessionKind = SessionKind.LECTURE
    course_title: str = ""
    section_code: str = ""
    instructor: str = ""
    days: str = DAYS_TBA
    start_time: time | None = None
    end_time: time | None = None
    building: str = ""
    room: str = ""
    units: str = ""
    exam_date: date | None = None
    exam_day: str = ""

    @property
    def location(self) -> str:
        if self.building and self.room:
            return f"{self.building} {self.room}"
        return self.building or self.room or "TBA"

    @property
    def is_exam(self) -> bool:
        return self.kind.is_exam

    @property
    def is_tba(self) -> bool:
        if self.is_exam:
            return self.exam_date is None and self.start_time is None
        return self.days == DAYS_TBA and self.start_time is None

    @property
    def needs_review(self) -> bool:
        return not self.is_tba and not self.is_complete

    @property
    def is_complete(self) -> bool:
        if not self.course_code or self.kind is None or self.start_time is None:
            return False
        if self.is_exam:
            return self.exam_date is not None
        return is_day_pattern(self.days)

    @property
    def missing_day(self) -> bool:
        return self.days == DAYS_MISSING

    def to_dict(self) -> dict:
        """Plain-dict view used by the debug dump and the JSON output."""
        return {
            "course_code": self.course_code,
            "course_title": self.course_title,
            "kind": self.kind.value,
            "section_code": self.section_code,
            "instructor": self.instructor,
            "days": self.days,
            "start_time": self.start_time.strftime("%H:%M") if self.start_time else None,
            "end_time": self.end_time.strftime("%H:%M") if self.end_time else None,
            "location": self.location,
            "units": self.units,
            "exam_date": self.exam_date.isoformat() if self.exam_date else None,
            "exam_day": self.exam_day,
        }


@dataclass
class ParseResult:
    records: list[SessionRecord] = field(default_factory=list)
    skipped_lines: list[str] = field(default_factory=list)
    line_count: int = 0
    insufficient_input: bool = False
    error: str = ""

    @property
    def ok(self) -> bool:
        return not self.insufficient_input

    @property
    def incomplete_records(self) -> list[SessionRecord]:
        return [r for r in self.records if r.needs_review]
