"""
Review helpers: find records whose day, time or exam date is missing, and apply
a person's answers as corrected copies.

Values OCR did read are trusted; only truly missing ones produce a question.
TBA records (no day and no time) are expected and are never flagged.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import date, time

from .days import DAY_CODES, DAYS_MISSING, DAYS_TBA, normalize_days
from .fields import parse_time
from .models import SessionKind, SessionRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReviewQuestion:
    field: str
    question: str


@dataclass
class ReviewItem:
    index: int
    record: SessionRecord
    questions: list[ReviewQuestion] = field(default_factory=list)

    @property
    def fields(self) -> list[str]:
        return [q.field for q in self.questions]


def review_questions(record: SessionRecord) -> list[ReviewQuestion]:
    if record.is_tba:
        return []
    questions: list[ReviewQuestion] = []
    label = record.kind.value if record.kind else "class"
    if not record.is_exam and (not record.days or record.days in (DAYS_MISSING, DAYS_TBA)):
        questions.append(ReviewQuestion("days", f"What day(s) does your {label} meet?"))
    if record.start_time is None:
        questions.append(ReviewQuestion("start_time", "What time does this class START?"))
    if record.end_time is None:
        questions.append(ReviewQuestion("end_time", "What time does this class END?"))
    if record.is_exam and record.exam_date is None:
        noun = "Final Exam" if record.kind is SessionKind.FINAL_EXAM else "Midterm"
        questions.append(ReviewQuestion("exam_date", f"What DATE is your {noun}?"))
    return questions


def find_review_issues(records: list[SessionRecord]) -> list[ReviewItem]:
    items = []
    for idx, record in enumerate(records):
        questions = review_questions(record)
        if questions:
            items.append(ReviewItem(index=idx, record=record, questions=questions))
    return items


def _coerce_time(value: time | str | None, name: str) -> time | None:
    if value is None or isinstance(value, time):
        return value
    parsed = parse_time(value)
    if parsed is None:
        raise ValueError(f"Invalid {name}: {value!r} (expected e.g. 9:00a)")
    return parsed


def apply_corrections(
    record: SessionRecord,
    days: str | None = None,
    start_time: time | str | None = None,
    end_time: time | str | None = None,
    exam_date: date | None = None,
) -> SessionRecord:
    """Return a corrected copy of ``record``; the original is left untouched.

    Raises ValueError for a day pattern or time that cannot be read.
    """
    changes: dict = {}
    if days is not None:
        canonical = normalize_days(days)
        if not canonical:
            raise ValueError(f"Invalid day pattern: {days!r}")
        if record.is_exam:
            logger.debug("Ignoring day pattern for exam record %s", record.course_code)
        else:
            changes["days"] = canonical
    start = _coerce_time(start_time, "start time")
    if start is not None:
        changes["start_time"] = start
    end = _coerce_time(end_time, "end time")
    if end is not None:
        changes["end_time"] = end
    if exam_date is not None:
        if record.is_exam:
            changes["exam_date"] = exam_date
            changes["exam_day"] = DAY_CODES[exam_date.weekday()]
        else:
            logger.debug("Ignoring exam date for %s %s", record.course_code, record.kind.value)
    return replace(record, **changes)
