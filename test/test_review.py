"""Review questions and corrections."""

from datetime import date, time

import pytest

from webreg_calendar.days import DAYS_MISSING, DAYS_TBA
from webreg_calendar.models import SessionKind, SessionRecord
from webreg_calendar.review import apply_corrections, find_review_issues


def _record(**kw) -> SessionRecord:
    base = dict(course_code="MATH 20C", kind=SessionKind.DISCUSSION, section_code="B02", days="Tu",
                start_time=time(17, 0), end_time=time(17, 50))
    base.update(kw)
    return SessionRecord(**base)


def test_only_missing_values_are_flagged():
    records = [
        _record(),
        _record(days=DAYS_MISSING),
        _record(start_time=None, end_time=None, days="Tu"),
        _record(days=DAYS_TBA, start_time=None, end_time=None),
        _record(kind=SessionKind.FINAL_EXAM, days="", exam_date=None),
    ]
    items = find_review_issues(records)
    assert [i.index for i in items] == [1, 2, 4]
    assert items[0].fields == ["days"]
    assert items[1].fields == ["start_time", "end_time"]
    assert items[2].fields == ["exam_date"]
    assert "Final Exam" in items[2].questions[0].question


def test_apply_corrections_returns_a_copy():
    original = _record(days=DAYS_MISSING)
    fixed = apply_corrections(original, days="tuth", start_time="5:00p", end_time=time(17, 50))
    assert fixed.days == "TuTh"
    assert fixed.start_time == time(17, 0)
    assert fixed.is_complete
    assert original.days == DAYS_MISSING


def test_apply_exam_date_sets_weekday():
    exam = _record(kind=SessionKind.MIDTERM, days="", exam_date=None)
    fixed = apply_corrections(exam, exam_date=date(2026, 3, 18))
    assert fixed.exam_date == date(2026, 3, 18)
    assert fixed.exam_day == "W"
    assert fixed.is_complete


def test_invalid_corrections_raise():
    with pytest.raises(ValueError):
        apply_corrections(_record(), days="XYZ")
    with pytest.raises(ValueError):
        apply_corrections(_record(), start_time="noon")
