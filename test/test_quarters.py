"""Quarter date table and date arithmetic."""

from datetime import date

import pytest

from webreg_calendar.quarters import (
    SUMMER_1,
    SUMMER_2,
    QuarterDateRange,
    UnknownTermError,
    first_occurrence_of_weekday,
    format_recurrence_until,
    normalize_term,
    quarter_dates,
    weekly_occurrences,
)


def test_known_quarters():
    fall = quarter_dates("Fall", 2025)
    assert (fall.start, fall.end) == (date(2025, 9, 29), date(2025, 12, 5))
    winter = quarter_dates("winter", "2026")
    assert (winter.start, winter.end) == (date(2026, 1, 5), date(2026, 3, 13))
    assert winter.label == "Winter 2026"


def test_all_table_entries_start_monday_end_friday():
    for term in ("Fall", "Winter", "Spring", SUMMER_1, SUMMER_2):
        for year in (2024, 2025, 2026, 2027):
            q = quarter_dates(term, year)
            assert q.start.weekday() == 0
            assert q.end.weekday() == 4
            assert q.start < q.end


def test_years_outside_table_are_derived():
    q = quarter_dates("Fall", 2030)
    assert q.start.weekday() == 0
    assert q.start.month == 9
    assert (q.end - q.start).days == 67


@pytest.mark.parametrize("raw, canonical", [
    ("SS1", SUMMER_1),
    ("summer session 2", SUMMER_2),
    ("Summer", SUMMER_1),
    ("Fall Quarter", "Fall"),
])
def test_normalize_term(raw, canonical):
    assert normalize_term(raw) == canonical


def test_unknown_term():
    with pytest.raises(UnknownTermError):
        quarter_dates("Autumn", 2025)
    with pytest.raises(ValueError):
        quarter_dates("Fall", "next year")


def test_first_occurrence_of_weekday():
    start, end = date(2025, 9, 29), date(2025, 12, 5)
    assert first_occurrence_of_weekday("M", start, end) == date(2025, 9, 29)
    assert first_occurrence_of_weekday("F", start, end) == date(2025, 10, 3)
    assert first_occurrence_of_weekday("Su", start, end) == date(2025, 10, 5)
    assert first_occurrence_of_weekday("Sa", date(2025, 9, 29), date(2025, 10, 1)) is None
    assert first_occurrence_of_weekday("X", start, end) is None


def test_format_recurrence_until_is_end_of_local_day_in_utc():
    # PST (UTC-8) in December, PDT (UTC-7) in June
    assert format_recurrence_until(date(2025, 12, 5)) == "20251206T075959Z"
    assert format_recurrence_until(date(2026, 6, 5)) == "20260606T065959Z"


def test_weekly_occurrences():
    fall = QuarterDateRange("Fall", 2025, date(2025, 9, 29), date(2025, 12, 5))
    assert weekly_occurrences("M", fall) == 10
    assert weekly_occurrences("MWF", fall) == 30
    assert weekly_occurrences("Sa", fall) == 9
    assert weekly_occurrences("TBA", fall) == 0
