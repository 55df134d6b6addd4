"""
Academic quarter calendar: instructional date ranges and the date arithmetic the
event synthesizer needs.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from .days import WEEKDAY_INDEX, split_days
from .school import TIMEZONE

logger = logging.getLogger(__name__)

FALL = "Fall"
WINTER = "Winter"
SPRING = "Spring"
SUMMER_1 = "Summer Session 1"
SUMMER_2 = "Summer Session 2"

TERMS = [FALL, WINTER, SPRING, SUMMER_1, SUMMER_2]

_TERM_ALIASES = {
    "fall": FALL,
    "fa": FALL,
    "winter": WINTER,
    "wi": WINTER,
    "spring": SPRING,
    "sp": SPRING,
    "summer": SUMMER_1,
    "summer 1": SUMMER_1,
    "summer session 1": SUMMER_1,
    "summer session i": SUMMER_1,
    "ss1": SUMMER_1,
    "s1": SUMMER_1,
    "summer 2": SUMMER_2,
    "summer session 2": SUMMER_2,
    "summer session ii": SUMMER_2,
    "ss2": SUMMER_2,
    "s2": SUMMER_2,
}


class UnknownTermError(ValueError):
    pass


@dataclass(frozen=True)
class QuarterDateRange:
    term: str
    year: int
    start: date
    end: date

    def __contains__(self, day: date) -> bool:
        return self.start <= day <= self.end

    @property
    def label(self) -> str:
        return f"{self.term} {self.year}"


# (term, year) -> (first instructional day, last instructional day)
QUARTER_DATES: dict[tuple[str, int], tuple[date, date]] = {
    (WINTER, 2024): (date(2024, 1, 8), date(2024, 3, 15)),
    (SPRING, 2024): (date(2024, 4, 1), date(2024, 6, 7)),
    (SUMMER_1, 2024): (date(2024, 7, 1), date(2024, 8, 2)),
    (SUMMER_2, 2024): (date(2024, 8, 5), date(2024, 9, 6)),
    (FALL, 2024): (date(2024, 9, 30), date(2024, 12, 6)),
    (WINTER, 2025): (date(2025, 1, 6), date(2025, 3, 14)),
    (SPRING, 2025): (date(2025, 3, 31), date(2025, 6, 6)),
    (SUMMER_1, 2025): (date(2025, 6, 30), date(2025, 8, 1)),
    (SUMMER_2, 2025): (date(2025, 8, 4), date(2025, 9, 5)),
    (FALL, 2025): (date(2025, 9, 29), date(2025, 12, 5)),
    (WINTER, 2026): (date(2026, 1, 5), date(2026, 3, 13)),
    (SPRING, 2026): (date(2026, 3, 30), date(2026, 6, 5)),
    (SUMMER_1, 2026): (date(2026, 6, 29), date(2026, 7, 31)),
    (SUMMER_2, 2026): (date(2026, 8, 3), date(2026, 9, 4)),
    (FALL, 2026): (date(2026, 9, 28), date(2026, 12, 4)),
    (WINTER, 2027): (date(2027, 1, 4), date(2027, 3, 12)),
    (SPRING, 2027): (date(2027, 3, 29), date(2027, 6, 4)),
    (SUMMER_1, 2027): (date(2027, 6, 28), date(2027, 7, 30)),
    (SUMMER_2, 2027): (date(2027, 8, 2), date(2027, 9, 3)),
    (FALL, 2027): (date(2027, 9, 27), date(2027, 12, 3)),
}

# Rule used for years outside the table: instruction starts on the first Monday
# on/after the anchor and runs ten weeks (five for summer sessions) to a Friday.
_ANCHORS = {
    WINTER: (1, 2),
    SPRING: (3, 26),
    SUMMER_1: (6, 28),
    FALL: (9, 26),
}
_QUARTER_LENGTH = timedelta(days=67)
_SUMMER_LENGTH = timedelta(days=32)


def normalize_term(term: str) -> str:
    """Canonical term name for user input ("fall", "SS1", "Summer Session 2")."""
    key = re.sub(r"\s+", " ", (term or "").strip().lower())
    key = re.sub(r"\s+(quarter|term)$", "", key)
    if key in _TERM_ALIASES:
        return _TERM_ALIASES[key]
    raise UnknownTermError(f"Unknown term {term!r}; expected one of: {', '.join(TERMS)}")


def _first_monday_on_or_after(d: date) -> date:
    return d + timedelta(days=(7 - d.weekday()) % 7)


def _derived_dates(term: str, year: int) -> tuple[date, date]:
    if term == SUMMER_2:
        s1_start, _ = _derived_dates(SUMMER_1, year)
        start = s1_start + timedelta(days=35)
        return start, start + _SUMMER_LENGTH
    month, day = _ANCHORS[term]
    start = _first_monday_on_or_after(date(year, month, day))
    length = _SUMMER_LENGTH if term == SUMMER_1 else _QUARTER_LENGTH
    return start, start + length


def quarter_dates(term: str, year: int | str) -> QuarterDateRange:
    """Instructional date range for a term; raises UnknownTermError for unknown names."""
    name = normalize_term(term)
    try:
        y = int(year)
    except (TypeError, ValueError):
        raise UnknownTermError(f"Invalid year {year!r}") from None
    known = QUARTER_DATES.get((name, y))
    if known:
        start, end = known
    else:
        start, end = _derived_dates(name, y)
        logger.warning("No published dates for %s %d; using %s to %s", name, y, start, end)
    return QuarterDateRange(term=name, year=y, start=start, end=end)


def first_occurrence_of_weekday(day_code: str, range_start: date, range_end: date) -> date | None:
    """First date on/after range_start that falls on day_code, or None past range_end."""
    target = WEEKDAY_INDEX.get(day_code)
    if target is None:
        return None
    d = range_start
    while d <= range_end:
        if d.weekday() == target:
            return d
        d += timedelta(days=1)
    return None


def format_recurrence_until(last_day: date, tz: str = TIMEZONE) -> str:
    """End of last_day in local time, as the UTC stamp RRULE UNTIL expects.

    20251205 -> "20251206T075959Z" in America/Los_Angeles (PST, UTC-8).
    """
    local_end = datetime.combine(last_day, time(23, 59, 59), tzinfo=ZoneInfo(tz))
    return local_end.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def weekly_occurrences(days: str, quarter: QuarterDateRange) -> int:
    """Number of meetings a day pattern has inside the quarter."""
    total = 0
    for code in split_days(days):
        first = first_occurrence_of_weekday(code, quarter.start, quarter.end)
        if first is None:
            continue
        total += (quarter.end - first).days // 7 + 1
    return total
