"""
Field recognizers for WebReg schedule rows.

Each predicate looks at one field (a tab- or space-separated cell) and answers a
single question: is this a section code, a session type, a time range, ...
Several categories overlap syntactically ("LA" is a Lab code, a short uppercase
word and almost a building), so line parsers must try them in the order given by
RECOGNIZER_ORDER: closed vocabularies first, open-ended shapes last.
"""

import logging
import re
from datetime import date, time

from .days import DAY_CODES, correct_ocr_days, normalize_days
from .school import BUILDINGS, NOT_BUILDINGS, SESSION_TYPE_CODES

logger = logging.getLogger(__name__)

RECOGNIZER_ORDER = (
    "section", "session_type", "instructor", "day_time", "time_range",
    "days", "building", "location", "room", "units",
)

COURSE_CODE_RE = re.compile(r"^([A-Z]{2,4})\s?(\d{1,3}[A-Z]?)$")
SECTION_CODE_RE = re.compile(r"^[A-Z][0-9O]{2}$")
SESSION_TYPE_RE = re.compile(r"^(LE|DI|LA|MI|FI)$", re.IGNORECASE)

_TIME = r"(\d{1,2}):(\d{2})\s*([ap])\.?m?\.?"
TIME_RE = re.compile(rf"^{_TIME}$", re.IGNORECASE)
TIME_RANGE_RE = re.compile(rf"^{_TIME}\s*-\s*{_TIME}$", re.IGNORECASE)
TIME_SEARCH_RE = re.compile(r"\d{1,2}:\d{2}\s*[ap]\.?m?\.?\s*-\s*\d{1,2}:\d{2}\s*[ap]", re.IGNORECASE)
DAY_TIME_RE = re.compile(rf"^([A-Za-z|\s]{{1,10}}?)\s*({_TIME}\s*-\s*{_TIME})$", re.IGNORECASE)

EXAM_DATE_RE = re.compile(r"^(?:([A-Za-z]{1,2})\s*)?(\d{1,2})/(\d{1,2})/(\d{2,4})$")
ROOM_RE = re.compile(r"^(?=.*\d)[A-Za-z0-9]{2,5}$")
UNITS_RE = re.compile(r"^\d{1,2}\.\d{1,2}$")
BUILDING_SHAPE_RE = re.compile(r"^(?:[A-Z]{2,6}|[A-Z]{2,5}\d[A-Z]?|[A-Z]{2,4}-[A-Z])$")
LOCATION_RE = re.compile(r"^(\S{2,6})\s+([A-Za-z0-9]{2,5})$")

# Characters that can appear in a (possibly OCR-damaged) day pattern
_DAY_ALPHABET_RE = re.compile(r"^[MTWFSUHAEmtwfsuhae\s|lI1]+$")

# Multi-word tokens that must survive single-space splitting intact
_PROTECTED_TOKEN_RE = re.compile(
    r"^[A-Z]{2,4} \d{1,3}[A-Z]?(?=\s|$)"
    r"|(?:M|Tu|W|Th|F|Sa|Su)\s+\d{1,2}/\d{1,2}/\d{2,4}"
    rf"|(?i:{_TIME}\s*-\s*{_TIME})"
    r"|(?i:final\s+exam)"
    r"|[A-Z][A-Za-z'\-]+,\s?[A-Z][a-z'\-]+(?:\s(?!(?:M|Tu|W|Th|F|Sa|Su)+(?=\s|$))[A-Z][a-z'\-]+)*"
    r"|\S+"
)
_PLAIN_WORD_RE = re.compile(r"^[A-Za-z&:'\-]+$")


def clean_line(line: str) -> str:
    s = (line or "").replace("\u00a0", " ")
    s = re.sub(r"[–—]", "-", s)
    return s.strip()


def split_fields(line: str) -> list[str]:
    """Split one raw row into fields.

    Copy-paste from WebReg keeps tabs; OCR output usually does not. Without tabs,
    column gaps of two or more spaces are used, and if the row has none, single
    spaces are used with course codes, exam dates, time ranges and
    "Last, First" names kept whole and runs of plain title words merged.
    """
    s = clean_line(line)
    if not s:
        return []
    if "\t" in s:
        return [f.strip() for f in s.split("\t") if f.strip()]
    wide = [f.strip() for f in re.split(r"\s{2,}", s) if f.strip()]
    if len(wide) >= 3:
        return wide

    tokens = [m.group(0) for m in _PROTECTED_TOKEN_RE.finditer(s)]
    fields: list[str] = []
    plain_run: list[str] = []
    for tok in tokens:
        if _is_plain_word(tok):
            plain_run.append(tok)
            continue
        if plain_run:
            fields.append(" ".join(plain_run))
            plain_run = []
        fields.append(tok)
    if plain_run:
        fields.append(" ".join(plain_run))
    return fields


def _is_plain_word(tok: str) -> bool:
    # Title words: letters only, mixed case, and not something with a meaning of its own
    if not _PLAIN_WORD_RE.match(tok) or not re.search(r"[a-z]", tok):
        return False
    if SESSION_TYPE_RE.match(tok) or tok.lower() in ("midterm", "final", "exam", "tba"):
        return False
    # "TuTh" is a day pattern, "The" only normalizes to one
    return normalize_days(tok) != correct_ocr_days(tok)


def is_course_code(field: str) -> bool:
    return bool(COURSE_CODE_RE.match((field or "").strip()))


def normalize_course_code(field: str) -> str:
    """"CSE100" / "CSE  100" -> "CSE 100"."""
    m = COURSE_CODE_RE.match(re.sub(r"\s+", " ", (field or "").strip()))
    if not m:
        return (field or "").strip()
    return f"{m.group(1)} {m.group(2)}"


def is_section_code(field: str) -> bool:
    return bool(SECTION_CODE_RE.match((field or "").strip()))


def normalize_section_code(field: str) -> str:
    s = (field or "").strip()
    # Letter O in the digit positions is an OCR zero
    return s[:1] + s[1:].replace("O", "0")


def is_session_type(field: str) -> bool:
    return bool(SESSION_TYPE_RE.match((field or "").strip()))


def normalize_session_type(field: str) -> str:
    """"LE" -> "Lecture", "fi" -> "Final Exam"; unknown codes are returned as given."""
    code = (field or "").strip().upper()
    return SESSION_TYPE_CODES.get(code, (field or "").strip())


def is_instructor(field: str) -> bool:
    f = (field or "").strip()
    if "," not in f or len(f) <= 3 or f[0].isdigit():
        return False
    if re.fullmatch(r"[\d.,\s]+", f):
        return False
    return not TIME_SEARCH_RE.search(f)


def clean_instructor(field: str) -> str:
    # OCR often reads the column rule after the name as ":"
    name = re.sub(r"[:;]+$", "", (field or "").strip())
    return re.sub(r"\s+", " ", name).strip()


def is_time_range(field: str) -> bool:
    return bool(TIME_RANGE_RE.match((field or "").strip()))


def contains_time_range(text: str) -> bool:
    return bool(TIME_SEARCH_RE.search(text or ""))


def _to_time(hour: str, minute: str, meridiem: str) -> time | None:
    h, m = int(hour), int(minute)
    if not 1 <= h <= 12 or m > 59:
        return None
    if meridiem.lower() == "p" and h != 12:
        h += 12
    elif meridiem.lower() == "a" and h == 12:
        h = 0
    return time(h, m)


def parse_time(token: str) -> time | None:
    """"9:00a" -> 09:00, "12:00a" -> 00:00, "12:30pm" -> 12:30."""
    m = TIME_RE.match((token or "").strip())
    if not m:
        return None
    return _to_time(*m.groups())


def parse_time_range(field: str) -> tuple[time, time] | None:
    m = TIME_RANGE_RE.match((field or "").strip())
    if not m:
        return None
    start = _to_time(m.group(1), m.group(2), m.group(3))
    end = _to_time(m.group(4), m.group(5), m.group(6))
    if start is None or end is None:
        return None
    return start, end


def split_day_time(field: str) -> tuple[str, str] | None:
    """Split "W8:00p-8:50p" -> ("W", "8:00p-8:50p") when a column boundary was lost."""
    m = DAY_TIME_RE.match((field or "").strip())
    if not m:
        return None
    days = normalize_days(m.group(1))
    if not days:
        return None
    return days, m.group(2)


def is_building_code(field: str) -> bool:
    f = (field or "").strip()
    upper = f.upper()
    if f != upper or upper in NOT_BUILDINGS:
        return False
    if upper in BUILDINGS:
        return True
    # Unknown codes pass through if they look like one and cannot be a day pattern
    if not BUILDING_SHAPE_RE.match(f):
        return False
    return not normalize_days(f)


def is_days_field(field: str) -> bool:
    t = (field or "").strip()
    if not t or t.upper() in BUILDINGS:
        return False
    if not _DAY_ALPHABET_RE.match(t):
        return False
    return bool(normalize_days(t))


def is_room_code(field: str) -> bool:
    return bool(ROOM_RE.match((field or "").strip()))


def is_units(field: str) -> bool:
    return bool(UNITS_RE.match((field or "").strip()))


def split_location(field: str) -> tuple[str, str] | None:
    """"PETER 108" in one cell -> ("PETER", "108")."""
    m = LOCATION_RE.match((field or "").strip())
    if not m or not is_building_code(m.group(1)) or not is_room_code(m.group(2)):
        return None
    return m.group(1), m.group(2)


def is_tba(field: str) -> bool:
    return (field or "").strip().upper() == "TBA"


def parse_exam_date(field: str) -> tuple[str, date] | None:
    """"W 03/18/2026" -> ("W", date(2026, 3, 18)).

    The weekday always comes from the calendar date; the printed letter is
    often misread by OCR.
    """
    m = EXAM_DATE_RE.match((field or "").strip())
    if not m:
        return None
    day_raw, month, day, year = m.groups()
    y = int(year)
    if y < 100:
        y += 2000
    try:
        exam_date = date(y, int(month), int(day))
    except ValueError:
        return None
    printed = normalize_days(day_raw or "")
    actual = DAY_CODES[exam_date.weekday()]
    if printed and printed != actual:
        logger.debug("Exam date %s falls on %s, not printed %r", exam_date.isoformat(), actual, day_raw)
    return actual, exam_date
