"""
Line classification: decide what kind of WebReg row a line is before any field
is interpreted.
"""

import re
from enum import Enum

from .fields import (
    contains_time_range,
    is_course_code,
    is_days_field,
    is_section_code,
    split_fields,
)


class LineKind(Enum):
    HEADER = "header"
    MAIN_COURSE = "main_course"
    MIDTERM = "midterm"
    FINAL_EXAM = "final_exam"
    SECONDARY_SESSION = "secondary_session"
    ORPHAN_INSTRUCTOR = "orphan_instructor"
    UNRECOGNIZED = "unrecognized"


HEADER_KEYWORDS = {
    "subject", "course", "title", "section", "code", "type", "instructor",
    "grade", "option", "units", "days", "time", "bldg", "room", "status",
    "position", "action",
}

# Words that show up on their own line in WebReg but are never a name
STATUS_WORDS = {"enrolled", "waitlist", "waitlisted", "planned", "drop", "change", "tba", "staff"}

_MIDTERM_RE = re.compile(r"\bmidterm\b", re.IGNORECASE)
_FINAL_EXAM_RE = re.compile(r"\bfinal\s+exam\b", re.IGNORECASE)
_NAME_TEXT_RE = re.compile(r"^[A-Za-z][A-Za-z'.\- ]*$")


def is_header(line: str) -> bool:
    if contains_time_range(line):
        return False
    words = set(re.findall(r"[a-z]+", line.lower()))
    return len(words & HEADER_KEYWORDS) >= 2


def _looks_like_name(line: str) -> bool:
    text = line.strip()
    if not text or text.lower() in STATUS_WORDS:
        return False
    if "," in text:
        return bool(re.search(r"[A-Za-z]{2,}", text))
    words = text.split()
    # Bare "First Last" text: letters only, mixed case, a few words at most
    return (
        len(words) <= 4
        and bool(_NAME_TEXT_RE.match(text))
        and any(c.islower() for c in text)
        and any(c.isupper() for c in text)
    )


def is_orphan_instructor(line: str, fields: list[str]) -> bool:
    if contains_time_range(line):
        return False
    for f in fields:
        if is_course_code(f) or is_section_code(f) or is_days_field(f):
            return False
    return _looks_like_name(line)


def classify_line(line: str, fields: list[str] | None = None) -> LineKind:
    """Return the LineKind of one trimmed line.

    Rules are tried in a fixed order, so the same line always gets the same
    kind: header, main course, midterm, final exam, secondary session, orphan
    instructor.
    """
    text = (line or "").strip()
    if fields is None:
        fields = split_fields(text)
    if not text or not fields:
        return LineKind.UNRECOGNIZED

    if is_header(text):
        return LineKind.HEADER
    if is_course_code(fields[0]):
        return LineKind.MAIN_COURSE

    upper_fields = {f.strip().upper() for f in fields}
    if _MIDTERM_RE.search(text) or "MI" in upper_fields:
        return LineKind.MIDTERM
    if _FINAL_EXAM_RE.search(text) or "FI" in upper_fields:
        return LineKind.FINAL_EXAM
    if is_section_code(fields[0]) or upper_fields & {"DI", "LA"}:
        return LineKind.SECONDARY_SESSION
    if is_orphan_instructor(text, fields):
        return LineKind.ORPHAN_INSTRUCTOR
    return LineKind.UNRECOGNIZED
