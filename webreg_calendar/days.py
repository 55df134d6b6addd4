"""
Weekday code handling for WebReg day patterns ("MWF", "TuTh", "Sa", ...).

normalize_days() is the single entry point for anything that came out of OCR:
it fixes the known letter confusions and returns the canonical pattern, or ""
when the token is not a day pattern at all.
"""

import re

# Canonical codes in calendar order
DAY_CODES = ["M", "Tu", "W", "Th", "F", "Sa", "Su"]

# Canonical code -> Python weekday() index
WEEKDAY_INDEX = {code: idx for idx, code in enumerate(DAY_CODES)}

# Canonical code -> iCalendar BYDAY value
ICS_WEEKDAYS = {"M": "MO", "Tu": "TU", "W": "WE", "Th": "TH", "F": "FR", "Sa": "SA", "Su": "SU"}

DAY_NAMES = {
    "M": "Monday", "Tu": "Tuesday", "W": "Wednesday", "Th": "Thursday",
    "F": "Friday", "Sa": "Saturday", "Su": "Sunday",
}

# Sentinels stored in SessionRecord.days
DAYS_TBA = "TBA"
DAYS_MISSING = "MISSING_DAY"

_TWO_LETTER = {"tu": "Tu", "th": "Th", "sa": "Sa", "su": "Su"}
_ONE_LETTER = {"m": "M", "w": "W", "f": "F"}

# Common WebReg combinations, looked up before the greedy scan
_COMBINATIONS = {
    "mwf": "MWF",
    "mw": "MW",
    "tuth": "TuTh",
    "tth": "TuTh",
    "wf": "WF",
    "mf": "MF",
    "mwth": "MWTh",
    "twth": "TuWTh",
    "mtwthf": "MTuWThF",
    "mtuwthf": "MTuWThF",
    "mtuthf": "MTuThF",
}

# Glyphs OCR tends to leave after the last day letter (column rule, stray stroke)
_TRAILING_ARTIFACTS = re.compile(r"[lI1|]$")


def correct_ocr_days(day_string: str) -> str:
    # "E" never occurs in a day abbreviation; it is a misread "F"
    corrected = (day_string or "").replace("E", "F").replace("e", "f")
    return _TRAILING_ARTIFACTS.sub("", corrected)


def split_days(pattern: str) -> list[str]:
    """Split a pattern into day codes, e.g. "TuTh" -> ["Tu", "Th"].

    Returns [] if any character is left over. Output is deduplicated and in
    Monday-first order.
    """
    s = (pattern or "").lower()
    found: list[str] = []
    i = 0
    while i < len(s):
        # Two-letter codes first, otherwise "th" would read as a lone "t"
        pair = s[i:i + 2]
        if pair in _TWO_LETTER:
            found.append(_TWO_LETTER[pair])
            i += 2
            continue
        if s[i] in _ONE_LETTER:
            found.append(_ONE_LETTER[s[i]])
            i += 1
            continue
        return []
    return sorted(set(found), key=WEEKDAY_INDEX.__getitem__)


def normalize_days(day_string: str) -> str:
    """Canonical day pattern for a raw token, or "" if it is not one.

    "MWE" -> "MWF", "TU Th" -> "TuTh", "T h" -> "Th", "mwf" -> "MWF".
    """
    if not day_string:
        return ""
    compact = re.sub(r"\s+", "", day_string)
    compact = correct_ocr_days(compact)
    lower = compact.lower()
    if not lower:
        return ""
    if lower in _COMBINATIONS:
        return _COMBINATIONS[lower]
    return "".join(split_days(lower))


def is_day_pattern(value: str) -> bool:
    """True for a canonical (already normalized) pattern such as "MWF"."""
    return bool(value) and value not in (DAYS_TBA, DAYS_MISSING) and normalize_days(value) == value
