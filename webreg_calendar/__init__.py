"""Parse a WebReg schedule dump into session records and export them as a calendar."""

from .events import SynthesisResult, SynthesizedEvent, synthesize_events, to_google_event
from .ics_export import build_ics_document, escape_text, read_descriptions, suggested_filename, unescape_text
from .lines import LineKind, classify_line
from .models import ParseResult, SessionKind, SessionRecord
from .parser import parse_schedule_text, parsing_stats
from .quarters import QuarterDateRange, UnknownTermError, quarter_dates

__version__ = "1.0.0"

__all__ = [
    "LineKind",
    "ParseResult",
    "QuarterDateRange",
    "SessionKind",
    "SessionRecord",
    "SynthesisResult",
    "SynthesizedEvent",
    "UnknownTermError",
    "build_ics_document",
    "classify_line",
    "escape_text",
    "parse_schedule_text",
    "parsing_stats",
    "quarter_dates",
    "read_descriptions",
    "suggested_filename",
    "synthesize_events",
    "to_google_event",
    "unescape_text",
]
