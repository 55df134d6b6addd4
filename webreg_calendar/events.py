"""
Calendar event synthesis: SessionRecords + a quarter -> dated events.

Weekly meetings become one recurring event per weekday (an MWF lecture yields
three events, each repeating weekly until the last instructional day). Exams
become a single event on their exam date. Records that cannot be placed on a
calendar are returned as exclusions with a reason instead of being guessed.
"""

import logging
import re
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time
from zoneinfo import ZoneInfo

from .days import DAY_NAMES, DAYS_MISSING, DAYS_TBA, split_days
from .models import SessionRecord
from .quarters import QuarterDateRange, first_occurrence_of_weekday, format_recurrence_until, quarter_dates
from .school import TIMEZONE, UID_DOMAIN, maps_location

logger = logging.getLogger(__name__)

# Google Calendar colorId per session kind
EVENT_COLORS = {
    "Lecture": "1",
    "Discussion": "2",
    "Lab": "6",
    "Midterm": "5",
    "Final Exam": "4",
}

DEFAULT_REMINDERS = [
    {"method": "popup", "minutes": 10},
    {"method": "email", "minutes": 60},
]


@dataclass(frozen=True)
class SynthesizedEvent:
    uid: str
    summary: str
    description: str
    location: str
    start: datetime
    end: datetime
    kind: str
    rrule: str | None = None
    until: str | None = None
    weekday: str = ""
    building: str = ""
    room: str = ""

    @property
    def is_recurring(self) -> bool:
        return self.rrule is not None


@dataclass(frozen=True)
class ExcludedRecord:
    record: SessionRecord
    reason: str


@dataclass
class SynthesisResult:
    events: list[SynthesizedEvent] = field(default_factory=list)
    excluded: list[ExcludedRecord] = field(default_factory=list)
    quarter: QuarterDateRange | None = None


def event_summary(record: SessionRecord) -> str:
    return f"{record.course_code} - {record.kind.value}"


def event_description(record: SessionRecord, quarter: QuarterDateRange) -> str:
    """Labeled lines, joined with real newlines; escaping belongs to the writer."""
    if record.course_title:
        lines = [f"Course: {record.course_code} - {record.course_title}"]
    else:
        lines = [f"Course: {record.course_code}"]
    if record.section_code:
        lines.append(f"Section: {record.section_code}")
    if record.instructor:
        lines.append(f"Instructor: {record.instructor}")
    lines.append(f"Location: {record.location}")
    lines.append(f"Quarter: {quarter.label}")
    return "\n".join(lines)


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", (text or "").lower()).strip("-")


def make_uid(record: SessionRecord, quarter: QuarterDateRange, weekday: str = "", domain: str = UID_DOMAIN) -> str:
    parts = [
        re.sub(r"\s+", "", record.course_code),
        _slug(record.kind.value),
        record.section_code,
        weekday,
        _slug(quarter.term),
        str(quarter.year),
    ]
    return "-".join(p for p in parts if p) + f"@{domain}"


def exclusion_reason(record: SessionRecord) -> str | None:
    """Why a record cannot become a calendar event, or None when it can."""
    if record.is_tba:
        return "time and place to be announced"
    if record.start_time is None:
        return "missing start time"
    if record.end_time is None:
        return "missing end time"
    if record.end_time <= record.start_time:
        return "end time is not after start time"
    if record.is_exam:
        if record.exam_date is None:
            return "missing exam date"
        return None
    if record.days == DAYS_MISSING:
        return "day of week missing; needs confirmation"
    if record.days == DAYS_TBA or not split_days(record.days):
        return "no valid day pattern"
    return None


def _at(day: date, t: time, tz: ZoneInfo) -> datetime:
    return datetime.combine(day, t, tzinfo=tz)


def synthesize_record(
    record: SessionRecord,
    quarter: QuarterDateRange,
    tz: str = TIMEZONE,
    uid_domain: str = UID_DOMAIN,
) -> list[SynthesizedEvent]:
    """Events for one complete record (callers check exclusion_reason first)."""
    zone = ZoneInfo(tz)
    summary = event_summary(record)
    description = event_description(record, quarter)
    common = dict(
        summary=summary,
        description=description,
        location=record.location,
        kind=record.kind.value,
        building=record.building,
        room=record.room,
    )
    if record.is_exam:
        return [
            SynthesizedEvent(
                uid=make_uid(record, quarter, domain=uid_domain),
                start=_at(record.exam_date, record.start_time, zone),
                end=_at(record.exam_date, record.end_time, zone),
                **common,
            )
        ]

    until = format_recurrence_until(quarter.end, tz)
    events: list[SynthesizedEvent] = []
    for code in split_days(record.days):
        first = first_occurrence_of_weekday(code, quarter.start, quarter.end)
        if first is None:
            logger.info("%s never falls inside %s for %s", DAY_NAMES[code], quarter.label, summary)
            continue
        events.append(
            SynthesizedEvent(
                uid=make_uid(record, quarter, weekday=code, domain=uid_domain),
                start=_at(first, record.start_time, zone),
                end=_at(first, record.end_time, zone),
                rrule=f"FREQ=WEEKLY;UNTIL={until}",
                until=until,
                weekday=code,
                **common,
            )
        )
    return events


def synthesize_events(
    records: list[SessionRecord],
    term: str,
    year: int | str,
    uid_domain: str = UID_DOMAIN,
    tz: str = TIMEZONE,
) -> SynthesisResult:
    """Turn parsed records into calendar events for one quarter.

    Raises UnknownTermError for an unknown term; every other problem is per
    record and ends up in ``excluded``.
    """
    quarter = quarter_dates(term, year)
    result = SynthesisResult(quarter=quarter)
    seen: dict[str, int] = {}
    for record in records:
        reason = exclusion_reason(record)
        if reason:
            logger.info("Excluding %s %s: %s", record.course_code, record.kind.value, reason)
            result.excluded.append(ExcludedRecord(record=record, reason=reason))
            continue
        for ev in synthesize_record(record, quarter, tz=tz, uid_domain=uid_domain):
            # Same course/kind/section/day twice (duplicate rows) would collide
            count = seen.get(ev.uid, 0) + 1
            seen[ev.uid] = count
            if count > 1:
                local, _, domain = ev.uid.partition("@")
                ev = replace(ev, uid=f"{local}-{count}@{domain}")
            result.events.append(ev)
    logger.info(
        "Synthesized %d events for %s (%d records excluded)",
        len(result.events), quarter.label, len(result.excluded),
    )
    return result


def to_google_event(ev: SynthesizedEvent, tz: str = TIMEZONE) -> dict:
    """Google Calendar API ``events.insert`` body for one event."""
    body = {
        "summary": ev.summary,
        "description": ev.description,
        "location": maps_location(ev.location, ev.building, ev.room),
        "start": {"dateTime": ev.start.isoformat(), "timeZone": tz},
        "end": {"dateTime": ev.end.isoformat(), "timeZone": tz},
        "reminders": {"useDefault": False, "overrides": [dict(r) for r in DEFAULT_REMINDERS]},
        "colorId": EVENT_COLORS.get(ev.kind, "1"),
    }
    if ev.rrule:
        body["recurrence"] = [f"RRULE:{ev.rrule}"]
    return body
