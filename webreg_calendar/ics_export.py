"""
iCalendar (.ics) export.

Events are built with the ``ics`` library and the serialized text is then
post-processed, as ics 0.7 leaves out several things calendar apps expect:
CALSCALE/METHOD/X-WR-* headers, a VTIMEZONE block, TZID-qualified local times
and a DTSTAMP on every event. Event blocks are also sorted so the same schedule
always produces the same file.
"""

import logging
import re
from datetime import datetime, timezone

from ics import Calendar, Event
from ics.grammar.parse import ContentLine

from .events import SynthesizedEvent
from .quarters import normalize_term
from .school import INSTITUTION, PRODUCT_ID, TIMEZONE, VTIMEZONE_LINES

logger = logging.getLogger(__name__)

MAX_LINE_OCTETS = 75


def escape_text(text: str) -> str:
    """Escape a TEXT value. Backslash goes first so later escapes are not doubled."""
    s = (text or "").replace("\\", "\\\\")
    s = s.replace(";", "\\;").replace(",", "\\,")
    return s.replace("\r\n", "\\n").replace("\r", "\\n").replace("\n", "\\n")


_ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)


def unescape_text(text: str) -> str:
    def repl(m: re.Match) -> str:
        c = m.group(1)
        return "\n" if c in "nN" else c

    return _ESCAPE_RE.sub(repl, text or "")


def calendar_name(term: str, year: int | str) -> str:
    return f"{INSTITUTION.upper()} {normalize_term(term)} {year} Schedule"


def suggested_filename(term: str, year: int | str) -> str:
    """"Winter", 2026 -> "ucsd-winter-2026-schedule.ics"."""
    slug = re.sub(r"[^a-z0-9]+", "-", normalize_term(term).lower()).strip("-")
    return f"{INSTITUTION}-{slug}-{year}-schedule.ics"


def fold_line(line: str) -> list[str]:
    """Split a content line into 75-octet pieces, never inside a UTF-8 sequence."""
    raw = line.encode("utf-8")
    if len(raw) <= MAX_LINE_OCTETS:
        return [line]
    parts: list[str] = []
    limit = MAX_LINE_OCTETS
    while raw:
        cut = min(limit, len(raw))
        # Back off onto a character boundary
        while cut < len(raw) and (raw[cut] & 0xC0) == 0x80:
            cut -= 1
        parts.append(raw[:cut].decode("utf-8"))
        raw = raw[cut:]
        limit = MAX_LINE_OCTETS - 1
    return [parts[0]] + [" " + p for p in parts[1:]]


def unfold_lines(text: str) -> list[str]:
    lines: list[str] = []
    for ln in text.replace("\r\n", "\n").replace("\r", "\n").split("\n"):
        if ln[:1] in (" ", "\t") and lines:
            lines[-1] += ln[1:]
        else:
            lines.append(ln)
    return lines


def _to_ics_event(ev: SynthesizedEvent) -> Event:
    e = Event()
    e.uid = ev.uid
    # Naive local wall time; the TZID is attached during post-processing
    e.begin = ev.start.replace(tzinfo=None)
    e.end = ev.end.replace(tzinfo=None)
    e.status = "CONFIRMED"
    e.transparent = False
    # Text properties are escaped here rather than by ics so every writer agrees
    e.extra.append(ContentLine(name="SUMMARY", value=escape_text(ev.summary)))
    e.extra.append(ContentLine(name="DESCRIPTION", value=escape_text(ev.description)))
    e.extra.append(ContentLine(name="LOCATION", value=escape_text(ev.location or "TBA")))
    if ev.rrule:
        e.extra.append(ContentLine(name="RRULE", value=ev.rrule))
    return e


def _event_sort_key(block: list[str]) -> tuple[str, str]:
    start = uid = ""
    for ln in block:
        if ln.startswith("DTSTART"):
            start = ln.split(":", 1)[1]
        elif ln.startswith("UID:"):
            uid = ln[4:]
    return start, uid


def fix_ics_content(text: str, cal_name: str | None, tz: str, stamp: str) -> str:
    """Add the headers, VTIMEZONE, TZID and DTSTAMP that ics does not write."""
    lines = [ln for ln in unfold_lines(text) if ln]
    had = {key: any(ln.startswith(key) for ln in lines) for key in ("CALSCALE:", "METHOD:", "X-WR-CALNAME:", "X-WR-TIMEZONE:")}

    header: list[str] = []
    events: list[list[str]] = []
    footer: list[str] = []
    buf: list[str] | None = None
    for ln in lines:
        if ln == "BEGIN:VEVENT":
            buf = [ln]
            continue
        if buf is not None:
            if ln.startswith("DTSTAMP"):
                continue
            if ln.startswith(("DTSTART", "DTEND")):
                key_params, val = ln.split(":", 1)
                key = key_params.split(";", 1)[0]
                ln = f"{key};TZID={tz}:{val.rstrip('Z')}"
            if ln == "END:VEVENT" and not any(b.startswith("TRANSP:") for b in buf):
                buf.append("TRANSP:OPAQUE")
            buf.append(ln)
            if ln == "END:VEVENT":
                buf.insert(1, f"DTSTAMP:{stamp}")
                events.append(buf)
                buf = None
            continue
        if events or ln == "END:VCALENDAR":
            footer.append(ln)
            continue
        header.append(ln)
        if ln.startswith("VERSION:"):
            if not had["CALSCALE:"]:
                header.append("CALSCALE:GREGORIAN")
            if not had["METHOD:"]:
                header.append("METHOD:PUBLISH")
            if cal_name and not had["X-WR-CALNAME:"]:
                header.append(f"X-WR-CALNAME:{escape_text(cal_name)}")
            if tz and not had["X-WR-TIMEZONE:"]:
                header.append(f"X-WR-TIMEZONE:{tz}")

    if not any(ln == "BEGIN:VTIMEZONE" for ln in header):
        header.extend(VTIMEZONE_LINES)
    events.sort(key=_event_sort_key)

    out: list[str] = []
    for ln in header + [ln for block in events for ln in block] + footer:
        out.extend(fold_line(ln))
    return "\r\n".join(out) + "\r\n"


def build_ics_document(
    events: list[SynthesizedEvent],
    term: str,
    year: int | str,
    tz: str = TIMEZONE,
    now: datetime | None = None,
) -> bytes:
    """Serialize events into one VCALENDAR, UTF-8 with CRLF line endings."""
    cal = Calendar(creator=PRODUCT_ID)
    for ev in events:
        cal.events.add(_to_ics_event(ev))

    content = "".join(cal.serialize_iter())

    stamp = (now or datetime.now(timezone.utc)).astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    content = fix_ics_content(content, calendar_name(term, year), tz, stamp)
    logger.debug("Built calendar with %d events", len(events))
    return content.encode("utf-8")


def write_ics_file(path: str, events: list[SynthesizedEvent], term: str, year: int | str) -> str:
    data = build_ics_document(events, term, year)
    with open(path, "wb") as f:
        f.write(data)
    logger.info("Wrote %s (%d events)", path, len(events))
    return path


def read_descriptions(document: bytes | str) -> list[str]:
    """Unescaped DESCRIPTION values of every event, in document order."""
    text = document.decode("utf-8") if isinstance(document, bytes) else document
    out: list[str] = []
    for ln in unfold_lines(text):
        name, sep, value = ln.partition(":")
        if sep and name.split(";", 1)[0] == "DESCRIPTION":
            out.append(unescape_text(value))
    return out
