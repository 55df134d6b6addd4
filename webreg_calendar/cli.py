"""
WebReg schedule -> ICS calendar generator

- Input: a text file with the WebReg List view (copy-paste or OCR output) or a
  PDF printout of it. If omitted, the first .txt/.pdf in the current folder is used.
- Output: an .ics calendar next to the input (or at -o), optionally the Google
  Calendar API event bodies as JSON.
"""

import argparse
import glob
import json
import logging
import os
import sys

from .events import synthesize_events, to_google_event
from .ics_export import suggested_filename, write_ics_file
from .parser import parse_schedule_text, parsing_stats
from .pdf_text import pdf_to_text
from .quarters import UnknownTermError, quarter_dates, weekly_occurrences
from .review import find_review_issues
from .school import UID_DOMAIN


def find_default_input() -> str | None:
    candidates = sorted(glob.glob("*.txt")) + sorted(glob.glob("*.pdf"))
    return candidates[0] if candidates else None


def read_schedule_text(path: str) -> str:
    if path.lower().endswith(".pdf"):
        return pdf_to_text(path)
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="webreg-to-calendar",
        description="Convert a WebReg schedule (text or PDF) into an .ics calendar.",
    )
    p.add_argument("input", nargs="?", help="schedule .txt or .pdf (default: first one in this folder)")
    p.add_argument("--term", help="Fall, Winter, Spring, Summer Session 1, Summer Session 2")
    p.add_argument("--year", type=int, help="calendar year of the term, e.g. 2026")
    p.add_argument("-o", "--output", help="where to write the .ics (default: next to the input)")
    p.add_argument("--google-json", metavar="PATH", help="also write Google Calendar event bodies as JSON")
    p.add_argument("--uid-domain", default=UID_DOMAIN, help=f"domain part of event UIDs (default: {UID_DOMAIN})")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return p


def _print_record_summary(records, quarter) -> None:
    print("-- Session summary --")
    total = 0
    for i, r in enumerate(records, start=1):
        when = r.exam_date.isoformat() if r.is_exam and r.exam_date else r.days
        span = ""
        if r.start_time:
            span = f" {r.start_time:%H:%M}-{r.end_time:%H:%M}" if r.end_time else f" {r.start_time:%H:%M}-?"
        occurrences = 1 if r.is_exam else weekly_occurrences(r.days, quarter)
        total += occurrences if r.is_complete else 0
        print(
            f"{i:02d}. [{when}] {r.kind.value} {r.section_code or '-'} x{occurrences:2d}{span}"
            f" :: {r.course_code} {r.course_title} @ {r.location} | {r.instructor}"
        )
    print(f"Total meetings in {quarter.label}: {total}")


def main(argv: list[str] | None = None) -> None:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    path = args.input or find_default_input()
    if not path or not os.path.exists(path):
        print("Schedule file not found. Please run again and provide a valid path.")
        sys.exit(1)

    term = args.term or input("Enter the term (Fall, Winter, Spring, Summer Session 1/2): ").strip()
    year = args.year
    if year is None:
        year_str = input("Enter the year of the term (e.g. 2026): ").strip()
        try:
            year = int(year_str)
        except ValueError:
            print("Invalid year. Please use four digits, e.g. 2026.")
            sys.exit(1)

    try:
        quarter = quarter_dates(term, year)
    except UnknownTermError as exc:
        print(str(exc))
        sys.exit(1)

    result = parse_schedule_text(read_schedule_text(path))
    if result.insufficient_input:
        print(result.error)
        sys.exit(1)
    if not result.records:
        print("No classes detected; cannot generate calendar.")
        sys.exit(1)

    stats = parsing_stats(result.records)
    kinds = ", ".join(f"{n} {k}" for k, n in sorted(stats["by_kind"].items()))
    print(f"Detected {stats['total']} sessions in {stats['courses']} courses ({kinds}); generating calendar…")
    if os.getenv("WEBREG_DEBUG") == "1":
        _print_record_summary(result.records, quarter)

    for item in find_review_issues(result.records):
        r = item.record
        print(f"Needs review: {r.course_code} {r.kind.value} {r.section_code}".rstrip())
        for q in item.questions:
            print(f"  - {q.question}")

    synthesis = synthesize_events(result.records, quarter.term, quarter.year, uid_domain=args.uid_domain)
    if synthesis.excluded:
        print(f"{len(synthesis.excluded)} session(s) left out of the calendar:")
        for ex in synthesis.excluded:
            print(f"  - {ex.record.course_code} {ex.record.kind.value}: {ex.reason}")
    if not synthesis.events:
        print("No sessions could be scheduled; cannot generate calendar.")
        sys.exit(1)

    if args.output:
        ics_output = args.output
    else:
        in_dir = os.path.dirname(os.path.abspath(path))
        ics_output = os.path.join(in_dir, suggested_filename(quarter.term, quarter.year))

    write_ics_file(ics_output, synthesis.events, quarter.term, quarter.year)
    print(f"Calendar exported: {ics_output} (events: {len(synthesis.events)})")

    if args.google_json:
        payload = [to_google_event(ev) for ev in synthesis.events]
        with open(args.google_json, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
        print(f"Google Calendar events written: {args.google_json}")


if __name__ == "__main__":
    main()
