import os
import sys
from pathlib import Path

# Local imports
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))
from webreg_calendar.cli import read_schedule_text  # type: ignore
from webreg_calendar.fields import split_fields
from webreg_calendar.lines import classify_line
from webreg_calendar.parser import parse_schedule_text
from webreg_calendar.review import find_review_issues


def main(path: str):
    print(f"Input: {path}")
    text = read_schedule_text(path)
    lines = [ln for ln in text.splitlines() if ln.strip()]
    print(f"Lines: {len(lines)} | chars: {len(text.strip())}")

    # Per-line classification with the fields each rule saw
    print("-- Lines --")
    for i, line in enumerate(lines, 1):
        fields = split_fields(line)
        kind = classify_line(line, fields)
        print(f"{i:03d} {kind.name:<18} {' | '.join(fields)}")

    result = parse_schedule_text(text)
    if result.insufficient_input:
        print(f"Insufficient input: {result.error}")
        return
    print(f"-- Records ({len(result.records)}) --")
    for i, r in enumerate(result.records, 1):
        d = r.to_dict()
        when = d["exam_date"] or d["days"]
        print(f"- [{i:02d}] {d['course_code']} | {d['kind']} | sec={d['section_code'] or '-'} | {when} {d['start_time']}-{d['end_time']} | loc={d['location']} | instr={d['instructor']}")

    if result.skipped_lines:
        print("-- Skipped --")
        for line in result.skipped_lines:
            print(f"  {line}")

    issues = find_review_issues(result.records)
    if issues:
        print("-- Needs review --")
        for item in issues:
            print(f"  [{item.index + 1:02d}] {item.record.course_code} {item.record.kind.value}: {', '.join(item.fields)}")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python tools/debug_extract.py <schedule.txt|schedule.pdf>")
        sys.exit(1)
    if not os.path.exists(sys.argv[1]):
        print("File not found.")
        sys.exit(1)
    main(sys.argv[1])
