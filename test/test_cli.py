"""Command line runs on small schedule files."""

import json

import pytest

from webreg_calendar import cli

CSE100 = "\n".join([
    "Subject Course\tTitle\tSection Code\tType\tInstructor\tGrade Option\tUnits\tDays\tTime\tBLDG\tRoom",
    "CSE 100\tAdvanced Data Structures\tA00\tLE\tSahoo, Debashis\tL\t4.00\tMWF\t9:00a-9:50a\tPETER\t108",
    "A01\tDI\tW\t8:00p-8:50p\tPETER\t108",
    "A50\tLA\tTBA\tTBA\tTBA",
    "Final Exam\tFI\tW 03/18/2026\t8:00a-10:59a\tPETER\t108",
])


def test_cli_writes_ics_and_json(tmp_path, capsys):
    src = tmp_path / "schedule.txt"
    src.write_text(CSE100, encoding="utf-8")
    out_json = tmp_path / "events.json"

    cli.main([str(src), "--term", "Winter", "--year", "2026", "--google-json", str(out_json)])

    ics_path = tmp_path / "ucsd-winter-2026-schedule.ics"
    data = ics_path.read_bytes()
    assert data.startswith(b"BEGIN:VCALENDAR\r\n")
    assert data.count(b"BEGIN:VEVENT") == 5

    payload = json.loads(out_json.read_text(encoding="utf-8"))
    assert len(payload) == 5
    assert sum(1 for ev in payload if "recurrence" in ev) == 4

    out = capsys.readouterr().out
    assert "Calendar exported:" in out
    assert "1 session(s) left out" in out


def test_cli_output_option_and_debug_summary(tmp_path, capsys, monkeypatch):
    src = tmp_path / "schedule.txt"
    src.write_text(CSE100, encoding="utf-8")
    target = tmp_path / "out.ics"
    monkeypatch.setenv("WEBREG_DEBUG", "1")

    cli.main([str(src), "--term", "winter", "--year", "2026", "-o", str(target)])

    assert target.exists()
    out = capsys.readouterr().out
    assert "-- Session summary --" in out
    assert "Total meetings in Winter 2026:" in out


def test_cli_rejects_short_input(tmp_path, capsys):
    src = tmp_path / "schedule.txt"
    src.write_text("CSE 100", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        cli.main([str(src), "--term", "Fall", "--year", "2025"])
    assert exc.value.code == 1
    assert "Not enough text" in capsys.readouterr().out


def test_cli_rejects_unknown_term(tmp_path, capsys):
    src = tmp_path / "schedule.txt"
    src.write_text(CSE100, encoding="utf-8")
    with pytest.raises(SystemExit):
        cli.main([str(src), "--term", "Autumn", "--year", "2025"])
    assert "Unknown term" in capsys.readouterr().out


def test_cli_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit):
        cli.main([str(tmp_path / "nope.txt"), "--term", "Fall", "--year", "2025"])
    assert "not found" in capsys.readouterr().out


def test_pdf_input_goes_through_pdf_text(tmp_path, monkeypatch, capsys):
    src = tmp_path / "webreg.pdf"
    src.write_bytes(b"%PDF-1.4\n")
    monkeypatch.setattr(cli, "pdf_to_text", lambda path: CSE100)
    cli.main([str(src), "--term", "Winter", "--year", "2026"])
    assert (tmp_path / "ucsd-winter-2026-schedule.ics").exists()
