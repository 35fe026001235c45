from __future__ import annotations

import json
from pathlib import Path

from guest_import.cli import main as cli_main

"""Integration: one input fails validation, the others still import.

- exit code 2
- SUMMARY counts the failed input and its errors
- every error lands in logs/errors-*.log with the input's file name
"""


def test_run_partial_failure(temp_workdir: Path, write_config, guest_csv_bytes: bytes, monkeypatch, capsys):
    monkeypatch.setenv("DISABLE_DB_CONNECT", "1")
    good = temp_workdir / "data" / "guests.csv"
    good.write_bytes(guest_csv_bytes)
    bad = temp_workdir / "data" / "bad.csv"
    bad.write_text(
        "Name,Email,Side\n"
        "Ann,ann@example,bride\n"
        ",,groom\n"
        "Cy,cy@example.com,Both\n",
        encoding="utf-8",
    )

    code = cli_main([str(good), str(bad)])

    out = capsys.readouterr().out
    assert code == 2, out
    assert "SUMMARY files=2 success=1 failed=1 guests=3 errors=3" in out
    assert "WARN bad.csv: Row 3: Invalid side value: both. Must be bride, groom, or mutual" in out

    logs = list((temp_workdir / "logs").glob("errors-*.log"))
    assert len(logs) == 1
    records = [json.loads(line) for line in logs[0].read_text(encoding="utf-8").splitlines()]
    assert {r["file"] for r in records} == {"bad.csv"}
    assert [(r["row"], r["field"]) for r in records] == [(1, "email"), (2, "name"), (3, "side")]


def test_unreadable_workbook_fails_only_that_input(temp_workdir: Path, write_config, guest_csv_bytes: bytes, monkeypatch, capsys):
    monkeypatch.setenv("DISABLE_DB_CONNECT", "1")
    good = temp_workdir / "data" / "guests.csv"
    good.write_bytes(guest_csv_bytes)
    broken = temp_workdir / "data" / "broken.xlsx"
    broken.write_bytes(b"not a workbook")

    assert cli_main([str(good), str(broken)]) == 2
    out = capsys.readouterr().out
    assert "WARN broken.xlsx: Row 0: Failed to parse file. Please check the format." in out
    assert "guests=3" in out
