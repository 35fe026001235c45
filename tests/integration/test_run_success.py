from __future__ import annotations

import re
from pathlib import Path

import pytest

from guest_import.cli import main as cli_main

"""Integration: CSV, Excel and pasted text imported end to end in mock mode.

Runs the real CLI against files on disk: reader -> auto mapping (+ config
override) -> validation -> preview -> MockGuestSink, and checks the SUMMARY line.
"""

SUMMARY_RE = re.compile(
    r"SUMMARY files=(\d+) success=(\d+) failed=(\d+) guests=(\d+) errors=(\d+) elapsed_sec=[0-9.]+"
)


@pytest.fixture
def mixed_inputs(temp_workdir: Path, write_config, guest_csv_bytes: bytes, make_excel) -> list[Path]:
    data_dir = temp_workdir / "data"
    csv_path = data_dir / "guests.csv"
    csv_path.write_bytes(guest_csv_bytes)

    xlsx_path = make_excel(
        "cousins.xlsx",
        {
            "Cousins": [
                ["Household", "Full Name", "E-mail Address", "Phone", "Side", "Plus One"],
                ["Iyer Family", "Kavya Iyer", "kavya@example.com", 5551112222, "Bride", True],
                [None, None, None, None, None, None],
                ["Iyer Family", "Arjun Iyer", None, None, "BRIDE", False],
            ],
        },
    )

    paste_path = data_dir / "friends.txt"
    paste_path.write_text(
        "Name\tEmail\tSide\nMaya Chen\tmaya@example.com\tgroom\nLeo Park\t\t\n",
        encoding="utf-8",
    )
    return [csv_path, xlsx_path, paste_path]


def test_run_success_all_inputs(mixed_inputs, monkeypatch, capsys):
    monkeypatch.setenv("DISABLE_DB_CONNECT", "1")
    csv_path, xlsx_path, paste_path = mixed_inputs

    code = cli_main([str(csv_path), str(xlsx_path), "--paste-file", str(paste_path)])

    out = capsys.readouterr().out
    assert code == 0, out
    m = SUMMARY_RE.search(out)
    assert m is not None, out
    files, success, failed, guests, errors = map(int, m.groups())
    assert (files, success, failed, guests, errors) == (3, 3, 0, 7, 0)
    assert "households=3" in out
    assert not (Path.cwd() / "logs").exists()


def test_run_success_single_paste(temp_workdir: Path, write_config, monkeypatch, capsys):
    monkeypatch.setenv("DISABLE_DB_CONNECT", "1")
    paste = temp_workdir / "data" / "paste.txt"
    paste.write_text('Name,Address\nAnn Lee,"12 Main St, Edison"\n', encoding="utf-8")

    assert cli_main(["--paste-file", str(paste)]) == 0
    assert "SUMMARY files=1 success=1 failed=0 guests=1 errors=0" in capsys.readouterr().out
