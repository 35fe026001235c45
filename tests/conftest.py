# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path

import pandas as pd
import pytest

from guest_import.logging.init import reset_logging


@pytest.fixture(autouse=True)
def _fresh_logger():
    # The app logger binds sys.stdout when first configured; rebuild it per test
    # so capsys sees the output.
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """wedding_id: wedding-123
default_side: mutual
event_ids: [sangeet, ceremony]
column_overrides:
  householdName: Household
error_display_limit: 5
database:
  host: localhost
  port: 5432
  user: planner
  password: secret
  database: planner
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def guest_csv_bytes() -> bytes:
    return (
        "Household,Name,Main Contact,Email,Phone,Side,Plus One,Dietary\n"
        "Sharma Family,Priya Sharma,Yes,priya@email.com,555-123-4567,bride,yes,vegetarian\n"
        "Sharma Family,Raj Sharma,No,,,bride,no,\n"
        "Patel Family,Rahul Patel,Yes,rahul@email.com,555-987-6543,groom,no,\n"
    ).encode("utf-8")


@pytest.fixture()
def make_excel(tmp_path: Path):
    def _make(name: str, sheets: dict[str, list[list[object]]]) -> Path:
        path = tmp_path / name
        with pd.ExcelWriter(path) as writer:
            for sheet, rows in sheets.items():
                pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
        return path
    return _make
