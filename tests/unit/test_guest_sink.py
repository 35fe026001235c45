from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

import pytest

import guest_import.db.batch_insert as bi
from guest_import.db.batch_insert import BatchInsertError
from guest_import.db.guest_sink import (
    GUEST_COLUMNS,
    MockGuestSink,
    PostgresGuestSink,
    plan_households,
    write_guests,
)
from guest_import.models.parsed_guest import ParsedGuest


def _guests() -> list[ParsedGuest]:
    return [
        ParsedGuest(name="Priya", side="bride", household_name="Sharma Family"),
        ParsedGuest(
            name="Raj",
            side="groom",
            email="raj@x.com",
            household_name=" sharma family ",
            is_main_household_contact=True,
        ),
        ParsedGuest(name="Rahul", side="groom", household_name="Patel Family", address="48 Banyan Ct"),
        ParsedGuest(name="Solo"),
    ]


class FakeExecuteValues:
    """Records inserts; households get ids h1, h2, ... back."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, list]] = []

    def __call__(self, cursor, sql, rows, page_size=100, fetch=False):
        self.calls.append((sql, list(rows)))
        if fetch:
            return [(f"h{i + 1}", row[1]) for i, row in enumerate(rows)]
        return None


def test_plan_households_groups_case_insensitively():
    plans = plan_households(_guests())
    assert set(plans) == {"sharma family", "patel family"}
    sharma = plans["sharma family"]
    assert sharma.name == "Sharma Family"
    assert sharma.affiliation == "bride"
    assert sharma.max_count == 2
    assert sharma.contact_email == "raj@x.com"
    assert plans["patel family"].contact_email is None


def test_write_guests_creates_missing_households(monkeypatch):
    fake = FakeExecuteValues()
    monkeypatch.setattr(bi, "execute_values", fake)
    cursor = MagicMock()
    cursor.fetchall.return_value = [("existing-id", "Patel Family")]

    result = write_guests(cursor, "w1", _guests())

    cursor.execute.assert_called_once_with("SELECT id, name FROM households WHERE wedding_id = %s", ("w1",))
    household_sql, household_rows = fake.calls[0]
    assert household_sql.startswith("INSERT INTO households")
    assert household_rows == [("w1", "Sharma Family", "bride", "friend", "nice_to_have", 2, "raj@x.com")]

    guest_sql, guest_rows = fake.calls[1]
    assert guest_sql.startswith("INSERT INTO guests")
    by_name = {row[GUEST_COLUMNS.index("name")]: row for row in guest_rows}
    hh = GUEST_COLUMNS.index("household_id")
    assert by_name["Priya"][hh] == "h1"
    assert by_name["Raj"][hh] == "h1"
    assert by_name["Rahul"][hh] == "existing-id"
    assert by_name["Solo"][hh] is None
    assert by_name["Rahul"][GUEST_COLUMNS.index("address_street")] == "48 Banyan Ct"
    assert by_name["Solo"][GUEST_COLUMNS.index("rsvp_status")] == "pending"
    assert result.inserted_guests == 4
    assert result.created_households == 1


def test_postgres_sink_commits(monkeypatch):
    monkeypatch.setattr(bi, "execute_values", FakeExecuteValues())
    conn = MagicMock()
    conn.cursor.return_value.fetchall.return_value = []
    sink = PostgresGuestSink(conn, "w1")

    asyncio.run(sink(_guests()))

    conn.commit.assert_called_once()
    conn.rollback.assert_not_called()
    conn.cursor.return_value.close.assert_called_once()
    assert sink.imported_guests == 4
    assert sink.created_households == 2


def test_postgres_sink_rolls_back_on_failure(monkeypatch):
    def failing(cursor, sql, rows, page_size=100, fetch=False):
        raise RuntimeError("connection reset")

    monkeypatch.setattr(bi, "execute_values", failing)
    conn = MagicMock()
    conn.cursor.return_value.fetchall.return_value = []
    sink = PostgresGuestSink(conn, "w1")

    with pytest.raises(BatchInsertError):
        asyncio.run(sink(_guests()))
    conn.rollback.assert_called_once()
    conn.commit.assert_not_called()
    conn.cursor.return_value.close.assert_called_once()
    assert sink.imported_guests == 0


def test_mock_sink_counts():
    sink = MockGuestSink()
    asyncio.run(sink(_guests()))
    asyncio.run(sink(_guests()[:1]))
    assert sink.imported_guests == 5
    assert sink.created_households == 2
