from __future__ import annotations

import pytest

from guest_import.models.column_mapping import NO_COLUMN, ColumnMapping
from guest_import.services.transformer import (
    parse_boolean_value,
    transform_row,
    transform_rows,
)


@pytest.mark.parametrize("value", ["yes", "Yes", "TRUE", " true ", "1", "y", "Y", True])
def test_parse_boolean_true(value):
    assert parse_boolean_value(value) is True


@pytest.mark.parametrize("value", ["no", "false", "0", "2", "", "maybe", "yes please", None, False])
def test_parse_boolean_false(value):
    assert parse_boolean_value(value) is False


def _mapping(**kw) -> ColumnMapping:
    return ColumnMapping(name="Name", **kw)


def test_full_row():
    row = {
        "Name": "  Priya Sharma ",
        "Email": " priya@email.com ",
        "Phone": "555-123-4567",
        "Address": "12 Lotus Lane",
        "Side": "Bride",
        "Plus One": "Yes",
        "Dietary": "vegetarian",
        "Household": "Sharma Family",
        "Main": "y",
    }
    mapping = _mapping(
        email="Email",
        phone="Phone",
        address="Address",
        side="Side",
        plus_one="Plus One",
        dietary_restrictions="Dietary",
        household_name="Household",
        is_main_household_contact="Main",
    )
    guest = transform_row(row, mapping, "mutual", ["sangeet"])
    assert guest.name == "Priya Sharma"
    assert guest.email == "priya@email.com"
    assert guest.phone == "555-123-4567"
    assert guest.address == "12 Lotus Lane"
    assert guest.side == "bride"
    assert guest.plus_one is True
    assert guest.dietary_restrictions == "vegetarian"
    assert guest.household_name == "Sharma Family"
    assert guest.is_main_household_contact is True
    assert guest.event_ids == ["sangeet"]
    assert guest.rsvp_status == "pending"


def test_unmapped_and_empty_fields_are_unset():
    guest = transform_row({"Name": "Ann", "Email": "", "Phone": "   "}, _mapping(email="Email", phone="Phone"), "groom")
    assert guest.email is None
    assert guest.phone is None
    assert guest.address is None
    assert guest.side == "groom"
    assert guest.plus_one is False
    assert guest.is_main_household_contact is False
    assert guest.event_ids is None


def test_side_is_lowercased_not_validated():
    guest = transform_row({"Name": "Ann", "Side": "Both"}, _mapping(side="Side"), "mutual")
    assert guest.side == "both"


def test_household_none_sentinel_is_unmapped():
    row = {"Name": "Ann", "none": "Lee Family"}
    guest = transform_row(row, _mapping(household_name=NO_COLUMN), "mutual")
    assert guest.household_name is None


def test_native_bool_cells():
    row = {"Name": "Ann", "Plus One": True, "Main": False}
    guest = transform_row(row, _mapping(plus_one="Plus One", is_main_household_contact="Main"), "mutual")
    assert guest.plus_one is True
    assert guest.is_main_household_contact is False


def test_event_ids_are_copied():
    events = ["ceremony"]
    guest = transform_row({"Name": "Ann"}, _mapping(), "mutual", events)
    events.append("reception")
    assert guest.event_ids == ["ceremony"]


def test_empty_event_selection_is_unset():
    assert transform_row({"Name": "Ann"}, _mapping(), "mutual", []).event_ids is None


def test_rows_with_blank_names_are_dropped():
    rows = [{"Name": "Ann"}, {"Name": "   "}, {"Name": ""}, {"Name": "Bob"}]
    guests = transform_rows(rows, _mapping(), "mutual")
    assert [g.name for g in guests] == ["Ann", "Bob"]


def test_unmapped_name_drops_everything():
    assert transform_rows([{"Name": "Ann"}], ColumnMapping(), "mutual") == []
