from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..models.column_mapping import NO_COLUMN, ColumnMapping
from ..models.parsed_guest import PENDING, ParsedGuest
from ..models.row_data import RawRow

"""Row-to-guest transformation.

Turns raw rows plus the confirmed column mapping into ParsedGuest records:

- optional text fields are trimmed; unmapped columns or empty cells leave them unset
- ``householdName`` mapped to the "none" selector counts as unmapped
- ``side`` is lower-cased but not checked against the enum (the validator does that)
  and falls back to the default side when unmapped or blank
- ``plusOne`` / ``isMainHouseholdContact`` go through parse_boolean_value
- every imported guest starts with rsvp status "pending"
- rows whose name is blank after trimming are dropped
"""

__all__ = [
    "TRUE_VALUES",
    "parse_boolean_value",
    "transform_row",
    "transform_rows",
]

TRUE_VALUES = frozenset({"yes", "true", "1", "y"})


def parse_boolean_value(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).lower().strip() in TRUE_VALUES


def _cell(row: RawRow, header: str | None) -> Any:
    if not header:
        return None
    return row.get(header)


def _text(row: RawRow, header: str | None) -> str | None:
    value = _cell(row, header)
    if not value:
        return None
    return str(value).strip() or None


def transform_row(
    row: RawRow,
    mapping: ColumnMapping,
    default_side: str,
    event_ids: Sequence[str] | None = None,
) -> ParsedGuest:
    name_value = _cell(row, mapping.name)
    name = str(name_value).strip() if name_value is not None else ""

    side_value = _cell(row, mapping.side)
    side = str(side_value).lower() if side_value else default_side

    household_header = mapping.household_name if mapping.household_name != NO_COLUMN else None

    plus_one = _cell(row, mapping.plus_one)
    main_contact = _cell(row, mapping.is_main_household_contact)

    return ParsedGuest(
        name=name,
        side=side,
        email=_text(row, mapping.email),
        phone=_text(row, mapping.phone),
        address=_text(row, mapping.address),
        dietary_restrictions=_text(row, mapping.dietary_restrictions),
        household_name=_text(row, household_header),
        event_ids=list(event_ids) if event_ids else None,
        rsvp_status=PENDING,
        plus_one=parse_boolean_value(plus_one) if plus_one else False,
        is_main_household_contact=parse_boolean_value(main_contact) if main_contact else False,
    )


def transform_rows(
    rows: Sequence[RawRow],
    mapping: ColumnMapping,
    default_side: str,
    event_ids: Sequence[str] | None = None,
) -> list[ParsedGuest]:
    guests = [transform_row(row, mapping, default_side, event_ids) for row in rows]
    return [g for g in guests if g.name]
