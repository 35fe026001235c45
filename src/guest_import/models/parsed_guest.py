from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

from .column_mapping import GUEST_FIELDS

"""ParsedGuest: the editable guest record shown in the preview and submitted.

PreviewRow wraps a ParsedGuest with a synthetic id assigned at transform time so
edits and removals address a record, not a list position.
"""

__all__ = [
    "EDITABLE_FIELDS",
    "PENDING",
    "SIDES",
    "ParsedGuest",
    "PreviewRow",
]

SIDES = ("bride", "groom", "mutual")
PENDING = "pending"

# Canonical payload key -> attribute
_PAYLOAD_KEYS: dict[str, str] = {
    **GUEST_FIELDS,
    "eventIds": "event_ids",
    "rsvpStatus": "rsvp_status",
}


@dataclass
class ParsedGuest:
    name: str
    side: str = "mutual"
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    dietary_restrictions: str | None = None
    household_name: str | None = None
    event_ids: list[str] | None = None
    rsvp_status: str = PENDING
    plus_one: bool = False
    is_main_household_contact: bool = False

    def to_payload(self, wedding_id: str | None = None) -> dict[str, Any]:
        """camelCase dict for the bulk guest API; unset optionals are omitted."""
        payload: dict[str, Any] = {}
        if wedding_id is not None:
            payload["weddingId"] = wedding_id
        for key, attr in _PAYLOAD_KEYS.items():
            value = getattr(self, attr)
            if value is None:
                continue
            payload[key] = list(value) if isinstance(value, list) else value
        return payload


EDITABLE_FIELDS = frozenset(f.name for f in fields(ParsedGuest)) - {"rsvp_status"}


@dataclass
class PreviewRow:
    row_id: str
    guest: ParsedGuest
