from __future__ import annotations

from dataclasses import dataclass, fields

"""ColumnMapping model: canonical guest field -> source column header.

Attributes are snake_case; the canonical camelCase names used by the bulk guest
API (``plusOne``, ``householdName`` ...) are accepted by ``get``/``set`` too.
"""

__all__ = [
    "GUEST_FIELDS",
    "NO_COLUMN",
    "ColumnMapping",
    "field_attribute",
]

# Canonical field name -> attribute name
GUEST_FIELDS: dict[str, str] = {
    "name": "name",
    "email": "email",
    "phone": "phone",
    "address": "address",
    "side": "side",
    "plusOne": "plus_one",
    "dietaryRestrictions": "dietary_restrictions",
    "householdName": "household_name",
    "isMainHouseholdContact": "is_main_household_contact",
}

# Selector value meaning "no column selected"
NO_COLUMN = "none"


def field_attribute(field_name: str) -> str:
    """Resolve a canonical or snake_case field name to its attribute name."""
    if field_name in GUEST_FIELDS:
        return GUEST_FIELDS[field_name]
    if field_name in GUEST_FIELDS.values():
        return field_name
    raise KeyError(f"unknown guest field: {field_name}")


@dataclass
class ColumnMapping:
    """Best-guess (then user adjusted) header assignment per guest field."""
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    side: str | None = None
    plus_one: str | None = None
    dietary_restrictions: str | None = None
    household_name: str | None = None
    is_main_household_contact: str | None = None

    def get(self, field_name: str) -> str | None:
        return getattr(self, field_attribute(field_name))

    def set(self, field_name: str, header: str | None) -> None:
        setattr(self, field_attribute(field_name), header)

    def mapped_fields(self) -> dict[str, str]:
        """Canonical field -> header for every field that has a column."""
        by_attr = {v: k for k, v in GUEST_FIELDS.items()}
        return {
            by_attr[f.name]: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name)
        }

    def copy(self) -> ColumnMapping:
        return ColumnMapping(**{f.name: getattr(self, f.name) for f in fields(self)})
