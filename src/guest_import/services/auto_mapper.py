from __future__ import annotations

from collections.abc import Iterable

from ..models.column_mapping import ColumnMapping

"""Column auto-mapping by header keywords.

Each header is lower-cased, trimmed, and run through an ordered cascade; the first
rule that matches decides its field and the header is not considered for any
other field. "Main contact" style headers are tested before the household rule so
that "Main Household Contact" is a contact flag, not a household name.

When two headers hit the same field, the later one wins.
"""

__all__ = [
    "auto_map_columns",
    "match_field",
]

# (field, groups); a rule matches when every keyword of any one group is present
_RULES: tuple[tuple[str, tuple[tuple[str, ...], ...]], ...] = (
    ("isMainHouseholdContact", (("main", "contact"), ("primary", "contact"), ("point of contact",))),
    ("householdName", (("household",), ("family",))),
    ("name", (("name",),)),
    ("email", (("email",), ("e-mail",))),
    ("phone", (("phone",), ("mobile",), ("cell",))),
    ("address", (("address",), ("street",), ("location",))),
    ("side", (("side",), ("party",))),
    ("plusOne", (("plus",), ("+1",))),
    ("dietaryRestrictions", (("dietary",), ("diet",), ("restriction",), ("allerg",))),
)


def match_field(header: str) -> str | None:
    """Canonical guest field a header looks like, or None."""
    lower = header.lower().strip()
    for field_name, groups in _RULES:
        if any(all(keyword in lower for keyword in group) for group in groups):
            return field_name
    return None


def auto_map_columns(headers: Iterable[str]) -> ColumnMapping:
    mapping = ColumnMapping()
    for header in headers:
        field_name = match_field(header)
        if field_name is not None:
            mapping.set(field_name, header)
    return mapping
