from __future__ import annotations

import re
from collections.abc import Sequence

from ..models.column_mapping import ColumnMapping
from ..models.parsed_guest import SIDES
from ..models.row_data import RawRow
from ..models.validation_error import ValidationError

"""Row validation against the confirmed column mapping.

Every row is checked and every problem reported; an empty result is what allows
the session to move from mapping to preview.
"""

__all__ = [
    "EMAIL_PATTERN",
    "format_error_summary",
    "is_valid_email",
    "validate_rows",
]

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


def is_valid_email(value: str) -> bool:
    return EMAIL_PATTERN.fullmatch(value) is not None


def validate_rows(rows: Sequence[RawRow], mapping: ColumnMapping) -> list[ValidationError]:
    errors: list[ValidationError] = []

    for index, row in enumerate(rows):
        row_number = index + 1

        if not mapping.name or not row.get(mapping.name):
            errors.append(ValidationError(row_number, "name", "Name is required"))

        if mapping.email and row.get(mapping.email):
            email = str(row[mapping.email]).strip()
            if email and not is_valid_email(email):
                errors.append(ValidationError(row_number, "email", "Invalid email format"))

        if mapping.side and row.get(mapping.side):
            side = str(row[mapping.side]).lower()
            if side not in SIDES:
                errors.append(
                    ValidationError(
                        row_number,
                        "side",
                        f"Invalid side value: {side}. Must be bride, groom, or mutual",
                    )
                )

    return errors


def format_error_summary(errors: Sequence[ValidationError], limit: int = 5) -> list[str]:
    """Display lines for an error list: the first ``limit`` plus a remainder line."""
    lines = [e.display() for e in errors[:limit]]
    if len(errors) > limit:
        lines.append(f"...and {len(errors) - limit} more")
    return lines
