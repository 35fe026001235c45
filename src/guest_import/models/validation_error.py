from __future__ import annotations

import json
from dataclasses import asdict, dataclass

"""ValidationError model.

Row numbers are 1-based positions in the parsed row list. Row 0 is reserved for
batch-level problems (bad paste, unreadable file, failed import).
"""

__all__ = [
    "BATCH_ROW",
    "ValidationError",
]

BATCH_ROW = 0


@dataclass(frozen=True)
class ValidationError:
    """One row/field problem found while parsing, validating or importing."""
    row: int
    field: str
    message: str

    @classmethod
    def batch(cls, field: str, message: str) -> ValidationError:
        return cls(row=BATCH_ROW, field=field, message=message)

    @property
    def is_batch_level(self) -> bool:
        return self.row == BATCH_ROW

    def display(self) -> str:
        return f"Row {self.row}: {self.message}"

    def to_dict(self) -> dict[str, object]:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)
