from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

from .validation_error import ValidationError

"""ErrorRecord model for the JSON Lines error log.

Every parse, validation and submission problem hit during a CLI run is written as
one ErrorRecord line. ``row`` follows ValidationError: 1-based, 0 for file-level.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Input filename being processed
        row: Row number (1-based). 0 for file-level errors
        field: Guest field (or ``file``/``paste``/``import``) the error concerns
        message: Human readable description
    """
    timestamp: str
    file: str
    row: int
    field: str
    message: str

    @staticmethod
    def create(file: str, row: int, field: str, message: str) -> ErrorRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(timestamp=ts, file=file, row=row, field=field, message=message)

    @staticmethod
    def from_validation_error(file: str, error: ValidationError) -> ErrorRecord:
        return ErrorRecord.create(file=file, row=error.row, field=error.field, message=error.message)

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
