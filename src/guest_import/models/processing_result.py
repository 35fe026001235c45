from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

"""Run result models for the guest import CLI.

One FileStat per input (file or pasted text file), aggregated into an
ImportRunResult that feeds the SUMMARY line and the exit code.
"""

__all__ = [
    "FileStat",
    "FileStatus",
    "ImportRunResult",
]


class FileStatus(Enum):
    """Outcome of one input.

    - SUCCESS: parsed, validated and handed to the sink without error
    - FAILED: stopped at parsing, validation or import
    """
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class FileStat:
    file_name: str
    status: FileStatus
    imported_guests: int = 0  # Guests accepted by the sink
    errors: int = 0  # ValidationErrors recorded for this input
    elapsed_seconds: float = 0.0
    step: str = "upload"  # Session step the input stopped at


@dataclass(frozen=True)
class ImportRunResult:
    success_files: int
    failed_files: int
    total_guests: int
    total_errors: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] = field(default_factory=list)

    @property
    def total_files(self) -> int:
        return self.success_files + self.failed_files
