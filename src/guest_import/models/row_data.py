from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

"""Raw row model for the guest import pipeline.

A RawRow is one data row keyed by its source header. Cells are stringified at the
reader boundary; the only other value that survives is a native bool coming from
an Excel boolean cell.
"""

__all__ = [
    "CellValue",
    "RawRow",
    "SheetData",
]

CellValue = Union[str, bool]
RawRow = dict[str, CellValue]


@dataclass
class SheetData:
    """Headers and header-keyed rows produced by one parse."""
    headers: list[str]
    rows: list[RawRow] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)
