from __future__ import annotations

import uuid
from collections.abc import Iterable, Iterator
from dataclasses import replace
from typing import Any

from ..models.column_mapping import field_attribute
from ..models.parsed_guest import EDITABLE_FIELDS, ParsedGuest, PreviewRow

"""Preview editor: the transformed guest list as editable state.

Rows can be addressed by list position (``update_field`` / ``remove_row``, where
removing shifts later rows down by one) or by the synthetic ``row_id`` each row
receives when it enters the editor (``update`` / ``remove``). Edits replace one
field of one record and never recompute or revalidate anything else.
"""

__all__ = [
    "PreviewEditor",
]


def _new_row_id() -> str:
    return uuid.uuid4().hex


def _editable_attribute(field_name: str) -> str:
    if field_name in ("eventIds", "event_ids"):
        attr = "event_ids"
    else:
        attr = field_attribute(field_name)
    if attr not in EDITABLE_FIELDS:
        raise KeyError(f"field is not editable: {field_name}")
    return attr


class PreviewEditor:
    def __init__(self, guests: Iterable[ParsedGuest] = ()) -> None:
        self._rows: list[PreviewRow] = [PreviewRow(_new_row_id(), g) for g in guests]

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[PreviewRow]:
        return iter(list(self._rows))

    @property
    def rows(self) -> list[PreviewRow]:
        return list(self._rows)

    def guests(self) -> list[ParsedGuest]:
        return [r.guest for r in self._rows]

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._rows):
            raise IndexError(f"preview row index out of range: {index}")

    def index_of(self, row_id: str) -> int:
        for i, r in enumerate(self._rows):
            if r.row_id == row_id:
                return i
        raise KeyError(f"unknown preview row: {row_id}")

    def update_field(self, index: int, field_name: str, value: Any) -> ParsedGuest:
        """Replace one field of the guest at ``index``; returns the new record."""
        self._check_index(index)
        attr = _editable_attribute(field_name)
        current = self._rows[index]
        updated = replace(current.guest, **{attr: value})
        self._rows[index] = PreviewRow(current.row_id, updated)
        return updated

    def remove_row(self, index: int) -> ParsedGuest:
        self._check_index(index)
        return self._rows.pop(index).guest

    def update(self, row_id: str, field_name: str, value: Any) -> ParsedGuest:
        return self.update_field(self.index_of(row_id), field_name, value)

    def remove(self, row_id: str) -> ParsedGuest:
        return self.remove_row(self.index_of(row_id))

    def clear(self) -> None:
        self._rows.clear()
