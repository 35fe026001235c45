from __future__ import annotations

import io
from collections.abc import Iterable
from datetime import date, datetime, time
from typing import Any

import numpy as np
import pandas as pd

from guest_import.models.row_data import CellValue, RawRow, SheetData
from guest_import.models.validation_error import ValidationError

"""Tabular reader for guest lists.

Three inputs end up as the same SheetData (headers + header-keyed rows):

- ``.csv``: first line is the header, blank lines are skipped
- ``.xlsx`` / ``.xls``: first sheet only, first row is the header, empty rows dropped
- pasted text: tab separated when the first line has a tab, comma separated otherwise

Cells are stringified here so nothing downstream branches on pandas/numpy types.
Native booleans are the one exception and are passed through untouched.
"""

__all__ = [
    "SUPPORTED_EXTENSIONS",
    "TabularParseError",
    "file_extension",
    "parse_file",
    "parse_pasted_text",
    "split_delimited_line",
]

SUPPORTED_EXTENSIONS = ("csv", "xlsx", "xls")

MSG_PARSE_FAILED = "Failed to parse file. Please check the format."
MSG_NO_DATA_ROWS = "No data rows found after header"
MSG_PASTE_TOO_SHORT = "Please include a header row and at least one data row"


class TabularParseError(Exception):
    """Raised when input cannot be turned into headers + data rows.

    Carries the batch-level ValidationError the caller should surface.
    """

    def __init__(self, error: ValidationError) -> None:
        super().__init__(error.message)
        self.error = error


def file_extension(file_name: str) -> str:
    """Lower-cased extension without the dot ('' when there is none)."""
    if "." not in file_name:
        return ""
    return file_name.rsplit(".", 1)[-1].lower()


def _cell_text(value: Any) -> CellValue:
    if value is None:
        return ""
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, str):
        return value
    if pd.isna(value):
        return ""
    if isinstance(value, (float, np.floating)) and float(value).is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _build_headers(cells: Iterable[Any]) -> list[str]:
    """Header texts, with blanks named by position and duplicates suffixed _1, _2..."""
    headers: list[str] = []
    seen: dict[str, int] = {}
    for i, cell in enumerate(cells):
        text = str(_cell_text(cell)).strip() or f"Column {i + 1}"
        if text in seen:
            seen[text] += 1
            text = f"{text}_{seen[text]}"
        else:
            seen[text] = 0
        headers.append(text)
    return headers


def _frame_to_sheet(df: pd.DataFrame, drop_empty_rows: bool) -> SheetData:
    if df.shape[0] == 0:
        raise TabularParseError(ValidationError.batch("file", MSG_NO_DATA_ROWS))
    headers = _build_headers(df.iloc[0].tolist())
    rows: list[RawRow] = []
    for raw in df.iloc[1:].itertuples(index=False, name=None):
        cells = [_cell_text(v) for v in raw]
        if drop_empty_rows and not any(cells):
            continue
        rows.append({h: (cells[i] if i < len(cells) else "") for i, h in enumerate(headers)})
    if not rows:
        raise TabularParseError(ValidationError.batch("file", MSG_NO_DATA_ROWS))
    return SheetData(headers=headers, rows=rows)


def read_csv_bytes(data: bytes) -> pd.DataFrame:
    """Read CSV bytes without header inference; every cell stays a string.

    The header line fixes the column count. Data rows with extra cells keep
    their first cells and drop the rest, short rows are padded with "".
    """
    options = dict(
        header=None,
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
        encoding="utf-8-sig",
    )
    width = pd.read_csv(io.BytesIO(data), nrows=1, **options).shape[1]
    return pd.read_csv(
        io.BytesIO(data),
        engine="python",
        on_bad_lines=lambda cells: cells[:width],
        **options,
    )


def read_first_sheet(data: bytes) -> pd.DataFrame:
    """Read the first worksheet of an .xlsx/.xls workbook, header row included."""
    xls = pd.ExcelFile(io.BytesIO(data))
    if not xls.sheet_names:
        return pd.DataFrame()
    return xls.parse(xls.sheet_names[0], header=None, dtype=object)


def parse_file(file_name: str, data: bytes) -> SheetData:
    """Parse an uploaded .csv/.xlsx/.xls file into SheetData.

    Raises:
        TabularParseError: unsupported extension, unreadable content, or a header
            with no data rows under it.
    """
    ext = file_extension(file_name)
    if ext not in SUPPORTED_EXTENSIONS:
        raise TabularParseError(
            ValidationError.batch(
                "file", f"Unsupported file type: .{ext}. Use .csv, .xlsx, or .xls"
            )
        )
    try:
        if ext == "csv":
            df = read_csv_bytes(data)
        else:
            df = read_first_sheet(data)
    except pd.errors.EmptyDataError as e:
        raise TabularParseError(ValidationError.batch("file", MSG_NO_DATA_ROWS)) from e
    except Exception as e:
        # pandas/openpyxl/xlrd raise a wide variety of errors for malformed input
        raise TabularParseError(ValidationError.batch("file", MSG_PARSE_FAILED)) from e
    return _frame_to_sheet(df, drop_empty_rows=(ext != "csv"))


def split_delimited_line(line: str, delimiter: str) -> list[str]:
    """Split one pasted line into trimmed cells.

    Tabs split naively. Commas honour double quotes: a quote toggles the
    "inside quotes" state and is dropped; a comma inside quotes is kept as text.
    Doubled quotes (``""``) are not treated as an escaped quote.
    """
    if delimiter == "\t":
        return [cell.strip() for cell in line.split("\t")]

    cells: list[str] = []
    current: list[str] = []
    in_quotes = False
    for ch in line:
        if ch == '"':
            in_quotes = not in_quotes
        elif ch == delimiter and not in_quotes:
            cells.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
    cells.append("".join(current).strip())
    return cells


def parse_pasted_text(text: str) -> SheetData:
    """Parse spreadsheet content pasted as text (header row + data rows).

    Raises:
        TabularParseError: fewer than two non-empty lines, or no data row left
            after dropping empty ones.
    """
    lines = [line for line in text.replace("\r\n", "\n").split("\n") if line.strip()]
    if len(lines) < 2:
        raise TabularParseError(ValidationError.batch("paste", MSG_PASTE_TOO_SHORT))

    delimiter = "\t" if "\t" in lines[0] else ","
    headers = split_delimited_line(lines[0], delimiter)
    data_rows = [split_delimited_line(line, delimiter) for line in lines[1:]]
    data_rows = [cells for cells in data_rows if any(cells)]
    if not data_rows:
        raise TabularParseError(ValidationError.batch("paste", MSG_NO_DATA_ROWS))

    rows: list[RawRow] = [
        {h: (cells[i] if i < len(cells) else "") for i, h in enumerate(headers)}
        for cells in data_rows
    ]
    return SheetData(headers=headers, rows=rows)
