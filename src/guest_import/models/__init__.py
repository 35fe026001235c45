"""Domain models for the guest list import pipeline.

Raw rows come out of the tabular reader, a ColumnMapping ties source headers to
guest fields, and ParsedGuest is what ends up in the preview and the bulk import.
"""

from .column_mapping import GUEST_FIELDS, ColumnMapping
from .config_models import DatabaseConfig, ImportConfig
from .error_record import ErrorRecord
from .parsed_guest import EDITABLE_FIELDS, ParsedGuest, PreviewRow
from .row_data import CellValue, RawRow, SheetData
from .validation_error import ValidationError

__all__ = [
    # Configuration models
    "DatabaseConfig",
    "ImportConfig",
    # Pipeline models
    "CellValue",
    "ColumnMapping",
    "EDITABLE_FIELDS",
    "GUEST_FIELDS",
    "ParsedGuest",
    "PreviewRow",
    "RawRow",
    "SheetData",
    # Errors
    "ErrorRecord",
    "ValidationError",
]
