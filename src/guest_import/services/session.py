from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from enum import Enum
from pathlib import Path

from ..models.column_mapping import NO_COLUMN, ColumnMapping, field_attribute
from ..models.config_models import ImportConfig
from ..models.parsed_guest import SIDES, ParsedGuest
from ..models.row_data import RawRow, SheetData
from ..models.validation_error import ValidationError
from ..ports import ClipboardPort, FileReaderPort, LocalFileReader
from ..tabular.reader import MSG_PARSE_FAILED, TabularParseError, parse_file, parse_pasted_text
from .auto_mapper import auto_map_columns
from .preview import PreviewEditor
from .template import copy_template
from .transformer import transform_rows
from .validator import format_error_summary, validate_rows

"""Import session: the state machine behind the guest import dialog.

State transitions: upload -> mapping -> preview -> (upload, on reset/close)

- upload:  waiting for a file or pasted text. Parse failures are recorded in
           ``errors`` and the session stays here.
- mapping: headers are known and a suggested ColumnMapping is in place; the
           caller may adjust it, then ``validate_and_preview`` either records
           row errors (stay) or fills the preview editor (advance).
- preview: guests can be edited/removed, then ``submit`` hands them to the
           injected ``on_import`` coroutine. Success resets and closes the
           session; failure records one import error and keeps everything.
"""

__all__ = [
    "MSG_IMPORT_FAILED",
    "ImportSession",
    "InputMethod",
    "OnImport",
    "SessionStateError",
    "Step",
    "SubmissionBlockedError",
]

logger = logging.getLogger(__name__)

MSG_IMPORT_FAILED = "Failed to import guests. Please try again."

OnImport = Callable[[list[ParsedGuest]], Awaitable[None]]


class Step(Enum):
    UPLOAD = "upload"
    MAPPING = "mapping"
    PREVIEW = "preview"


class InputMethod(Enum):
    FILE = "file"
    PASTE = "paste"


class SessionStateError(RuntimeError):
    """Raised when an operation is called in the wrong step."""


class SubmissionBlockedError(RuntimeError):
    """Raised when submit() is called while importing is not allowed."""


class ImportSession:
    def __init__(
        self,
        on_import: OnImport,
        *,
        default_side: str = "mutual",
        column_overrides: Mapping[str, str | None] | None = None,
        error_display_limit: int = 5,
    ) -> None:
        self._on_import = on_import
        self.default_side = default_side
        self.column_overrides = dict(column_overrides or {})
        self.error_display_limit = error_display_limit
        self.is_open = True
        self.importing = False
        # Bumped whenever state is wiped; an in-flight import from an older
        # generation must not touch the current state when it resolves.
        self._generation = 0
        self._clear_state()

    @classmethod
    def from_config(cls, config: ImportConfig, on_import: OnImport) -> ImportSession:
        session = cls(
            on_import,
            default_side=config.default_side,
            column_overrides=config.column_overrides,
            error_display_limit=config.error_display_limit,
        )
        session.select_events(config.event_ids)
        return session

    def _clear_state(self) -> None:
        self.step = Step.UPLOAD
        self.method = InputMethod.FILE
        self.file_name: str | None = None
        self.file_size = 0
        self.paste_text = ""
        self.headers: list[str] = []
        self.rows: list[RawRow] = []
        self.mapping = ColumnMapping()
        self.selected_event_ids: list[str] = []
        self.errors: list[ValidationError] = []
        self.preview = PreviewEditor()

    # ---- upload step -------------------------------------------------------

    @property
    def file_size_label(self) -> str:
        return f"{self.file_size / 1024:.1f} KB"

    def load_file(self, file_name: str, data: bytes) -> bool:
        """Parse an uploaded file; True when the session moved to mapping."""
        self.method = InputMethod.FILE
        self.file_name = file_name
        self.file_size = len(data)
        self.errors = []
        try:
            sheet = parse_file(file_name, data)
        except TabularParseError as e:
            logger.warning("parse failed file=%s: %s", file_name, e.error.message)
            if e.__cause__ is not None:
                logger.debug("parse failure detail file=%s: %r", file_name, e.__cause__)
            self.errors = [e.error]
            return False
        self._enter_mapping(sheet)
        return True

    def load_path(self, path: Path, reader: FileReaderPort | None = None) -> bool:
        path = Path(path)
        reader = reader or LocalFileReader()
        try:
            data = reader.read(path)
        except OSError as e:
            logger.warning("could not read file=%s: %s", path, e)
            self.method = InputMethod.FILE
            self.file_name = path.name
            self.errors = [ValidationError.batch("file", MSG_PARSE_FAILED)]
            return False
        return self.load_file(path.name, data)

    def load_paste(self, text: str) -> bool:
        """Parse pasted spreadsheet text; True when the session moved to mapping."""
        self.method = InputMethod.PASTE
        self.paste_text = text
        self.errors = []
        try:
            sheet = parse_pasted_text(text)
        except TabularParseError as e:
            logger.warning("paste rejected: %s", e.error.message)
            self.errors = [e.error]
            return False
        self._enter_mapping(sheet)
        return True

    def _enter_mapping(self, sheet: SheetData) -> None:
        self.headers = list(sheet.headers)
        self.rows = list(sheet.rows)
        self.mapping = auto_map_columns(self.headers)
        for field_name, header in self.column_overrides.items():
            if header is not None and header not in self.headers:
                logger.warning(
                    "column override ignored field=%s header=%r (not in %s)",
                    field_name,
                    header,
                    self.headers,
                )
                continue
            self.mapping.set(field_name, header)
        logger.debug(
            "headers=%s rows=%d mapping=%s",
            self.headers,
            len(self.rows),
            self.mapping.mapped_fields(),
        )
        self.step = Step.MAPPING

    # ---- mapping step ------------------------------------------------------

    def _require_step(self, *steps: Step) -> None:
        if self.step not in steps:
            expected = "/".join(s.value for s in steps)
            raise SessionStateError(f"expected step {expected}, session is at {self.step.value}")

    def set_column(self, field_name: str, header: str | None) -> None:
        self._require_step(Step.MAPPING)
        attr = field_attribute(field_name)
        if header == NO_COLUMN and attr != "household_name":
            header = None
        if header is not None and header != NO_COLUMN and header not in self.headers:
            raise ValueError(f"unknown column: {header!r}")
        self.mapping.set(field_name, header)

    def select_events(self, event_ids: Iterable[str]) -> None:
        self.selected_event_ids = list(dict.fromkeys(event_ids))

    def set_default_side(self, side: str) -> None:
        if side not in SIDES:
            raise ValueError(f"side must be one of {', '.join(SIDES)}: {side!r}")
        self.default_side = side

    def validate_and_preview(self) -> bool:
        """Validate all rows; on success fill the preview and move to preview."""
        self._require_step(Step.MAPPING)
        self.errors = validate_rows(self.rows, self.mapping)
        if self.errors:
            logger.info("validation found %d error(s) in %d row(s)", len(self.errors), len(self.rows))
            return False
        guests = transform_rows(
            self.rows, self.mapping, self.default_side, self.selected_event_ids
        )
        dropped = len(self.rows) - len(guests)
        if dropped:
            logger.info("skipped %d row(s) with blank names", dropped)
        self.preview = PreviewEditor(guests)
        self.step = Step.PREVIEW
        return True

    def back(self) -> None:
        """Return from preview to mapping, keeping headers, rows and mapping."""
        self._require_step(Step.PREVIEW)
        self.preview = PreviewEditor()
        self.errors = []
        self.step = Step.MAPPING

    # ---- preview step ------------------------------------------------------

    @property
    def can_import(self) -> bool:
        return (
            self.is_open
            and not self.importing
            and self.step is Step.PREVIEW
            and len(self.preview) > 0
        )

    async def submit(self) -> bool:
        """Hand the preview list to ``on_import``.

        Returns True on success (session reset and closed), False on failure
        (one ``import`` error appended, preview kept for a retry).

        Raises:
            SubmissionBlockedError: an import is in flight, the preview is empty,
                or the session is not at the preview step.
        """
        if not self.can_import:
            if self.importing:
                reason = "an import is already in progress"
            elif self.step is not Step.PREVIEW:
                reason = f"session is at {self.step.value}, not preview"
            elif not self.is_open:
                reason = "session is closed"
            else:
                reason = "there are no guests to import"
            raise SubmissionBlockedError(reason)

        guests = self.preview.guests()
        generation = self._generation
        self.importing = True
        logger.info("importing %d guest(s)", len(guests))
        try:
            await self._on_import(guests)
        except Exception as e:
            logger.error("import failed: %s", e)
            logger.debug("import failure detail", exc_info=True)
            if generation != self._generation:
                logger.debug("session was reset during import; failure not recorded")
                return False
            self.errors = [*self.errors, ValidationError.batch("import", MSG_IMPORT_FAILED)]
            return False
        finally:
            if generation == self._generation:
                self.importing = False

        if generation != self._generation:
            logger.debug("session was reset during import; result discarded")
            return True
        logger.info("imported %d guest(s)", len(guests))
        self.close()
        return True

    # ---- lifecycle ---------------------------------------------------------

    def reset(self) -> None:
        self._generation += 1
        self.importing = False
        self._clear_state()

    def close(self) -> None:
        self.reset()
        self.is_open = False

    def open(self) -> None:
        self.is_open = True

    def error_summary(self) -> list[str]:
        return format_error_summary(self.errors, self.error_display_limit)

    def copy_template(self, clipboard: ClipboardPort) -> str:
        return copy_template(clipboard)
