from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import ImportConfig
from ..models.error_record import ErrorRecord
from ..models.processing_result import FileStat, FileStatus, ImportRunResult
from ..models.validation_error import ValidationError
from ..ports import FileReaderPort, LocalFileReader
from ..tabular.reader import MSG_PARSE_FAILED
from .progress import ProgressTracker
from .session import ImportSession, OnImport

"""Run orchestration for the CLI.

Each input goes through its own ImportSession (upload -> mapping -> preview ->
submit) against the shared sink. Inputs are independent: a failure in one is
recorded and the run moves on to the next. Every ValidationError a session ends
with is written to the JSON Lines error log.
"""

__all__ = [
    "InputSource",
    "ProcessingError",
    "collect_inputs",
    "load_source",
    "process_all",
]

logger = logging.getLogger(__name__)

MSG_NO_GUESTS = "No guests to import"
MSG_NOT_UTF8 = "Pasted text must be UTF-8 encoded"


class ProcessingError(Exception):
    """Fatal error that prevents a run from starting."""


@dataclass(frozen=True)
class InputSource:
    path: Path
    pasted: bool = False  # file content is treated as pasted spreadsheet text


def collect_inputs(files: Sequence[Path], paste_files: Sequence[Path] = ()) -> list[InputSource]:
    """Build the input list, failing fast on paths that are missing or not files."""
    sources = [InputSource(Path(p)) for p in files]
    sources += [InputSource(Path(p), pasted=True) for p in paste_files]
    for src in sources:
        if not src.path.exists():
            raise ProcessingError(f"input not found: {src.path}")
        if not src.path.is_file():
            raise ProcessingError(f"input is not a file: {src.path}")
    return sources


def load_source(
    session: ImportSession, source: InputSource, reader: FileReaderPort | None = None
) -> bool:
    """Load one input into ``session``; read and decode failures become session errors."""
    reader = reader or LocalFileReader()
    if not source.pasted:
        return session.load_path(source.path, reader)
    try:
        text = reader.read(source.path).decode("utf-8-sig")
    except OSError as e:
        logger.warning("could not read pasted text file=%s: %s", source.path, e)
        session.errors = [ValidationError.batch("paste", MSG_PARSE_FAILED)]
        return False
    except UnicodeDecodeError as e:
        logger.warning("pasted text file=%s is not UTF-8: %s", source.path, e)
        session.errors = [ValidationError.batch("paste", MSG_NOT_UTF8)]
        return False
    return session.load_paste(text)


async def _process_source(
    source: InputSource,
    config: ImportConfig,
    sink: OnImport,
    error_log: ErrorLogBuffer,
    reader: FileReaderPort,
) -> FileStat:
    name = source.path.name
    started = time.perf_counter()
    session = ImportSession.from_config(config, sink)

    ok = load_source(session, source, reader)
    if ok:
        logger.info(
            "%s: %d row(s), columns mapped: %s",
            name,
            len(session.rows),
            ", ".join(f"{k}={v!r}" for k, v in session.mapping.mapped_fields().items()) or "-",
        )
        ok = session.validate_and_preview()

    imported = 0
    if ok and not session.can_import:
        session.errors = [ValidationError.batch("import", MSG_NO_GUESTS)]
        ok = False
    if ok:
        guest_count = len(session.preview)
        ok = await session.submit()
        if ok:
            imported = guest_count

    errors = list(session.errors)
    stopped_at = session.step.value
    if not ok:
        for line in session.error_summary():
            logger.warning("%s: %s", name, line)
        error_log.extend([ErrorRecord.from_validation_error(name, e) for e in errors])

    return FileStat(
        file_name=name,
        status=FileStatus.SUCCESS if ok else FileStatus.FAILED,
        imported_guests=imported,
        errors=len(errors),
        elapsed_seconds=time.perf_counter() - started,
        step="done" if ok else stopped_at,
    )


async def _process_all(
    sources: Sequence[InputSource],
    config: ImportConfig,
    sink: OnImport,
    error_log: ErrorLogBuffer,
    reader: FileReaderPort,
) -> list[FileStat]:
    stats: list[FileStat] = []
    with ProgressTracker(len(sources), description="Importing guests") as progress:
        for source in sources:
            progress.start_file(source.path)
            stat = await _process_source(source, config, sink, error_log, reader)
            stats.append(stat)
            progress.finish_file(status=stat.status.value, guests=stat.imported_guests)
    return stats


def process_all(
    sources: Sequence[InputSource],
    config: ImportConfig,
    sink: OnImport,
    error_log: ErrorLogBuffer | None = None,
    reader: FileReaderPort | None = None,
) -> ImportRunResult:
    """Import every input and aggregate the outcome.

    Args:
        sources: inputs from collect_inputs
        config: run configuration (wedding, default side, events, overrides)
        sink: async on_import collaborator receiving each validated guest list
        error_log: buffer for error records (a fresh one when None)
        reader: file reader port (local filesystem when None)
    """
    start_time = datetime.now(UTC)
    error_log = error_log if error_log is not None else ErrorLogBuffer()
    reader = reader or LocalFileReader()

    stats = asyncio.run(_process_all(sources, config, sink, error_log, reader))

    try:
        log_path = error_log.flush()
    except OSError as e:
        logger.warning("could not write error log: %s", e)
    else:
        if log_path is not None:
            logger.info("error log written: %s", log_path)

    end_time = datetime.now(UTC)
    return ImportRunResult(
        success_files=sum(1 for s in stats if s.status is FileStatus.SUCCESS),
        failed_files=sum(1 for s in stats if s.status is FileStatus.FAILED),
        total_guests=sum(s.imported_guests for s in stats),
        total_errors=sum(s.errors for s in stats),
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_stats=stats,
    )
