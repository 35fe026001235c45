from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import psycopg2
from dotenv import load_dotenv

from guest_import.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from guest_import.db.guest_sink import MockGuestSink, PostgresGuestSink
from guest_import.logging.init import enable_debug, log_summary, setup_logging
from guest_import.models.config_models import ImportConfig
from guest_import.models.parsed_guest import ParsedGuest
from guest_import.ports import StreamClipboard
from guest_import.services.orchestrator import (
    InputSource,
    ProcessingError,
    collect_inputs,
    load_source,
    process_all,
)
from guest_import.services.session import ImportSession
from guest_import.services.summary import render_summary_line
from guest_import.services.template import copy_template

"""CLI entrypoint.

Flow:
- Load .env (overrides the process environment) and the YAML config
- Collect input files (.csv/.xlsx/.xls, or text files holding pasted content)
- Import each through an ImportSession into PostgreSQL, or count only (mock mode)
  when DISABLE_DB_CONNECT=1 or the connection fails
- Print the SUMMARY line and exit 0 (all inputs imported), 2 (some failed) or
  1 (fatal: bad config, missing input)
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

INSPECT_SAMPLE_ROWS = 3


def _resolve_dsn(cfg: ImportConfig) -> str:
    """Connection string: DATABASE_URL / PGDSN, then PG* variables, then config."""
    db_cfg = cfg.database
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if dsn:
        return dsn
    host = os.getenv("PGHOST", db_cfg.host or "localhost")
    port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
    user = os.getenv("PGUSER", db_cfg.user or "postgres")
    password = os.getenv("PGPASSWORD", db_cfg.password or "")
    database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn


@contextmanager
def _db_connection(cfg: ImportConfig) -> Iterator[Any]:  # pragma: no cover (thin wrapper)
    """psycopg2 connection; transactions are committed per batch by the sink."""
    conn = psycopg2.connect(_resolve_dsn(cfg))
    conn.autocommit = False
    try:
        yield conn
    finally:
        conn.close()


def _load_env_file(path: Path, override: bool = True) -> None:
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="guest-import",
        description="Import wedding guest lists from CSV/Excel files or pasted spreadsheet text",
    )
    p.add_argument("files", nargs="*", type=Path, help="Guest list files (.csv, .xlsx, .xls)")
    p.add_argument(
        "--paste-file",
        action="append",
        type=Path,
        default=[],
        metavar="PATH",
        help="Text file holding copied spreadsheet content (tab or comma separated); repeatable",
    )
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="YAML config path")
    p.add_argument("--inspect-data", action="store_true", help="Print headers, suggested mapping and first rows, then exit")
    p.add_argument("--template", action="store_true", help="Print the guest list template and exit")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


async def _discard(guests: list[ParsedGuest]) -> None:  # pragma: no cover (never submitted)
    return None


def _inspect_data(sources: list[InputSource]) -> int:
    for src in sources:
        print(f"FILE: {src.path.name}")
        session = ImportSession(_discard)
        loaded = load_source(session, src)
        if not loaded:
            for line in session.error_summary():
                print(f"  error: {line}")
            continue
        print(f"  headers={session.headers}")
        print(f"  mapping={session.mapping.mapped_fields()}")
        print(f"  rows={len(session.rows)} sample_rows={session.rows[:INSPECT_SAMPLE_ROWS]}")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # [] is a valid argv (tests); only fall back to sys.argv for None
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    if args.debug:
        enable_debug()

    if args.template:
        copy_template(StreamClipboard(sys.stdout))
        return EXIT_SUCCESS_ALL

    try:
        sources = collect_inputs(args.files, args.paste_file)
    except ProcessingError as e:
        logger.error(f"input: {e}")
        return EXIT_FATAL
    if not sources:
        logger.error("no input files given")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(sources)

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    logger.info(f"Importing {len(sources)} input(s) for wedding {cfg.wedding_id}")

    db_mode = "mock"
    if os.getenv("DISABLE_DB_CONNECT") == "1":
        logger.debug("DB connect disabled via DISABLE_DB_CONNECT=1 -> mock mode")
        mock = MockGuestSink()
        result = process_all(sources, cfg, mock)
        households = mock.created_households
    else:
        try:
            with _db_connection(cfg) as conn:
                db_mode = "live"
                sink = PostgresGuestSink(conn, cfg.wedding_id)
                result = process_all(sources, cfg, sink)
                households = sink.created_households
        except psycopg2.OperationalError as db_e:
            if db_mode == "live":
                raise
            logger.info(f"DB connection failed -> fallback to mock mode: {db_e}")
            mock = MockGuestSink()
            result = process_all(sources, cfg, mock)
            households = mock.created_households

    logger.info(f"mode={db_mode} guests={result.total_guests} households={households}")

    summary_line = render_summary_line(result)
    log_summary(summary_line[len("SUMMARY "):])

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL
