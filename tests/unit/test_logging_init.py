from __future__ import annotations

import logging
from io import StringIO

from guest_import.logging.init import (
    LOGGER_NAME,
    SUMMARY_LEVEL,
    LabeledFormatter,
    enable_debug,
    get_logger,
    log_summary,
    setup_logging,
)


def _capture(logger: logging.Logger) -> StringIO:
    buf = StringIO()
    logger.handlers[0].setStream(buf)
    return buf


def test_setup_logging_configures_app_logger():
    logger = setup_logging()
    assert logger.name == LOGGER_NAME
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, LabeledFormatter)
    assert logger.propagate is False


def test_setup_logging_is_idempotent():
    assert setup_logging() is setup_logging()
    assert get_logger() is setup_logging()
    assert len(logging.getLogger(LOGGER_NAME).handlers) == 1


def test_labeled_prefixes():
    logger = setup_logging()
    buf = _capture(logger)
    logger.info("info message")
    logger.warning("warn message")
    logger.error("error message")
    log_summary("files=1")
    assert buf.getvalue().splitlines() == [
        "INFO info message",
        "WARN warn message",
        "ERROR error message",
        "SUMMARY files=1",
    ]


def test_module_loggers_share_the_handler():
    logger = setup_logging()
    buf = _capture(logger)
    logging.getLogger("guest_import.services.session").warning("from a module")
    assert buf.getvalue() == "WARN from a module\n"


def test_debug_hidden_until_enabled():
    logger = setup_logging()
    buf = _capture(logger)
    logger.debug("hidden")
    enable_debug()
    logger.debug("shown")
    assert "hidden" not in buf.getvalue()
    assert "DEBUG shown" in buf.getvalue()


def test_traceback_only_on_debug_records():
    fmt = LabeledFormatter()
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        import sys

        exc_info = sys.exc_info()
    err = logging.LogRecord(LOGGER_NAME, logging.ERROR, __file__, 1, "failed", None, exc_info)
    dbg = logging.LogRecord(LOGGER_NAME, logging.DEBUG, __file__, 1, "detail", None, exc_info)
    assert fmt.format(err) == "ERROR failed"
    assert fmt.format(dbg).startswith("DEBUG detail\nTraceback")


def test_summary_level_value():
    assert SUMMARY_LEVEL == 25
    assert logging.getLevelName(SUMMARY_LEVEL) == "SUMMARY"
