"""
Logging configuration — central setup for the installer.

Called once at startup by main.py.  Every module that does
``logger = logging.getLogger(__name__)`` inherits this config.

Three destinations:
    console         user-facing output (handler supplied by the UI layer)
    install log     every record, timestamped, truncated per run
    error log       ERROR records only, timestamped, truncated per run

Console level: WRFBUILD_LOG_LEVEL env var  >  INFO (default)
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# ── Format strings ──────────────────────────────────────────────

# Fallback console format when the UI does not supply a handler
_FMT_CONSOLE = "[%(levelname)s] %(message)s"

# File output: timestamp per entry
_FMT_FILE = "%(asctime)s - %(levelname)s - %(message)s"
_FMT_ERROR_FILE = "%(asctime)s - ERROR: %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

# DEBUG adds the emitting module
_FMT_FILE_DEBUG = "%(asctime)s - %(levelname)s - %(name)s:%(lineno)d - %(message)s"


class _TaggedFormatter(logging.Formatter):
    """Prefix file entries with the record's display tag, if any."""

    def format(self, record: logging.LogRecord) -> str:
        tag = getattr(record, "tag", None)
        if not tag or tag in ("INFO", "ERROR", "BANNER"):
            return super().format(record)

        original = record.msg, record.args
        if tag == "SECTION":
            record.msg = f"=== {record.getMessage()} ==="
        else:
            record.msg = f"[{tag}] {record.getMessage()}"
        record.args = ()
        try:
            return super().format(record)
        finally:
            record.msg, record.args = original


def setup_logging(
    level: str = "INFO",
    log_file: Path | str | None = None,
    error_log_file: Path | str | None = None,
    console: logging.Handler | None = None,
) -> None:
    """Configure Python logging for the entire process.

    Both log files are opened in write mode, so each run starts with
    empty logs and appends from then on.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR).
        log_file: Informational log; receives every record at INFO
            (DEBUG when ``level`` is DEBUG).
        error_log_file: Error log; receives ERROR and above only.
        console: Handler for terminal output. Defaults to a plain
            stderr stream handler.
    """
    numeric_level = _parse_level(level)

    if console is None:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(logging.Formatter(_FMT_CONSOLE))
    console.setLevel(numeric_level)

    # ── Root logger ─────────────────────────────────────────────
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    root.addHandler(console)

    effective_level = numeric_level

    # ── Informational log ───────────────────────────────────────
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_level = logging.DEBUG if numeric_level <= logging.DEBUG else logging.INFO
        effective_level = min(effective_level, file_level)
        fmt = _FMT_FILE_DEBUG if file_level <= logging.DEBUG else _FMT_FILE

        fh = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(_TaggedFormatter(fmt, datefmt=_DATEFMT_FILE))
        root.addHandler(fh)

    # ── Error log ───────────────────────────────────────────────
    if error_log_file:
        Path(error_log_file).parent.mkdir(parents=True, exist_ok=True)
        eh = logging.FileHandler(error_log_file, mode="w", encoding="utf-8")
        eh.setLevel(logging.ERROR)
        eh.setFormatter(logging.Formatter(_FMT_ERROR_FILE, datefmt=_DATEFMT_FILE))
        root.addHandler(eh)

    root.setLevel(effective_level)

    # Don't propagate exceptions from logging itself
    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return logging.INFO
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.INFO
    return numeric
