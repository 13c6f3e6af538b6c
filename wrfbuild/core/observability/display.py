"""
Display helpers — user-facing messages as log records.

Stages report progress through the standard ``logging`` module. A
``tag`` extra tells the console handler how to render the line
(``SUCCESS`` in green, ``SECTION`` as a header, ...); the file
handlers record the same text, so every message the user sees also
lands in the install log.
"""

from __future__ import annotations

import logging
from typing import Any


def section(logger: logging.Logger, title: str) -> None:
    """Emit a section header."""
    logger.info(title, extra={"tag": "SECTION"})


def success(logger: logging.Logger, msg: str, *args: Any) -> None:
    logger.info(msg, *args, extra={"tag": "SUCCESS"})


def tagged(logger: logging.Logger, tag: str, msg: str, *args: Any) -> None:
    """Emit an informational line with a custom tag (FIX, HELP, OK, ...)."""
    logger.info(msg, *args, extra={"tag": tag})


def banner(logger: logging.Logger, text: str) -> None:
    """Record text the UI already displayed (banners, log dumps).

    Reaches the log files only; the console handler skips it.
    """
    logger.info("%s", text, extra={"tag": "BANNER"})
