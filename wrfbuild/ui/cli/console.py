"""
Console output — a logging handler that renders tagged records with click.

Lines look like the installer always printed them::

    === Detecting System Environment ===
    [INFO] Operating System: ubuntu
    [SUCCESS] WRF compiled successfully!
"""

from __future__ import annotations

import logging

import click

# tag → click.style kwargs
_TAG_STYLES: dict[str, dict] = {
    "INFO": {"fg": "blue"},
    "SUCCESS": {"fg": "green"},
    "OK": {"fg": "green"},
    "WARNING": {"fg": "yellow"},
    "ERROR": {"fg": "red"},
    "DIAGNOSIS": {"fg": "yellow"},
    "FIX": {"fg": "blue"},
    "HELP": {"fg": "green"},
    "LINK": {"fg": "blue"},
}


def record_tag(record: logging.LogRecord) -> str:
    """Display tag of a record: its ``tag`` extra, else its level name."""
    tag = getattr(record, "tag", None)
    if tag:
        return tag
    if record.levelno >= logging.ERROR:
        return "ERROR"
    if record.levelno >= logging.WARNING:
        return "WARNING"
    if record.levelno <= logging.DEBUG:
        return "DEBUG"
    return "INFO"


def render(record: logging.LogRecord, color: bool = True) -> str:
    message = record.getMessage()
    tag = record_tag(record)
    if tag == "SECTION":
        line = f"\n=== {message} ==="
        return click.style(line, fg="yellow", bold=True) if color else line
    prefix = f"[{tag}]"
    if color:
        prefix = click.style(prefix, **_TAG_STYLES.get(tag, {}))
    return f"{prefix} {message}"


class ClickConsoleHandler(logging.Handler):
    """Send records to the terminal; errors go to stderr.

    BANNER records are skipped: the prompter has already shown them.
    """

    def __init__(self, color: bool | None = None) -> None:
        super().__init__()
        self.color = color

    def emit(self, record: logging.LogRecord) -> None:
        if record_tag(record) == "BANNER":
            return
        try:
            text = render(record, color=self.color is not False)
            click.echo(text, err=record.levelno >= logging.ERROR, color=self.color)
        except Exception:
            self.handleError(record)
