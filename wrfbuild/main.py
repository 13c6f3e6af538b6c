"""
WRF build installer — CLI entrypoint.

Usage:
    wrfbuild
    python -m wrfbuild.main

There are no options: every decision is asked interactively.
Environment:
    WRFBUILD_CONFIG     settings file (default: wrfbuild.yml, searched upward)
    WRFBUILD_LOG_LEVEL  console verbosity (default: INFO)
"""

from __future__ import annotations

import logging
import os
import sys

import click

from wrfbuild import __version__
from wrfbuild.core.config.settings import ConfigError, load_settings
from wrfbuild.core.observability.logging_config import setup_logging
from wrfbuild.core.services.build import InstallPipeline
from wrfbuild.ui.cli.console import ClickConsoleHandler
from wrfbuild.ui.cli.prompter import ClickPrompter

logger = logging.getLogger(__name__)


@click.command()
def cli() -> None:
    """Install, configure and compile WRF (and optionally WPS) on this machine."""
    try:
        settings = load_settings()
    except ConfigError as e:
        click.secho(f"[ERROR] {e}", fg="red", err=True)
        sys.exit(1)

    setup_logging(
        level=os.environ.get("WRFBUILD_LOG_LEVEL", "INFO"),
        log_file=settings.log_path(),
        error_log_file=settings.error_log_path(),
        console=ClickConsoleHandler(),
    )
    logger.debug("wrfbuild %s", __version__)

    outcome = InstallPipeline(settings, ClickPrompter()).run()
    sys.exit(outcome.exit_code)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
