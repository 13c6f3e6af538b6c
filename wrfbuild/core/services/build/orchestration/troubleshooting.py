"""
L5 Orchestration — Diagnostic engine and troubleshooting menu.

``diagnose`` turns a failed StageResult into a root-cause guess and
prints the matching fixes. ``troubleshoot`` runs the menu until the
user picks a way forward; it returns an action for the pipeline and
never re-enters a stage itself.
"""

from __future__ import annotations

import logging
from pathlib import Path

from wrfbuild.core.models.result import Diagnosis, StageResult
from wrfbuild.core.observability.display import banner, section, tagged
from wrfbuild.core.services.build.data.diagnosis import TROUBLESHOOTING_OPTIONS
from wrfbuild.core.services.build.data.messages import PROMPT_TROUBLESHOOT
from wrfbuild.core.services.build.data.sources import FORUM_URL, USER_GUIDE_URL
from wrfbuild.core.services.build.domain.error_analysis import classify_failure
from wrfbuild.core.services.build.domain.prompter import Prompter

logger = logging.getLogger(__name__)

# Menu selections → pipeline actions
ACTION_SHOW_LOG = "show_log"
ACTION_REENTER_ENV = "reenter_env"
ACTION_REENTER_DEPS = "reenter_deps"
ACTION_ABORT = "abort"

_ACTIONS = {
    "1": ACTION_SHOW_LOG,
    "2": ACTION_REENTER_ENV,
    "3": ACTION_REENTER_DEPS,
    "4": ACTION_ABORT,
}
_DEFAULT_OPTION = "4"


def diagnose(
    result: StageResult,
    error_log: Path,
    app_name: str = "WRF",
    install_root: Path | None = None,
) -> Diagnosis:
    """Classify a failure and print the diagnosis with suggested fixes.

    Paths under ``install_root`` are blanked out before classifying.
    """
    section(logger, "Error Diagnosis")

    text = f"{result.reason}\n{result.log_excerpt}"
    if install_root is not None:
        text = text.replace(str(install_root), "<install_root>")
    diagnosis = classify_failure(text)
    tagged(logger, "DIAGNOSIS", "%s", diagnosis.title)
    for i, fix in enumerate(diagnosis.fixes, 1):
        tagged(logger, "FIX", "%d. %s", i, fix)
    if diagnosis.category == "unknown":
        logger.info("Error log: %s", error_log)
        if result.log_path:
            logger.info("Build log: %s", result.log_path)

    tagged(logger, "HELP", "For detailed troubleshooting, please visit:")
    tagged(logger, "LINK", "%s Users Guide: %s", app_name, USER_GUIDE_URL)
    tagged(logger, "LINK", "%s Forum: %s", app_name, FORUM_URL)
    return diagnosis


def report_log_locations(log_file: Path, error_log: Path) -> None:
    logger.info("Log file: %s", log_file)
    logger.info("Error log: %s", error_log)


def _show_error_log(prompter: Prompter, error_log: Path) -> None:
    section(logger, "Detailed Error Log")
    try:
        text = error_log.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.warning("Cannot read %s: %s", error_log, e)
        text = ""
    prompter.show(text)
    banner(logger, text)
    prompter.pause()


def troubleshoot(prompter: Prompter, log_file: Path, error_log: Path) -> str:
    """Show the menu until the user chooses an action other than viewing the log.

    Returns one of ``ACTION_REENTER_ENV``, ``ACTION_REENTER_DEPS`` or
    ``ACTION_ABORT``. Invalid input re-prompts.
    """
    while True:
        section(logger, "Troubleshooting Options")
        for number, label in TROUBLESHOOTING_OPTIONS:
            logger.info("%s. %s", number, label)

        option = prompter.ask(PROMPT_TROUBLESHOOT, default=_DEFAULT_OPTION).strip()
        action = _ACTIONS.get(option or _DEFAULT_OPTION)

        if action is None:
            logger.error("Invalid option. Please enter a number between 1 and %d.",
                         len(TROUBLESHOOTING_OPTIONS))
            continue

        if action == ACTION_SHOW_LOG:
            _show_error_log(prompter, error_log)
            continue

        if action == ACTION_REENTER_ENV:
            section(logger, "Fixing NetCDF Environment Variables")
        elif action == ACTION_REENTER_DEPS:
            section(logger, "Reinstalling Prerequisites")
        else:
            logger.info("Exiting troubleshooter. You can review the logs at:")
            report_log_locations(log_file, error_log)
        return action
