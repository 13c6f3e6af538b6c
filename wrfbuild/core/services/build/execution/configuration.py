"""
L4 Execution — Interactive configurator.

Drives the source tree's own ``./configure``. With ``expect`` on the
host the selections are fed automatically; without it the configure
prompts are handed straight to the user.

Success means the configuration artifact exists afterwards. The
configure script's exit status is ignored.
"""

from __future__ import annotations

import logging
import re
import shutil
from pathlib import Path

from wrfbuild.core.config.settings import InstallerSettings
from wrfbuild.core.models.context import InstallationContext
from wrfbuild.core.models.result import StageResult
from wrfbuild.core.observability.display import section, success
from wrfbuild.core.services.build.data.sources import (
    COMPANION_CONFIG_ARTIFACT,
    COMPANION_CONFIG_CHOICE,
    MAIN_CONFIG_ARTIFACT,
    NESTING_OPTIONS,
    PROMPT_NESTING,
    PROMPT_SELECTION,
)
from wrfbuild.core.services.build.domain.prompter import Prompter, choose_number
from wrfbuild.core.services.build.execution.subprocess_runner import run_command

logger = logging.getLogger(__name__)

_OPTION_LINE = re.compile(r"^\s*[0-9]+\.")


def list_compiler_options(source_dir: Path) -> list[str]:
    """Numbered compiler/parallelism lines printed by ``./configure -h``."""
    r = run_command(["./configure", "-h"], cwd=source_dir)
    output = r.get("stdout", "")
    return [line for line in output.splitlines() if _OPTION_LINE.match(line)]


def expect_script(answers: list[tuple[str, str]]) -> str:
    """An expect script that spawns ./configure and answers its prompts."""
    lines = ["#!/usr/bin/expect", "spawn ./configure"]
    for prompt, answer in answers:
        lines.append(f'expect "{prompt}"')
        lines.append(f'send "{answer}\\r"')
    lines.append("expect eof")
    return "\n".join(lines) + "\n"


def run_configure(source_dir: Path, answers: list[tuple[str, str]], script_name: str) -> None:
    """Run ./configure, scripted when expect is available."""
    if shutil.which("expect"):
        logger.info("Using expect to automate configuration...")
        script = source_dir / script_name
        try:
            script.write_text(expect_script(answers), encoding="utf-8")
            script.chmod(0o755)
        except OSError as e:
            logger.warning("Cannot write %s (%s); configuring manually.", script, e)
        else:
            try:
                run_command(["expect", script_name], cwd=source_dir, capture=False)
            finally:
                script.unlink(missing_ok=True)
            return

    logger.info("Running configuration manually. Please enter options when prompted.")
    run_command(["./configure"], cwd=source_dir, capture=False)


def _missing_artifact(stage: str, artifact: Path, name: str) -> StageResult:
    logger.error("%s configuration failed. Check the output above for errors.", name)
    return StageResult.failure(
        stage,
        f"{name} configuration failed: {artifact.name} was not created",
        kind="configuration_missing",
        log_excerpt=f"{artifact}: No such file or directory ({artifact.name} missing)",
        details={"artifact": str(artifact)},
    )


def configure(
    ctx: InstallationContext,
    settings: InstallerSettings,
    prompter: Prompter,
) -> StageResult:
    """Configure the main application.

    Asks for the compiler/parallelism option and the nesting option,
    then runs configure with those answers.
    """
    stage = "configure_main"
    name = settings.app_name
    section(logger, f"Configuring {name}")

    source_dir = ctx.source_dir(name)
    if not source_dir.is_dir():
        logger.error("Failed to change to %s directory", name)
        return StageResult.failure(
            stage, f"{name} source directory {source_dir} does not exist",
            kind="configuration_missing",
            log_excerpt=f"{source_dir}: No such file or directory",
        )

    options = list_compiler_options(source_dir)
    if options:
        logger.info("Available compiler options:")
        for line in options:
            logger.info("%s", line)
    else:
        logger.warning("Could not list compiler options; configure will print them.")

    compiler_choice = choose_number(prompter, "Please select compiler option", "1")
    logger.info("Selected compiler option: %s", compiler_choice)

    logger.info("Nesting options:")
    for number, label in NESTING_OPTIONS:
        logger.info("%s. %s", number, label)
    nesting_choice = choose_number(
        prompter, "Please select nesting option", "1",
        valid={number for number, _ in NESTING_OPTIONS},
    )
    logger.info("Selected nesting option: %s", nesting_choice)

    run_configure(
        source_dir,
        [(PROMPT_SELECTION, compiler_choice), (PROMPT_NESTING, nesting_choice)],
        "configure_wrf.exp",
    )

    artifact = source_dir / MAIN_CONFIG_ARTIFACT
    if not artifact.is_file():
        return _missing_artifact(stage, artifact, name)

    success(logger, f"{name} configured successfully.")
    return StageResult.success(
        stage,
        details={"compiler_option": compiler_choice, "nesting_option": nesting_choice},
    )


def configure_companion(ctx: InstallationContext, settings: InstallerSettings) -> StageResult:
    """Configure the preprocessing system with the default selection."""
    stage = "configure_companion"
    name = settings.companion_name
    logger.info("Configuring %s...", name)

    source_dir = ctx.source_dir(name)
    if not source_dir.is_dir():
        logger.error("Failed to change to %s directory", name)
        return StageResult.failure(
            stage, f"{name} source directory {source_dir} does not exist",
            kind="configuration_missing",
            log_excerpt=f"{source_dir}: No such file or directory",
        )

    if not shutil.which("expect"):
        logger.info("Select the option that matches your %s configuration.", settings.app_name)
    run_configure(source_dir, [(PROMPT_SELECTION, COMPANION_CONFIG_CHOICE)], "configure_wps.exp")

    artifact = source_dir / COMPANION_CONFIG_ARTIFACT
    if not artifact.is_file():
        return _missing_artifact(stage, artifact, name)

    success(logger, f"{name} configured successfully.")
    return StageResult.success(stage)
