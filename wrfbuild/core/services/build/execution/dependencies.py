"""
L4 Execution — Dependency installer.

Runs the package-manager procedure for the host's OS family. Exactly
one procedure runs per call; its groups run in order and the first
failing group stops the rest.
"""

from __future__ import annotations

import logging
import shutil

from wrfbuild.core.models.profile import SystemProfile
from wrfbuild.core.models.result import StageResult
from wrfbuild.core.observability.display import section, success
from wrfbuild.core.services.build.data.package_procedures import (
    HOMEBREW_INSTALL_HINT,
    HOMEBREW_URL,
    MANUAL_INSTALL_DOCS,
    PACKAGE_PROCEDURES,
    PROCEDURE_TITLES,
)
from wrfbuild.core.services.build.domain.os_dispatch import effective_os, select_procedure
from wrfbuild.core.services.build.execution.subprocess_runner import run_command

logger = logging.getLogger(__name__)

STAGE = "install_dependencies"


def _command_output(result: dict) -> str:
    return "\n".join(
        part for part in (result.get("stdout", ""), result.get("stderr", ""),
                          result.get("error", ""))
        if part
    )


def install(profile: SystemProfile) -> StageResult:
    """Bring build tools and libraries to a satisfied state.

    Safe to call again after a partial failure: package managers
    treat already-installed packages as satisfied.
    """
    os_family = effective_os(profile)
    procedure_key = select_procedure(profile)

    if procedure_key is None:
        logger.error("Unsupported operating system: %s", profile.distribution or os_family)
        logger.info("You'll need to install the prerequisites manually.")
        logger.info("Please check the WRF documentation at %s for details.", MANUAL_INSTALL_DOCS)
        return StageResult.failure(
            STAGE,
            f"Unsupported operating system '{profile.distribution or os_family}': "
            "manual installation required",
            kind="dependency_install",
            details={"os": os_family},
        )

    procedure = PACKAGE_PROCEDURES[procedure_key]
    section(logger, PROCEDURE_TITLES[os_family])

    # The macOS procedure needs Homebrew itself; installing a package
    # manager is left to the user.
    if procedure["package_manager"] == "brew" and not shutil.which("brew"):
        logger.error("Homebrew is not installed. Please install it from %s", HOMEBREW_URL)
        logger.info("You can install it with: %s", HOMEBREW_INSTALL_HINT)
        return StageResult.failure(
            STAGE,
            "Homebrew is not installed",
            kind="dependency_install",
            details={"procedure": procedure_key, "missing": "brew"},
        )

    needs_sudo = procedure["needs_sudo"]

    refresh = procedure.get("refresh")
    if refresh:
        logger.info("%s...", refresh["label"])
        r = run_command(refresh["command"], needs_sudo=needs_sudo)
        if not r["ok"]:
            logger.error("Failed: %s", refresh["label"].lower())
            return StageResult.failure(
                STAGE,
                f"{refresh['label']} failed",
                kind="dependency_install",
                log_excerpt=_command_output(r),
                details={"procedure": procedure_key, "group": "refresh"},
            )

    completed: list[str] = []
    for group in procedure["groups"]:
        logger.info("Installing %s...", group["label"])
        r = run_command(group["command"], needs_sudo=needs_sudo)
        if not r["ok"]:
            logger.error("Failed to install %s", group["label"])
            return StageResult.failure(
                STAGE,
                f"Failed to install {group['label']} (group '{group['id']}')",
                kind="dependency_install",
                log_excerpt=_command_output(r),
                details={
                    "procedure": procedure_key,
                    "group": group["id"],
                    "completed": completed,
                },
            )
        completed.append(group["id"])

    success(logger, "Prerequisites installed successfully.")
    return StageResult.success(
        STAGE,
        details={"procedure": procedure_key, "completed": completed},
    )
