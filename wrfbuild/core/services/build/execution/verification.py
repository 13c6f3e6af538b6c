"""
L4 Execution — Artifact verifier.

All-or-nothing: any missing executable fails the stage.
"""

from __future__ import annotations

import logging

from wrfbuild.core.config.settings import InstallerSettings
from wrfbuild.core.models.context import InstallationContext
from wrfbuild.core.models.result import StageResult
from wrfbuild.core.observability.display import section, success, tagged
from wrfbuild.core.services.build.data.sources import COMPANION_ARTIFACTS, MAIN_ARTIFACTS

logger = logging.getLogger(__name__)

STAGE = "verify"


def expected_artifacts(ctx: InstallationContext, settings: InstallerSettings) -> list[str]:
    """Paths relative to the install root, main first."""
    paths = [f"{settings.app_name}/{a}" for a in MAIN_ARTIFACTS]
    if ctx.companion_built:
        paths += [f"{settings.companion_name}/{a}" for a in COMPANION_ARTIFACTS]
    return paths


def verify(ctx: InstallationContext, settings: InstallerSettings) -> StageResult:
    section(logger, "Verifying Installation")

    missing: list[str] = []
    for rel in expected_artifacts(ctx, settings):
        if (ctx.install_root / rel).is_file():
            tagged(logger, "OK", "Found %s", rel)
        else:
            logger.error("Missing %s", rel)
            missing.append(rel)

    if missing:
        logger.error("Verification failed: %d executable(s) missing.", len(missing))
        return StageResult.failure(
            STAGE,
            f"{len(missing)} expected executable(s) missing: {', '.join(missing)}",
            kind="verification_gap",
            log_excerpt="\n".join(f"{ctx.install_root / m}: No such file or directory"
                                  for m in missing),
            details={"missing": missing},
        )

    success(logger, "All executables verified.")
    return StageResult.success(STAGE)
