"""
L4 Execution — Compiler driver.

Runs the source tree's ``./compile`` with all output redirected to
``compile.log``. The build counts as successful only when its expected
executables exist; the exit status of ``./compile`` is not trusted.
"""

from __future__ import annotations

import logging
from pathlib import Path

from wrfbuild.core.config.settings import InstallerSettings
from wrfbuild.core.models.context import InstallationContext
from wrfbuild.core.models.result import StageResult
from wrfbuild.core.observability.display import section, success
from wrfbuild.core.services.build.data.sources import (
    COMPANION_BUILD_ARTIFACTS,
    COMPILE_LOG,
    MAIN_BUILD_ARTIFACTS,
)
from wrfbuild.core.services.build.domain.error_analysis import scan_build_log, tail_lines
from wrfbuild.core.services.build.execution.subprocess_runner import run_command

logger = logging.getLogger(__name__)


def _target_plan(target: str, ctx: InstallationContext, settings: InstallerSettings) -> dict:
    if target == "main":
        return {
            "name": settings.app_name,
            "artifacts": MAIN_BUILD_ARTIFACTS,
            "clean": ["./clean", "-a"],
            "compile_args": [settings.compile_target, "-j", str(ctx.core_count)],
        }
    if target == "companion":
        return {
            "name": settings.companion_name,
            "artifacts": COMPANION_BUILD_ARTIFACTS,
            "clean": ["./clean"],
            "compile_args": [],
        }
    raise ValueError(f"Unknown compile target: {target!r}")


def missing_artifacts(source_dir: Path, artifacts: tuple[str, ...]) -> list[str]:
    return [a for a in artifacts if not (source_dir / a).is_file()]


def _read_log(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return ""


def compile_target(
    ctx: InstallationContext,
    target: str,
    settings: InstallerSettings,
) -> StageResult:
    """Build one source tree.

    A clean step runs first when a previous build's primary executable
    is present. The main build refuses to start while NetCDF is
    unresolved, so the failure names the library instead of surfacing
    as a missing header deep in the log.
    """
    plan = _target_plan(target, ctx, settings)
    stage = f"compile_{target}"
    name = plan["name"]
    source_dir = ctx.source_dir(name)
    log_path = source_dir / COMPILE_LOG

    section(logger, f"Compiling {name}")

    if target == "main" and not ctx.resolved_paths.get("netcdf"):
        logger.error("NetCDF library not resolved; cannot compile %s", name)
        return StageResult.failure(
            stage,
            "NetCDF library not resolved: install NetCDF or set NETCDF before compiling",
            kind="environment_gap",
            log_excerpt="NetCDF library not resolved",
        )

    if not source_dir.is_dir():
        logger.error("Failed to change to %s directory", name)
        return StageResult.failure(
            stage, f"{name} source directory {source_dir} does not exist",
            kind="build_artifact_missing",
            log_excerpt=f"{source_dir}: No such file or directory",
        )

    if (source_dir / plan["artifacts"][0]).is_file():
        logger.info("Cleaning previous build...")
        run_command(plan["clean"], cwd=source_dir)

    cmd = ["./compile", *plan["compile_args"]]
    logger.info("Compiling %s (this may take a while)...", name)
    logger.info("Compilation log: %s", log_path)
    run_command(cmd, cwd=source_dir, log_path=log_path)

    missing = missing_artifacts(source_dir, plan["artifacts"])
    if not missing:
        success(logger, f"{name} compiled successfully!")
        logger.info("Executables created: %s", ", ".join(plan["artifacts"]))
        return StageResult.success(
            stage, log_path=str(log_path), details={"artifacts": list(plan["artifacts"])},
        )

    logger.error("%s compilation failed. Check %s for details.", name, log_path)
    log_text = _read_log(log_path)
    tail = tail_lines(log_text, settings.log_tail_lines)

    # Excerpt: signature lines first, then the tail
    found = scan_build_log(log_text)
    excerpt = list(tail)
    if found:
        reason = found["reason"]
        excerpt = found["context"] + excerpt
        logger.error("%s", reason)
        for line in found["context"]:
            logger.error("%s", line)
    else:
        reason = f"{name} build failed; see the last {settings.log_tail_lines} lines of {COMPILE_LOG}"

    if tail:
        logger.info("Last %d lines of compilation log:", len(tail))
        for line in tail:
            logger.info("%s", line)

    return StageResult.failure(
        stage,
        reason,
        kind="build_artifact_missing",
        log_excerpt="\n".join(excerpt),
        log_path=str(log_path),
        details={"missing": missing, "signature": found["signature"] if found else None},
    )
