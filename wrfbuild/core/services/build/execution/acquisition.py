"""
L4 Execution — Source acquisition.

Download → extract → rename, each step reported separately so the
diagnosis can point at the right one. wget is preferred (progress
bar), curl is the fallback.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from wrfbuild.core.config.settings import InstallerSettings
from wrfbuild.core.models.context import InstallationContext
from wrfbuild.core.models.result import StageResult
from wrfbuild.core.observability.display import section, success
from wrfbuild.core.services.build.execution.subprocess_runner import run_command

logger = logging.getLogger(__name__)


def _archive_for(target: str, settings: InstallerSettings) -> dict:
    if target == "main":
        name, version, url = settings.app_name, settings.main_version, settings.main_url
    elif target == "companion":
        name, version, url = (
            settings.companion_name, settings.companion_version, settings.companion_url,
        )
    else:
        raise ValueError(f"Unknown acquisition target: {target!r}")
    return {
        "name": name,
        "version": version,
        "url": url,
        "tarball": f"{name.lower()}-{version}.tar.gz",
        "extracted": f"{name}-{version}",
    }


def download_command(url: str, dest: Path) -> list[str] | None:
    """Download command for the best available transport, or None."""
    if shutil.which("wget"):
        return ["wget", "-q", "--show-progress", "-O", str(dest), url]
    if shutil.which("curl"):
        return ["curl", "-L", "--progress-bar", "-o", str(dest), url]
    return None


def acquire(
    ctx: InstallationContext,
    target: str,
    settings: InstallerSettings,
) -> StageResult:
    """Fetch and unpack one source archive into the install root.

    On success ``<install_root>/<name>`` exists. A leftover tree with
    that name from an earlier attempt is replaced.
    """
    archive = _archive_for(target, settings)
    stage = f"acquire_{target}"
    name = archive["name"]
    root = ctx.install_root

    section(logger, f"Downloading {name}")

    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error("Cannot create %s: %s", root, e)
        return StageResult.failure(
            stage, f"Cannot create install directory {root}: {e}",
            kind="acquisition", log_excerpt=str(e), details={"step": "mkdir"},
        )

    # ── Download ──
    tarball = root / archive["tarball"]
    cmd = download_command(archive["url"], tarball)
    if cmd is None:
        logger.error("Neither wget nor curl is installed. Cannot download files.")
        return StageResult.failure(
            stage, "No download transport available (wget or curl)",
            kind="transport_unavailable", details={"step": "download"},
        )

    logger.info("Downloading %s v%s...", name, archive["version"])
    r = run_command(cmd, capture=False)
    if not r["ok"] or not tarball.is_file():
        logger.error("Failed to download %s", name)
        return StageResult.failure(
            stage, f"Failed to download {name} from {archive['url']}",
            kind="acquisition",
            log_excerpt=r.get("error", ""),
            details={"step": "download", "url": archive["url"]},
        )

    # ── Extract ──
    logger.info("Extracting %s...", name)
    r = run_command(["tar", "-xf", str(tarball), "-C", str(root)])
    extracted = root / archive["extracted"]
    if not r["ok"] or not extracted.is_dir():
        logger.error("Failed to extract %s", name)
        excerpt = r.get("stderr") or r.get("error", "")
        if r["ok"]:
            excerpt = f"{extracted}: No such file or directory"
        return StageResult.failure(
            stage, f"Failed to extract {tarball.name}",
            kind="acquisition", log_excerpt=excerpt, details={"step": "extract"},
        )

    # ── Rename ──
    canonical = root / name
    try:
        if canonical.exists():
            logger.warning("Replacing existing %s", canonical)
            shutil.rmtree(canonical)
        extracted.rename(canonical)
    except OSError as e:
        logger.error("Failed to rename %s directory", name)
        return StageResult.failure(
            stage, f"Failed to rename {extracted.name} to {name}",
            kind="acquisition", log_excerpt=str(e), details={"step": "rename"},
        )

    success(logger, f"{name} downloaded and extracted successfully.")
    return StageResult.success(stage, details={"path": str(canonical)})
