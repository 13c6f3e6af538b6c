"""
L3 Detection — Capability probe.

Read-only host queries: release files, uname, PATH lookups,
/proc/meminfo, sysctl, disk usage. Each sub-probe degrades to an
empty or ``None`` result on its own; ``probe()`` never fails.
"""

from __future__ import annotations

import logging
import os
import platform
import shutil
import subprocess
from pathlib import Path

from wrfbuild.core.models.profile import SystemProfile
from wrfbuild.core.observability.display import section
from wrfbuild.core.services.build.data.os_families import (
    COMPILER_SUITES,
    DEBIAN_VERSION_FILE,
    KERNEL_VERSION_FILE,
    LIBRARY_PROBES,
    LSB_RELEASE_FILE,
    MPI_RUNTIMES,
    OS_RELEASE_FILE,
    REDHAT_RELEASE_FILE,
)
from wrfbuild.core.services.build.domain.os_dispatch import classify_distribution

logger = logging.getLogger(__name__)


# ── Release-file parsing ───────────────────────────────────────

def _read_key_values(path: str) -> dict[str, str]:
    """Parse a shell-style KEY=value file (os-release, lsb-release)."""
    values: dict[str, str] = {}
    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, _, value = line.partition("=")
            values[key.strip()] = value.strip().strip('"').strip("'")
    return values


def detect_distribution() -> str:
    """Raw distribution identifier, most specific source first.

    os-release → lsb-release → debian_version → redhat-release →
    ``uname`` Darwin → ``"unknown"``.
    """
    try:
        if os.path.isfile(OS_RELEASE_FILE):
            ident = _read_key_values(OS_RELEASE_FILE).get("ID", "")
            if ident:
                return ident.lower()
        if os.path.isfile(LSB_RELEASE_FILE):
            ident = _read_key_values(LSB_RELEASE_FILE).get("DISTRIB_ID", "")
            if ident:
                return ident.lower()
        if os.path.isfile(DEBIAN_VERSION_FILE):
            return "debian"
        if os.path.isfile(REDHAT_RELEASE_FILE):
            text = Path(REDHAT_RELEASE_FILE).read_text(encoding="utf-8", errors="replace")
            return "centos" if "CentOS" in text else "redhat"
    except OSError as e:
        logger.debug("Release file unreadable: %s", e)

    if platform.system() == "Darwin":
        return "macos"
    return "unknown"


def detect_kernel_version() -> str:
    """Kernel version string (``/proc/version`` on Linux)."""
    try:
        with open(KERNEL_VERSION_FILE, encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return platform.version()


def detect_architecture() -> str:
    return platform.machine()


# ── Toolchains and libraries ───────────────────────────────────

def detect_compilers() -> frozenset[str]:
    """Compiler suites whose C and Fortran drivers are both on PATH."""
    return frozenset(
        suite for suite, binaries in COMPILER_SUITES.items()
        if all(shutil.which(b) for b in binaries)
    )


def detect_mpi_runtimes() -> frozenset[str]:
    return frozenset(
        runtime for runtime, binaries in MPI_RUNTIMES.items()
        if any(shutil.which(b) for b in binaries)
    )


def detect_libraries() -> frozenset[str]:
    """Numerical libraries with a probe binary or an include directory."""
    found: set[str] = set()
    for lib, (binaries, include_dirs) in LIBRARY_PROBES.items():
        if any(shutil.which(b) for b in binaries) or any(
            os.path.isdir(d) for d in include_dirs
        ):
            found.add(lib)
    return frozenset(found)


# ── Advisory resources ─────────────────────────────────────────

def _human_bytes(n: float) -> str:
    for unit in ("B", "K", "M", "G", "T"):
        if n < 1024 or unit == "T":
            return f"{n:.0f}{unit}" if unit == "B" else f"{n:.1f}{unit}"
        n /= 1024
    return f"{n:.1f}T"


def detect_disk_free(path: Path | None = None) -> str | None:
    """Free space on the filesystem holding ``path`` (default: cwd).

    Walks up to the nearest existing ancestor so a not-yet-created
    install root still reports its future filesystem.
    """
    target = (path or Path.cwd()).expanduser()
    try:
        while not target.exists() and target != target.parent:
            target = target.parent
        return _human_bytes(shutil.disk_usage(target).free)
    except OSError:
        return None


def detect_memory_total() -> str | None:
    """Total physical memory, human-readable."""
    if platform.system() == "Darwin":
        try:
            r = subprocess.run(
                ["sysctl", "-n", "hw.memsize"],
                capture_output=True, text=True,
            )
            if r.returncode == 0 and r.stdout.strip().isdigit():
                return f"{int(r.stdout.strip()) / 1024 ** 3:g} GB"
        except OSError:
            pass
        return None

    try:
        with open("/proc/meminfo", encoding="utf-8") as f:
            for line in f:
                if line.startswith("MemTotal:"):
                    kib = int(line.split()[1])
                    return _human_bytes(kib * 1024)
    except (OSError, ValueError, IndexError):
        pass
    return None


# ── Public entry point ─────────────────────────────────────────

def probe(install_root: Path | None = None) -> SystemProfile:
    """Inspect the host once and return an immutable SystemProfile."""
    section(logger, "Detecting System Environment")

    distribution = detect_distribution()
    profile = SystemProfile(
        os_id=classify_distribution(distribution),
        distribution=distribution,
        kernel_version=detect_kernel_version(),
        architecture=detect_architecture(),
        compilers=detect_compilers(),
        mpi_runtimes=detect_mpi_runtimes(),
        libraries=detect_libraries(),
        disk_free=detect_disk_free(install_root),
        memory_total=detect_memory_total(),
    )

    for line in profile.summary_lines():
        logger.info(line)
    return profile
