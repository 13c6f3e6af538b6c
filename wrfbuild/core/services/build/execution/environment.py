"""
L4 Execution — Environment materializer.

Resolves where NetCDF, NetCDF-Fortran, HDF5 and Jasper live, writes
the sourceable descriptor under the install root, and applies the
same variables to this process so the following stages see them.

Re-running is safe: resolution only reads host state and the
descriptor is rewritten in full every time.
"""

from __future__ import annotations

import logging
import os
import platform
import shutil

from wrfbuild.core.config.settings import InstallerSettings
from wrfbuild.core.models.context import InstallationContext
from wrfbuild.core.models.result import StageResult
from wrfbuild.core.observability.display import section, success
from wrfbuild.core.persistence.env_descriptor import (
    PATH_REFERENCE,
    apply_descriptor,
    write_descriptor,
)
from wrfbuild.core.services.build.data.library_locations import (
    JASPER_CANDIDATES,
    JASPER_LIB_NAMES,
    PREFIX_LIBRARIES,
)
from wrfbuild.core.services.build.data.sources import MAIN_BIN_DIR
from wrfbuild.core.services.build.execution.subprocess_runner import run_command

logger = logging.getLogger(__name__)

STAGE = "setup_environment"


# ── Resolution ─────────────────────────────────────────────────

def _introspect(probe: dict) -> str | None:
    """Ask the library's own config tool for its prefix."""
    cmd = probe["introspect"]
    if not shutil.which(cmd[0]):
        return None

    r = run_command(cmd)
    if not r["ok"]:
        return None
    output = r.get("stdout", "")

    if probe["extract"] == "installation_point":
        for line in output.splitlines():
            if "Installation point" in line:
                parts = line.split()
                return parts[-1] if parts else None
        return None

    value = output.strip()
    return value or None


def resolve_prefix(name: str) -> str | None:
    """Prefix of a library.

    Introspection first, then an exported variable naming an existing
    directory (``$NETCDF``, ...), then the directory scan.
    """
    probe = PREFIX_LIBRARIES[name]
    found = _introspect(probe)
    if found:
        logger.debug("%s resolved via %s: %s", name, probe["introspect"][0], found)
        return found

    exported = os.environ.get(probe["env"], "").strip()
    if exported and os.path.isdir(exported):
        logger.debug("%s resolved via $%s: %s", name, probe["env"], exported)
        return exported

    for location in probe["locations"]:
        if os.path.isdir(location):
            logger.debug("%s resolved via directory scan: %s", name, location)
            return location
    return None


def _multiarch() -> str:
    return f"{platform.machine()}-linux-gnu"


def resolve_jasper() -> tuple[str | None, str | None]:
    """Jasper include and library directories.

    The first existing include directory decides the candidate; its
    library directory is the first one holding libjasper (or the keg
    lib dir for Homebrew layouts).
    """
    for candidate in JASPER_CANDIDATES:
        include = candidate["include"]
        if not os.path.isdir(include):
            continue

        for lib_dir in candidate["lib_dirs"]:
            lib_dir = lib_dir.format(multiarch=_multiarch())
            if not candidate["lib_required"]:
                return include, lib_dir
            if any(os.path.isfile(os.path.join(lib_dir, n)) for n in JASPER_LIB_NAMES):
                return include, lib_dir
        return include, None

    return None, None


def resolve_library_paths() -> dict[str, str | None]:
    """Resolve every logical library. Deterministic for a given host."""
    jasper_include, jasper_lib = resolve_jasper()
    return {
        "netcdf": resolve_prefix("netcdf"),
        "netcdf-fortran": resolve_prefix("netcdf-fortran"),
        "hdf5": resolve_prefix("hdf5"),
        "jasper-include": jasper_include,
        "jasper-lib": jasper_lib,
    }


# ── Descriptor ─────────────────────────────────────────────────

_COMMENTS = {
    "NETCDF": "Set path for NetCDF",
    "HDF5": "Set path for HDF5",
    "JASPERINC": "Set paths for Jasper (required for GRIB2 I/O)",
    "PATH": "Add WRF to PATH",
    "WRF_DIR": "Set WRF directory",
    "J": "Set number of processors for compilation",
    "WRFIO_NCD_LARGE_FILE_SUPPORT": "Additional settings",
}


def descriptor_assignments(
    ctx: InstallationContext,
    settings: InstallerSettings,
) -> dict[str, str]:
    """Variables the descriptor exports, in file order."""
    paths = ctx.resolved_paths
    main_dir = ctx.source_dir(settings.app_name)
    return {
        "NETCDF": paths.get("netcdf") or "",
        "NETCDF_FORTRAN": paths.get("netcdf-fortran") or "",
        "HDF5": paths.get("hdf5") or "",
        "JASPERINC": paths.get("jasper-include") or "",
        "JASPERLIB": paths.get("jasper-lib") or "",
        "PATH": f"{main_dir / MAIN_BIN_DIR}:{PATH_REFERENCE}",
        "WRF_DIR": str(main_dir),
        "WRF_INSTALL_ROOT": str(ctx.install_root),
        "J": f"-j {ctx.core_count}",
        "WRFIO_NCD_LARGE_FILE_SUPPORT": "1",
    }


def materialize(ctx: InstallationContext, settings: InstallerSettings) -> StageResult:
    """Resolve library paths, persist the descriptor and apply it.

    Unresolved libraries are recorded as absent and warned about; they
    do not fail this stage.
    """
    section(logger, "Setting up Environment Variables")

    ctx.resolved_paths = resolve_library_paths()
    for key, value in ctx.resolved_paths.items():
        if value:
            logger.info("%s: %s", key, value)
        else:
            logger.warning("%s: not found", key)

    env_file = ctx.install_root / settings.descriptor_name
    assignments = descriptor_assignments(ctx, settings)

    logger.info("Creating environment setup file: %s", env_file)
    try:
        write_descriptor(env_file, assignments, comments=_COMMENTS)
    except OSError as e:
        logger.error("Failed to write %s: %s", env_file, e)
        return StageResult.failure(
            STAGE,
            f"Cannot write environment file {env_file}: {e}",
            kind="environment_gap",
            log_excerpt=str(e),
        )

    apply_descriptor(assignments)

    logger.info("Environment variables configured in: %s", env_file)
    logger.info("Run 'source %s' before using WRF in a new shell.", env_file)
    success(logger, "Environment variables set up successfully.")

    return StageResult.success(
        STAGE,
        details={
            "descriptor": str(env_file),
            "unresolved": ctx.unresolved_libraries(),
        },
    )
