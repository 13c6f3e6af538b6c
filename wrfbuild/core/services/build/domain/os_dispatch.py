"""
L1 Domain — OS family → installation procedure (pure).

No I/O. The WSL fallback is decided from the kernel version string
already captured in the profile.
"""

from __future__ import annotations

from wrfbuild.core.models.profile import SystemProfile
from wrfbuild.core.services.build.data.os_families import (
    DEBIAN_ALIASES,
    MACOS_ALIASES,
    REDHAT_ALIASES,
    WSL_KERNEL_MARKER,
)
from wrfbuild.core.services.build.data.package_procedures import PROCEDURE_FOR_OS


def classify_distribution(distribution: str) -> str:
    """Map a raw distribution identifier to an OS family.

    Only identifiers listed in the alias tables are recognised;
    anything else is ``"unknown"``.
    """
    ident = distribution.strip().lower()
    if ident in DEBIAN_ALIASES:
        return "debian"
    if ident in REDHAT_ALIASES:
        return "redhat"
    if ident in MACOS_ALIASES:
        return "macos"
    return "unknown"


def effective_os(profile: SystemProfile) -> str:
    """OS family used for dispatch, applying the WSL fallback.

    An ``unknown`` host whose kernel version mentions Microsoft is a
    WSL compatibility layer and is handled as such.
    """
    if profile.os_id != "unknown":
        return profile.os_id
    if WSL_KERNEL_MARKER in profile.kernel_version.lower():
        return "wsl"
    return "unknown"


def select_procedure(profile: SystemProfile) -> str | None:
    """Return the procedure key for this host, or None if unsupported."""
    return PROCEDURE_FOR_OS.get(effective_os(profile))
