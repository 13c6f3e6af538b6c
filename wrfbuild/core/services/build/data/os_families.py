"""
L0 Data — OS identification tables.

Pure data. Alias membership is policy: a distribution joins a family
only by being listed here.
"""

from __future__ import annotations

# Release-metadata IDs treated as each family.
DEBIAN_ALIASES: frozenset[str] = frozenset({"ubuntu", "debian", "linuxmint", "pop"})
REDHAT_ALIASES: frozenset[str] = frozenset({"centos", "redhat", "fedora", "rocky", "almalinux"})
MACOS_ALIASES: frozenset[str] = frozenset({"macos", "darwin"})

# Marker files, most to least specific.
OS_RELEASE_FILE = "/etc/os-release"
LSB_RELEASE_FILE = "/etc/lsb-release"
DEBIAN_VERSION_FILE = "/etc/debian_version"
REDHAT_RELEASE_FILE = "/etc/redhat-release"

KERNEL_VERSION_FILE = "/proc/version"

# Substring of the kernel version string that identifies WSL.
WSL_KERNEL_MARKER = "microsoft"

# Toolchains: id → binaries that must all be on PATH.
COMPILER_SUITES: dict[str, tuple[str, ...]] = {
    "gnu": ("gcc", "gfortran"),
    "intel": ("icc", "ifort"),
    "pgi": ("pgcc", "pgfortran"),
}

# MPI runtimes: id → any one of these binaries.
MPI_RUNTIMES: dict[str, tuple[str, ...]] = {
    "openmpi": ("ompi_info",),
    "mpich": ("mpichversion", "mpich2version"),
    "intel_mpi": ("mpiicc",),
}

# Numerical libraries: id → (probe binaries, include directories).
LIBRARY_PROBES: dict[str, tuple[tuple[str, ...], tuple[str, ...]]] = {
    "netcdf": (("nc-config",), ("/usr/include/netcdf", "/usr/local/include/netcdf")),
    "hdf5": (("h5dump",), ("/usr/include/hdf5", "/usr/local/include/hdf5")),
    "jasper": ((), ("/usr/include/jasper", "/usr/local/include/jasper")),
}
