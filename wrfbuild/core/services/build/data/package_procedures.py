"""
L0 Data — Package manager procedures per OS family.

Each procedure is an optional index refresh followed by four install
groups, always in this order:

    build-tools → numerical-libraries → mpi → image-libraries

``sudo`` is added at execution time (and only when not already root).
"""

from __future__ import annotations

GROUP_ORDER: tuple[str, ...] = (
    "build-tools",
    "numerical-libraries",
    "mpi",
    "image-libraries",
)

PACKAGE_PROCEDURES: dict[str, dict] = {
    "debian": {
        "label": "Debian-based System",
        "package_manager": "apt-get",
        "needs_sudo": True,
        "refresh": {
            "label": "Updating package lists",
            "command": ["apt-get", "update", "-qq"],
        },
        "groups": [
            {
                "id": "build-tools",
                "label": "essential build tools",
                "command": ["apt-get", "install", "-y",
                            "build-essential", "csh", "gfortran", "m4", "curl", "wget"],
            },
            {
                "id": "numerical-libraries",
                "label": "NetCDF and HDF5 libraries",
                "command": ["apt-get", "install", "-y",
                            "libhdf5-dev", "libnetcdf-dev", "netcdf-bin", "libnetcdff-dev"],
            },
            {
                "id": "mpi",
                "label": "MPICH",
                "command": ["apt-get", "install", "-y", "mpich", "libmpich-dev"],
            },
            {
                "id": "image-libraries",
                "label": "additional libraries",
                "command": ["apt-get", "install", "-y",
                            "libpng-dev", "zlib1g-dev", "libjasper-dev"],
            },
        ],
    },
    "redhat": {
        "label": "RedHat-based System",
        "package_manager": "yum",
        "needs_sudo": True,
        "refresh": None,
        "groups": [
            {
                "id": "build-tools",
                "label": "essential build tools",
                "command": ["yum", "-y", "install",
                            "gcc", "gcc-gfortran", "gcc-c++", "csh", "m4", "curl", "wget", "make"],
            },
            {
                "id": "numerical-libraries",
                "label": "NetCDF and HDF5 libraries",
                "command": ["yum", "-y", "install",
                            "netcdf-devel", "netcdf-fortran-devel", "hdf5-devel"],
            },
            {
                "id": "mpi",
                "label": "MPICH",
                "command": ["yum", "-y", "install", "mpich-devel"],
            },
            {
                "id": "image-libraries",
                "label": "additional libraries",
                "command": ["yum", "-y", "install", "libpng-devel", "zlib-devel", "jasper-devel"],
            },
        ],
    },
    "macos": {
        "label": "macOS",
        "package_manager": "brew",
        "needs_sudo": False,
        "refresh": {
            "label": "Updating Homebrew",
            "command": ["brew", "update"],
        },
        "groups": [
            {
                "id": "build-tools",
                "label": "essential build tools",
                "command": ["brew", "install", "gcc", "coreutils", "wget"],
            },
            {
                "id": "numerical-libraries",
                "label": "NetCDF and HDF5 libraries",
                "command": ["brew", "install", "netcdf", "netcdf-fortran", "hdf5"],
            },
            {
                "id": "mpi",
                "label": "OpenMPI",
                "command": ["brew", "install", "open-mpi"],
            },
            {
                "id": "image-libraries",
                "label": "additional libraries",
                "command": ["brew", "install", "libpng", "jasper"],
            },
        ],
    },
}

# OS family → procedure key. WSL reuses the Debian procedure.
PROCEDURE_FOR_OS: dict[str, str] = {
    "debian": "debian",
    "redhat": "redhat",
    "macos": "macos",
    "wsl": "debian",
}

PROCEDURE_TITLES: dict[str, str] = {
    "debian": "Installing Prerequisites for Debian-based System",
    "redhat": "Installing Prerequisites for RedHat-based System",
    "macos": "Installing Prerequisites for macOS",
    "wsl": "Installing Prerequisites for Windows Subsystem for Linux",
}

HOMEBREW_URL = "https://brew.sh/"
HOMEBREW_INSTALL_HINT = (
    '/bin/bash -c "$(curl -fsSL '
    'https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh)"'
)
MANUAL_INSTALL_DOCS = "https://github.com/wrf-model/WRF"
