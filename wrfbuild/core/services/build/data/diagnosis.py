"""
L0 Data — Failure taxonomy.

Ordered: the first category whose pattern matches the captured log
wins. ``unknown`` is the fallback and has no pattern.
"""

from __future__ import annotations

import re

# (category, pattern, title, fixes)
DIAGNOSIS_RULES: list[tuple[str, re.Pattern[str], str, list[str]]] = [
    (
        "netcdf",
        re.compile(r"netcdf\.h|netcdf library not resolved", re.IGNORECASE),
        "NetCDF-related error detected:",
        [
            "Check if NetCDF is installed: 'nc-config --version'",
            "Verify NETCDF environment variable: 'echo $NETCDF'",
            "Try reinstalling NetCDF libraries",
        ],
    ),
    (
        "mpi",
        # A bare "mpi" counts only as a standalone word, not a path segment
        re.compile(
            r"mpi\.h|\bmpi(?:cc|cxx|f90|f77|fort|run|exec)\b|(?<![\w/.-])mpi(?![\w/.-])"
            r"|openmpi|open-mpi|open mpi|mpich",
            re.IGNORECASE,
        ),
        "MPI-related error detected:",
        [
            "Check if MPI is installed: 'mpirun --version'",
            "Try reinstalling your MPI implementation",
        ],
    ),
    (
        "configuration",
        re.compile(r"configure\.wrf|configure\.wps"),
        "Configuration file error detected:",
        [
            "Check WRF configuration options",
            "Verify environment variables are set correctly",
        ],
    ),
    (
        "missing_file",
        re.compile(r"No such file or directory"),
        "Missing file error detected:",
        [
            "Check if all required libraries and dependencies are installed",
            "Verify paths in environment variables",
        ],
    ),
    (
        "permission",
        re.compile(r"permission denied", re.IGNORECASE),
        "Permission error detected:",
        [
            "Check file permissions in the installation directory",
            "Try running the installer with sudo if needed",
        ],
    ),
]

UNKNOWN_TITLE = "Unknown error detected. Please check the full error log:"

# Signatures scanned in compile.log after a failed build, in order.
# (signature, reason)
BUILD_LOG_SIGNATURES: list[tuple[str, str]] = [
    ("netcdf.h", "NetCDF library issue detected. Check if NetCDF is properly installed."),
    ("mpi.h", "MPI library issue detected. Check if MPI is properly installed."),
    ("Error copying", "File copying error. Check disk space and permissions."),
    ("make: *** ", "Build tool reported a fatal error (make: ***)."),
]

# Lines of context printed after a ``make: ***`` marker
MAKE_ERROR_CONTEXT = 5

TROUBLESHOOTING_OPTIONS: list[tuple[str, str]] = [
    ("1", "Show detailed error log"),
    ("2", "Try to fix NetCDF environment variables"),
    ("3", "Try to reinstall prerequisites"),
    ("4", "Exit and fix manually"),
]
