"""
L0 Data — Where to look for installed libraries.

For each logical library: an introspection command (tried first), the
variable a user may already have exported, then conventional
directories (tried in order, first existing wins).
"""

from __future__ import annotations

# ── Prefix-style libraries ─────────────────────────────────────
#
# ``introspect``: command whose output yields the prefix.
# ``env``:        variable a user may export pointing at the prefix.
# ``extract``:    how to read the prefix from that output
#                 ("stdout" = whole stripped stdout,
#                  "installation_point" = last token of the
#                  "Installation point" line of h5cc -showconfig).

PREFIX_LIBRARIES: dict[str, dict] = {
    "netcdf": {
        "label": "NetCDF",
        "env": "NETCDF",
        "introspect": ["nc-config", "--prefix"],
        "extract": "stdout",
        "locations": [
            "/usr/local/netcdf",
            "/usr/local/opt/netcdf",        # Homebrew (Intel)
            "/opt/homebrew/opt/netcdf",     # Homebrew (Apple Silicon)
            "/opt/netcdf",
        ],
    },
    "netcdf-fortran": {
        "label": "NetCDF-Fortran",
        "env": "NETCDF_FORTRAN",
        "introspect": ["nf-config", "--prefix"],
        "extract": "stdout",
        "locations": [
            "/usr/local/netcdf-fortran",
            "/usr/local/opt/netcdf-fortran",
            "/opt/homebrew/opt/netcdf-fortran",
            "/opt/netcdf-fortran",
        ],
    },
    "hdf5": {
        "label": "HDF5",
        "env": "HDF5",
        "introspect": ["h5cc", "-showconfig"],
        "extract": "installation_point",
        "locations": [
            "/usr/local/hdf5",
            "/usr/local/opt/hdf5",
            "/opt/homebrew/opt/hdf5",
            "/opt/hdf5",
        ],
    },
}

# ── Jasper (include dir + matching lib dir) ────────────────────
#
# Each candidate pairs an include directory with library directories
# to check for libjasper. ``lib_required=False`` means the lib dir is
# taken as-is (Homebrew keg layout).

JASPER_LIB_NAMES: tuple[str, ...] = ("libjasper.so", "libjasper.dylib")

JASPER_CANDIDATES: list[dict] = [
    {
        "include": "/usr/include/jasper",
        "lib_dirs": ["/usr/lib", "/usr/lib64", "/usr/lib/{multiarch}"],
        "lib_required": True,
    },
    {
        "include": "/usr/local/include/jasper",
        "lib_dirs": ["/usr/local/lib", "/usr/local/lib64"],
        "lib_required": True,
    },
    {
        "include": "/usr/local/opt/jasper/include",
        "lib_dirs": ["/usr/local/opt/jasper/lib"],
        "lib_required": False,
    },
    {
        "include": "/opt/homebrew/opt/jasper/include",
        "lib_dirs": ["/opt/homebrew/opt/jasper/lib"],
        "lib_required": False,
    },
]
