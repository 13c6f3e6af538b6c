"""
L0 Data — Source trees, build commands and expected artifacts.

Paths are relative to the unpacked source directory.
"""

from __future__ import annotations

TARGETS: tuple[str, ...] = ("main", "companion")

# Main application (WRF)
MAIN_CONFIG_ARTIFACT = "configure.wrf"
MAIN_ARTIFACTS: tuple[str, ...] = (
    "main/wrf.exe",
    "main/real.exe",
    "main/ndown.exe",
    "main/tc.exe",
)
# A build counts as successful once these exist
MAIN_BUILD_ARTIFACTS: tuple[str, ...] = ("main/wrf.exe", "main/real.exe")
MAIN_BIN_DIR = "main"

# Companion preprocessing system (WPS)
COMPANION_CONFIG_ARTIFACT = "configure.wps"
COMPANION_ARTIFACTS: tuple[str, ...] = ("geogrid.exe", "metgrid.exe", "ungrib.exe")
COMPANION_BUILD_ARTIFACTS: tuple[str, ...] = COMPANION_ARTIFACTS

COMPILE_LOG = "compile.log"

NESTING_OPTIONS: list[tuple[str, str]] = [
    ("1", "Basic (no nesting)"),
    ("2", "Preset moves"),
    ("3", "Vortex following"),
]

# Companion configure is always driven with this selection
COMPANION_CONFIG_CHOICE = "1"

# Prompts the configure scripts print, as matched by the expect driver
PROMPT_SELECTION = "Enter selection"
PROMPT_NESTING = "Compile for nesting"

USER_GUIDE_URL = "https://www2.mmm.ucar.edu/wrf/users/docs/user_guide_v4/v4.4/contents.html"
FORUM_URL = "https://forum.mmm.ucar.edu/phpBB3/"
TEST_CASES_URL = "https://www2.mmm.ucar.edu/wrf/users/download/test_cases.html"
