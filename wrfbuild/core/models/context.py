"""
InstallationContext — mutable state threaded through the pipeline.

Created after the install directory is chosen. The environment stage
fills ``resolved_paths``; compilation and the persisted descriptor read
it back.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

# Logical library names resolved by the environment stage.
LIBRARY_KEYS: tuple[str, ...] = (
    "netcdf",
    "netcdf-fortran",
    "hdf5",
    "jasper-include",
    "jasper-lib",
)


def default_core_count() -> int:
    """Host CPU count, never below 1."""
    return max(1, os.cpu_count() or 1)


class InstallationContext(BaseModel):
    """Everything later stages need to know about this install."""

    install_root: Path
    resolved_paths: dict[str, str | None] = Field(
        default_factory=lambda: {key: None for key in LIBRARY_KEYS},
    )
    core_count: int = Field(default_factory=default_core_count)
    wants_preprocessing: bool = False

    # Set by the pipeline once the companion build has produced its
    # artifacts. The verifier only checks companion artifacts when True.
    companion_built: bool = False

    @field_validator("install_root")
    @classmethod
    def _absolute_root(cls, value: Path) -> Path:
        return value.expanduser().resolve()

    @field_validator("core_count")
    @classmethod
    def _at_least_one(cls, value: int) -> int:
        return max(1, value)

    def source_dir(self, name: str) -> Path:
        """Directory of an unpacked source tree under the install root."""
        return self.install_root / name

    def unresolved_libraries(self) -> list[str]:
        return [key for key, path in self.resolved_paths.items() if not path]
