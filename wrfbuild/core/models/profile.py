"""
SystemProfile — the read-only host snapshot.

Produced once per run by the capability probe and handed to every
later stage. Missing capabilities are data (empty sets, ``None``),
never errors.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# Closed set of OS families the installer knows how to handle.
OsId = Literal["debian", "redhat", "macos", "wsl", "unknown"]


class SystemProfile(BaseModel):
    """Immutable snapshot of what the host offers."""

    model_config = ConfigDict(frozen=True)

    os_id: OsId = "unknown"
    distribution: str = ""          # raw identifier, e.g. "ubuntu", "rocky"
    kernel_version: str = ""        # /proc/version or uname -v
    architecture: str = ""
    compilers: frozenset[str] = Field(default_factory=frozenset)
    mpi_runtimes: frozenset[str] = Field(default_factory=frozenset)
    libraries: frozenset[str] = Field(default_factory=frozenset)

    # Advisory only: shown to the user, never gate a stage.
    disk_free: str | None = None
    memory_total: str | None = None

    def summary_lines(self) -> list[str]:
        """Human-readable lines in the order the probe reports them."""

        def _join(items: frozenset[str]) -> str:
            return ", ".join(sorted(items)) if items else "none detected"

        os_label = self.os_id
        if self.distribution and self.distribution != self.os_id:
            os_label = f"{self.os_id} ({self.distribution})"

        return [
            f"Operating System: {os_label}",
            f"Architecture: {self.architecture or 'unknown'}",
            f"Available Compilers: {_join(self.compilers)}",
            f"Available MPI: {_join(self.mpi_runtimes)}",
            f"Available Libraries: {_join(self.libraries)}",
            f"Available Disk Space: {self.disk_free or 'unknown'}",
            f"Available Memory: {self.memory_total or 'unknown'}",
        ]
