"""
StageResult and Diagnosis — the stage contract.

Every pipeline stage returns a StageResult. Stages NEVER raise for
expected failures: a missing tool, a non-zero package manager or a
build that produced no executables all come back as ``failed``
results. The pipeline controller is the only place that decides what
a failure means for the run.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

# Failure taxonomy. ``user_abort`` is not a failure and never appears here.
FailureKind = Literal[
    "probe_degraded",
    "dependency_install",
    "transport_unavailable",
    "environment_gap",
    "acquisition",
    "configuration_missing",
    "build_artifact_missing",
    "verification_gap",
]


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class StageResult(BaseModel):
    """Outcome of one pipeline stage."""

    stage: str
    status: Literal["ok", "failed"] = "ok"
    reason: str = ""
    log_excerpt: str = ""
    kind: FailureKind | None = None
    log_path: str | None = None
    finished_at: str = Field(default_factory=_now_iso)
    details: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(cls, stage: str, reason: str = "", **kwargs: Any) -> StageResult:
        """Create a success result."""
        return cls(stage=stage, status="ok", reason=reason, **kwargs)

    @classmethod
    def failure(
        cls,
        stage: str,
        reason: str,
        *,
        kind: FailureKind,
        log_excerpt: str = "",
        **kwargs: Any,
    ) -> StageResult:
        """Create a failure result."""
        return cls(
            stage=stage,
            status="failed",
            reason=reason,
            kind=kind,
            log_excerpt=log_excerpt,
            **kwargs,
        )


class Diagnosis(BaseModel):
    """Root-cause guess for a failed stage."""

    category: str                 # netcdf, mpi, configuration, missing_file, permission, unknown
    title: str
    fixes: list[str] = Field(default_factory=list)
