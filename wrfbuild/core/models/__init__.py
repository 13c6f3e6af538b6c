"""
Domain models — Pydantic types for the installer.

    from wrfbuild.core.models import SystemProfile, InstallationContext, StageResult
"""

from wrfbuild.core.models.context import LIBRARY_KEYS, InstallationContext
from wrfbuild.core.models.profile import OsId, SystemProfile
from wrfbuild.core.models.result import Diagnosis, FailureKind, StageResult

__all__ = [
    "Diagnosis",
    "FailureKind",
    "InstallationContext",
    "LIBRARY_KEYS",
    "OsId",
    "StageResult",
    "SystemProfile",
]
