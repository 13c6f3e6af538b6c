"""
Build service — WRF/WPS installation pipeline.

Layers (inner → outer), same onion as the rest of core/services:

    data           static tables (package groups, library locations, artifacts)
    domain         pure logic (OS dispatch, log classification)
    detection      read-only host probes
    execution      subprocess runner and one module per pipeline stage
    orchestration  pipeline controller and troubleshooting menu
"""

from wrfbuild.core.services.build.detection.system_profile import probe  # noqa: F401
from wrfbuild.core.services.build.orchestration.pipeline import (  # noqa: F401
    InstallPipeline,
    PipelineOutcome,
)
