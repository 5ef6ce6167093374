"""
Domain models — release targets and launch outcomes.

    from gohome_launcher.core.models import ReleaseSpec, ArtifactDescriptor, ExitOutcome
"""

from gohome_launcher.core.models.launch import ExitOutcome, LaunchRequest, LaunchState
from gohome_launcher.core.models.release import (
    SUPPORT_MATRIX,
    Arch,
    ArtifactDescriptor,
    InstallRoot,
    Platform,
    ReleaseSpec,
    supported_targets,
)

__all__ = [
    "SUPPORT_MATRIX",
    "Arch",
    "ArtifactDescriptor",
    # launch.py
    "ExitOutcome",
    "InstallRoot",
    "LaunchRequest",
    "LaunchState",
    # release.py
    "Platform",
    "ReleaseSpec",
    "supported_targets",
]
