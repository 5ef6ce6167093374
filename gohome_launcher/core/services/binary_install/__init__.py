"""
Binary installation service — package re-exports.

Layers, innermost first: domain (pure naming and checksums) →
detection (platform probes) → execution (network and filesystem).

    from gohome_launcher.core.services.binary_install import resolve, install
"""

# ── Errors ──
from gohome_launcher.core.services.binary_install.errors import (  # noqa: F401
    DownloadError,
    EnsureInstallError,
    ExtractionError,
    InstallError,
    InstallPermissionError,
    IntegrityError,
    SpawnError,
    UnsupportedPlatformError,
    alternate_install_hint,
)

# ── L1: Domain ──
from gohome_launcher.core.services.binary_install.domain.artifact import (  # noqa: F401
    artifact_filename,
    describe_artifact,
)

# ── L3: Detection ──
from gohome_launcher.core.services.binary_install.detection.platform_detect import (  # noqa: F401
    detect,
    resolve,
)

# ── L4: Execution ──
from gohome_launcher.core.services.binary_install.execution.installer import (  # noqa: F401
    install,
    is_installed,
    resolve_artifact,
)
