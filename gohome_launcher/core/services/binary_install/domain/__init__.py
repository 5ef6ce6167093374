"""
L1 Domain — pure naming, checksum, and formatting rules.

No I/O, no subprocess.
"""

from gohome_launcher.core.services.binary_install.domain.artifact import (  # noqa: F401
    artifact_filename,
    describe_artifact,
    normalize_checksum,
    parse_checksums_manifest,
    release_url,
)
from gohome_launcher.core.services.binary_install.domain.download_helpers import (  # noqa: F401
    _fmt_size,
)
