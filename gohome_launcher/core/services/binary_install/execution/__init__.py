"""
L4 Execution — everything that touches the network or the filesystem.
"""

from gohome_launcher.core.services.binary_install.execution.download import (  # noqa: F401
    _verify_checksum,
    fetch,
    fetch_text,
    open_url,
)
from gohome_launcher.core.services.binary_install.execution.extract import (  # noqa: F401
    extract_archive,
    find_binary,
)
from gohome_launcher.core.services.binary_install.execution.installer import (  # noqa: F401
    install,
    is_installed,
    resolve_artifact,
)
