"""
L3 Detection — read-only probes of the running machine.
"""

from gohome_launcher.core.services.binary_install.detection.platform_detect import (  # noqa: F401
    detect,
    resolve,
)
