"""
L3 Detection — Platform and architecture.

``detect`` is pure: it takes the raw strings the OS reports and
normalizes them.  Only ``resolve`` reaches for ``platform`` defaults,
and only when the caller passes nothing.
"""

from __future__ import annotations

import logging
import platform as _platform

from gohome_launcher.core.models.release import (
    SUPPORT_MATRIX,
    Arch,
    Platform,
    ReleaseSpec,
    supported_targets,
)
from gohome_launcher.core.services.binary_install.errors import UnsupportedPlatformError

logger = logging.getLogger(__name__)

# OS name normalization.  Keys are lower-cased ``platform.system()`` /
# ``sys.platform`` values.
_OS_MAP: dict[str, str] = {
    "darwin": "darwin",
    "macos": "darwin",
    "linux": "linux",
    "windows": "windows",
    "win32": "windows",
    "cygwin": "windows",
    "msys": "windows",
}

# Architecture normalization to Go-style names.
_ARCH_MAP: dict[str, str] = {
    "x86_64": "amd64",
    "amd64": "amd64",      # Windows reports AMD64
    "x64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",      # macOS (Darwin reports arm64)
    "armv8": "arm64",
    "armv8l": "arm64",
}


def detect(system: str, machine: str) -> tuple[str, str]:
    """Normalize OS-reported names to release naming.

    Unknown names come back lower-cased but otherwise untouched so
    the caller can report exactly what it saw.

    >>> detect("Darwin", "arm64")
    ('darwin', 'arm64')
    >>> detect("Windows", "AMD64")
    ('windows', 'amd64')
    """
    sys_key = system.strip().lower()
    mach_key = machine.strip().lower()
    return _OS_MAP.get(sys_key, sys_key), _ARCH_MAP.get(mach_key, mach_key)


def resolve(
    version: str,
    system: str | None = None,
    machine: str | None = None,
) -> ReleaseSpec:
    """Map this machine onto the support matrix.

    Args:
        version: Release version, with or without a leading ``v``.
        system: OS name as ``platform.system()`` reports it.
        machine: CPU name as ``platform.machine()`` reports it.

    Raises:
        UnsupportedPlatformError: The pair is outside the matrix.
            There is no best-effort fallback.
    """
    if system is None:
        system = _platform.system()
    if machine is None:
        machine = _platform.machine()

    os_name, arch_name = detect(system, machine)

    try:
        pair = (Platform(os_name), Arch(arch_name))
    except ValueError:
        pair = None

    if pair is None or pair not in SUPPORT_MATRIX:
        raise UnsupportedPlatformError(system, machine, supported_targets())

    spec = ReleaseSpec(version=version, platform=pair[0], arch=pair[1])
    logger.debug("Resolved %s/%s -> %s", system, machine, spec.target)
    return spec
