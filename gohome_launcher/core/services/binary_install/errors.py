"""
Binary install — error taxonomy.

Every failure mode has its own type so callers can report exactly
which step failed and on which URL or path.  Nothing here retries.
"""

from __future__ import annotations

from pathlib import Path


class InstallError(Exception):
    """Base class for every install and launch failure."""

    #: One-line advice specific to the failure kind.
    hint = ""


class UnsupportedPlatformError(InstallError):
    """No release archive exists for this platform/arch."""

    hint = "No prebuilt binary exists for this machine; build from source instead."

    def __init__(self, system: str, machine: str, supported: list[str]):
        self.system = system
        self.machine = machine
        self.supported = supported
        super().__init__(
            f"Unsupported platform: {system}/{machine}. "
            f"Prebuilt binaries exist for: {', '.join(supported)}."
        )


class DownloadError(InstallError):
    """Network or HTTP failure while fetching an artifact."""

    hint = "Check your internet connection and that the release exists."

    def __init__(self, url: str, reason: str, status: int | None = None):
        self.url = url
        self.status = status
        self.reason = reason
        detail = f"HTTP {status}" if status is not None else reason
        if status is not None and reason:
            detail = f"{detail} ({reason})"
        super().__init__(f"Download of {url} failed: {detail}")


class IntegrityError(InstallError):
    """Downloaded artifact does not match its declared checksum."""

    hint = "The download may be corrupted or tampered with; do not use it."

    def __init__(self, filename: str, expected: str, actual: str, detail: str | None = None):
        self.filename = filename
        self.expected = expected
        self.actual = actual
        super().__init__(
            detail or f"Checksum mismatch for {filename}: expected {expected}, got {actual}"
        )


class ExtractionError(InstallError):
    """Archive is corrupt or does not contain the binary."""

    hint = "The release archive could not be unpacked; try again or install manually."

    def __init__(self, archive: str, reason: str):
        self.archive = archive
        self.reason = reason
        super().__init__(f"Cannot extract {archive}: {reason}")


class InstallPermissionError(InstallError):
    """Install root not writable, or the executable bit cannot be set."""

    hint = "Make sure the install directory is writable by the current user."

    def __init__(self, path: Path | str, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot install into {path}: {reason}")


class SpawnError(InstallError):
    """Binary is present but the OS refused to start it."""

    hint = "Reinstall the binary or check that it matches this machine."

    def __init__(self, path: Path | str, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Error executing {path}: {reason}")


class EnsureInstallError(InstallError):
    """Binary was missing and the triggered install failed."""

    def __init__(self, binary: Path | str, cause: InstallError):
        self.binary = Path(binary)
        self.cause = cause
        self.hint = cause.hint
        super().__init__(
            f"Binary missing at {binary}, triggering install failed because: {cause}"
        )


def alternate_install_hint(tool: str, host: str, owner: str, repo: str) -> str:
    """Manual install instructions shown after any failure."""
    return (
        "Alternative installation methods:\n"
        f"   - Download binary: https://{host}/{owner}/{repo}/releases\n"
        f"   - Go install: go install {host}/{owner}/{repo}/cmd/{tool}@latest"
    )
