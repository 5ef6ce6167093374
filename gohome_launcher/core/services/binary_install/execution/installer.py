"""
L4 Execution — Install a release into an install root.

Download → verify → extract → chmod → atomic rename.  Everything
temporary lives inside the install root so the final ``os.replace``
never crosses a filesystem, and everything temporary is removed on
every exit path.  The final binary path only ever holds a complete,
executable file.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path

from gohome_launcher.core.config.loader import LauncherConfig
from gohome_launcher.core.models.release import ArtifactDescriptor, InstallRoot, ReleaseSpec
from gohome_launcher.core.services.binary_install.domain.artifact import (
    checksums_manifest_name,
    describe_artifact,
    parse_checksums_manifest,
    release_url,
)
from gohome_launcher.core.services.binary_install.errors import (
    InstallPermissionError,
    IntegrityError,
)
from gohome_launcher.core.services.binary_install.execution.download import (
    _verify_checksum,
    fetch,
    fetch_text,
)
from gohome_launcher.core.services.binary_install.execution.extract import (
    extract_archive,
    find_binary,
)

logger = logging.getLogger(__name__)

_TMP_PREFIX = ".gohome-launcher-"
_EXEC_MODE = 0o755


def is_installed(root: InstallRoot) -> bool:
    """True when the final binary is present and runnable."""
    path = root.binary_path
    if not path.is_file():
        return False
    if root.windows:
        return True
    return os.access(path, os.X_OK)


def resolve_artifact(spec: ReleaseSpec, config: LauncherConfig) -> ArtifactDescriptor:
    """Describe the artifact, pulling the release checksum manifest if enabled.

    Raises:
        DownloadError: The manifest could not be fetched.
        IntegrityError: Verification is required but the manifest has
            no entry for this artifact.
    """
    manifest = None
    if config.verify_release_checksums:
        name = checksums_manifest_name(config, spec)
        url = release_url(config, spec, name)
        logger.info("Fetching checksum manifest %s", url)
        manifest = parse_checksums_manifest(fetch_text(
            url,
            max_redirects=config.max_redirects,
            timeout=config.download_timeout,
            user_agent=config.user_agent,
        ))

    artifact = describe_artifact(spec, config, manifest)

    if config.verify_release_checksums and artifact.expected_checksum is None:
        raise IntegrityError(
            artifact.filename, "", "",
            detail=f"No checksum for {artifact.filename} in {checksums_manifest_name(config, spec)}",
        )
    return artifact


def install(spec: ReleaseSpec, root: InstallRoot, config: LauncherConfig) -> Path:
    """Install ``spec`` into ``root`` and return the final binary path.

    Safe to call again after a failure or over an existing install:
    the previous binary stays in place until the new one is renamed
    over it.

    Raises:
        DownloadError, IntegrityError, ExtractionError,
        InstallPermissionError: Each step's own failure, unretried.
    """
    artifact = resolve_artifact(spec, config)
    logger.info("Installing %s v%s for %s", config.tool, spec.version, spec.target)
    logger.info("Downloading from: %s", artifact.url)

    _ensure_root(root.path)

    staged: Path | None = None
    extract_dir: Path | None = None
    try:
        staged = _staging_file(root.path, artifact.filename)
        try:
            fetch(
                artifact.url,
                staged,
                max_redirects=config.max_redirects,
                timeout=config.download_timeout,
                user_agent=config.user_agent,
            )
        except OSError as e:
            raise InstallPermissionError(staged, f"cannot write download: {e}") from e

        _verify(staged, artifact)

        extract_dir = _scratch_dir(root.path)
        extract_archive(staged, extract_dir, artifact.filename)
        found = find_binary(extract_dir, root.binary_name, artifact.filename)

        final = root.binary_path
        try:
            if not root.windows:
                # Archives don't reliably carry the executable bit
                os.chmod(found, _EXEC_MODE)
            os.replace(found, final)
        except OSError as e:
            raise InstallPermissionError(final, f"cannot place binary: {e}") from e
    finally:
        _cleanup(staged, extract_dir)

    _confirm(root)
    logger.info("%s installed at %s", config.tool, root.binary_path)
    return root.binary_path


# ── Steps ───────────────────────────────────────────────────────


def _ensure_root(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise InstallPermissionError(path, f"cannot create install directory: {e}") from e


def _staging_file(root: Path, filename: str) -> Path:
    try:
        fd, name = tempfile.mkstemp(prefix=f"{_TMP_PREFIX}{filename}.", suffix=".part", dir=root)
    except OSError as e:
        raise InstallPermissionError(root, f"cannot create staging file: {e}") from e
    os.close(fd)
    return Path(name)


def _scratch_dir(root: Path) -> Path:
    try:
        return Path(tempfile.mkdtemp(prefix=f"{_TMP_PREFIX}extract-", dir=root))
    except OSError as e:
        raise InstallPermissionError(root, f"cannot create extraction directory: {e}") from e


def _verify(staged: Path, artifact: ArtifactDescriptor) -> None:
    if not artifact.expected_checksum:
        logger.warning(
            "No checksum configured for %s; installing it unverified.",
            artifact.filename,
        )
        return

    ok, actual = _verify_checksum(staged, artifact.expected_checksum)
    if not ok:
        raise IntegrityError(artifact.filename, artifact.expected_checksum, actual)
    logger.info("Checksum verified for %s (%s)", artifact.filename, actual)


def _cleanup(staged: Path | None, extract_dir: Path | None) -> None:
    if staged is not None:
        try:
            staged.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove staged download %s: %s", staged, e)
    if extract_dir is not None:
        shutil.rmtree(extract_dir, ignore_errors=True)


def _confirm(root: InstallRoot) -> None:
    if not is_installed(root):
        raise InstallPermissionError(
            root.binary_path, "binary missing or not executable after install",
        )
