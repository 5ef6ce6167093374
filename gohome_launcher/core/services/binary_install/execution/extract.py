"""
L4 Execution — Archive extraction.

Unpacks a release archive into a scratch directory and locates the
binary inside it.  The format comes from the artifact name, never from
sniffing content.
"""

from __future__ import annotations

import logging
import tarfile
import zipfile
from pathlib import Path

from gohome_launcher.core.services.binary_install.errors import ExtractionError

logger = logging.getLogger(__name__)


def extract_archive(archive: Path, dest: Path, archive_name: str) -> None:
    """Unpack ``archive`` into ``dest``.

    Args:
        archive: Staged archive on disk.
        dest: Empty scratch directory.
        archive_name: Artifact filename; its suffix picks the format.

    Raises:
        ExtractionError: Unknown format, corrupt archive, or a member
            that would land outside ``dest``.
    """
    try:
        if archive_name.endswith((".tar.gz", ".tgz")):
            with tarfile.open(archive, "r:gz") as tf:
                tf.extractall(dest, filter="data")
        elif archive_name.endswith(".zip"):
            with zipfile.ZipFile(archive, "r") as zf:
                _check_zip_members(zf, dest)
                zf.extractall(dest)
        else:
            raise ExtractionError(archive_name, "unknown archive format")
    except ExtractionError:
        raise
    except (tarfile.TarError, zipfile.BadZipFile, EOFError, OSError) as e:
        raise ExtractionError(archive_name, str(e) or type(e).__name__) from e

    logger.debug("Extracted %s into %s", archive_name, dest)


def _check_zip_members(zf: zipfile.ZipFile, dest: Path) -> None:
    root = dest.resolve()
    for name in zf.namelist():
        target = (root / name).resolve()
        if target != root and root not in target.parents:
            raise ExtractionError(zf.filename or "zip", f"member escapes archive root: {name}")


def find_binary(extract_dir: Path, binary_name: str, archive_name: str) -> Path:
    """Locate ``binary_name`` in an extracted tree (top level first)."""
    direct = extract_dir / binary_name
    if direct.is_file():
        return direct

    for p in sorted(extract_dir.rglob(binary_name)):
        if p.is_file():
            return p

    available = sorted(str(p.relative_to(extract_dir)) for p in extract_dir.rglob("*") if p.is_file())
    raise ExtractionError(
        archive_name,
        f"binary '{binary_name}' not found in archive (contains: {', '.join(available[:10]) or 'nothing'})",
    )
