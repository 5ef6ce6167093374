"""
L1 Domain — Artifact naming and checksum strings (pure).

No I/O.  Maps a ReleaseSpec to the release archive's filename and
URL, and normalizes the checksum notations we accept.
"""

from __future__ import annotations

from gohome_launcher.core.config.loader import LauncherConfig
from gohome_launcher.core.models.release import (
    ArtifactDescriptor,
    ReleaseSpec,
    normalize_checksum,
)

# Key in ``LauncherConfig.checksums`` that applies to any artifact.
WILDCARD_KEY = "*"


def artifact_filename(tool: str, spec: ReleaseSpec) -> str:
    """``<tool>_<version>_<platform>_<arch>.<ext>``."""
    return (
        f"{tool}_{spec.version}_{spec.platform.value}_{spec.arch.value}"
        f".{spec.archive_ext}"
    )


def release_url(config: LauncherConfig, spec: ReleaseSpec, filename: str) -> str:
    """Fill the configured URL template for one file of the release."""
    return config.url_template.format(
        host=config.host,
        owner=config.owner,
        repo=config.repo,
        version=spec.version,
        filename=filename,
    )


def checksums_manifest_name(config: LauncherConfig, spec: ReleaseSpec) -> str:
    return config.checksums_filename.format(tool=config.tool, version=spec.version)


def parse_checksums_manifest(text: str) -> dict[str, str]:
    """Parse a ``sha256sum``-style manifest into ``{filename: "sha256:hex"}``.

    Lines look like ``<hex>  <filename>`` (``*`` before the filename marks
    binary mode).  Blank lines and ``#`` comments are skipped; anything
    else that doesn't parse is ignored.
    """
    result: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        parts = line.split(None, 1)
        if len(parts) != 2:
            continue
        digest, name = parts
        name = name.strip().lstrip("*")
        try:
            result[name] = normalize_checksum(digest)
        except ValueError:
            continue
    return result


def describe_artifact(
    spec: ReleaseSpec,
    config: LauncherConfig,
    manifest: dict[str, str] | None = None,
) -> ArtifactDescriptor:
    """Compute the artifact for ``spec``.

    The expected checksum comes from the configured ``checksums``
    (exact filename first, then the ``*`` wildcard) and otherwise from
    the release's checksum manifest, when one was fetched.  Both sources
    are already in ``algo:hex`` form.
    """
    filename = artifact_filename(config.tool, spec)

    expected = config.checksums.get(filename) or config.checksums.get(WILDCARD_KEY)
    if expected is None and manifest:
        expected = manifest.get(filename)

    return ArtifactDescriptor(
        filename=filename,
        url=release_url(config, spec, filename),
        expected_checksum=expected or None,
    )
