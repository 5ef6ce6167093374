"""
Release models — what gets installed, for which target.

A ``ReleaseSpec`` pins one version of the tool to one (platform, arch)
pair from the support matrix.  An ``ArtifactDescriptor`` is the remote
archive that ships that binary.  Both are immutable and never persisted.
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class Platform(str, Enum):
    """Operating systems with published release archives."""

    DARWIN = "darwin"
    LINUX = "linux"
    WINDOWS = "windows"


class Arch(str, Enum):
    """CPU architectures with published release archives."""

    AMD64 = "amd64"
    ARM64 = "arm64"


SUPPORT_MATRIX: frozenset[tuple[Platform, Arch]] = frozenset(
    (p, a) for p in Platform for a in Arch
)

_SEMVER_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-[0-9A-Za-z.-]+)?(?:\+[0-9A-Za-z.-]+)?$"
)


def normalize_version(value: str) -> str:
    """Strip whitespace and a leading ``v``; reject anything not semver."""
    value = value.strip()
    if value.startswith("v"):
        value = value[1:]
    if not _SEMVER_RE.match(value):
        raise ValueError(f"not a semantic version: {value!r}")
    return value


# Accepted digest algorithms for ``algo:hex`` checksums.
CHECKSUM_ALGOS: dict[str, int] = {
    "sha256": 64,
    "sha1": 40,
    "md5": 32,
}

_HEX_RE = re.compile(r"^[0-9a-fA-F]+$")


def normalize_checksum(value: str) -> str:
    """Return ``algo:hex`` with a lower-case digest.

    A bare hex string is taken as sha256.

    Raises:
        ValueError: Unknown algorithm or malformed digest.
    """
    value = value.strip()
    if ":" in value:
        algo, digest = value.split(":", 1)
        algo = algo.strip().lower()
    else:
        algo, digest = "sha256", value
    digest = digest.strip()

    if algo not in CHECKSUM_ALGOS:
        raise ValueError(f"unsupported checksum algorithm: {algo}")
    if len(digest) != CHECKSUM_ALGOS[algo] or not _HEX_RE.match(digest):
        raise ValueError(f"malformed {algo} digest: {digest!r}")
    return f"{algo}:{digest.lower()}"


def supported_targets() -> list[str]:
    """Human-readable ``platform/arch`` list, sorted."""
    return sorted(f"{p.value}/{a.value}" for p, a in SUPPORT_MATRIX)


class ReleaseSpec(BaseModel):
    """One version of the tool for one supported target."""

    model_config = ConfigDict(frozen=True)

    version: str
    platform: Platform
    arch: Arch

    @field_validator("version")
    @classmethod
    def _check_semver(cls, value: str) -> str:
        return normalize_version(value)

    @model_validator(mode="after")
    def _check_matrix(self) -> ReleaseSpec:
        if (self.platform, self.arch) not in SUPPORT_MATRIX:
            raise ValueError(
                f"{self.platform.value}/{self.arch.value} is not a supported target"
            )
        return self

    @property
    def is_windows(self) -> bool:
        return self.platform is Platform.WINDOWS

    @property
    def archive_ext(self) -> str:
        """``zip`` on Windows, ``tar.gz`` everywhere else."""
        return "zip" if self.is_windows else "tar.gz"

    @property
    def target(self) -> str:
        return f"{self.platform.value}/{self.arch.value}"


class ArtifactDescriptor(BaseModel):
    """The remote archive for a ReleaseSpec."""

    model_config = ConfigDict(frozen=True)

    filename: str
    url: str
    expected_checksum: str | None = None


class InstallRoot(BaseModel):
    """Directory owned by the launcher, holding at most one active binary."""

    model_config = ConfigDict(frozen=True)

    path: Path
    tool: str
    windows: bool = False

    @property
    def binary_name(self) -> str:
        return f"{self.tool}.exe" if self.windows else self.tool

    @property
    def binary_path(self) -> Path:
        return self.path / self.binary_name

    @classmethod
    def for_spec(cls, path: Path, tool: str, spec: ReleaseSpec) -> InstallRoot:
        return cls(path=Path(path), tool=tool, windows=spec.is_windows)
