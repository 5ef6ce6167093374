"""
Configuration loader — launcher settings from defaults, YAML, and env.

Resolution order (later wins):
    built-in defaults  >  YAML file  >  GOHOME_LAUNCHER_* env overrides

The YAML file is optional.  It is read from an explicit path or from
``GOHOME_LAUNCHER_CONFIG``.  The wrapped binary's environment is never
touched by any of this.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from gohome_launcher import __version__
from gohome_launcher.core.models.release import normalize_checksum, normalize_version

logger = logging.getLogger(__name__)

ENV_PREFIX = "GOHOME_LAUNCHER_"
ENV_CONFIG = f"{ENV_PREFIX}CONFIG"

DEFAULT_URL_TEMPLATE = (
    "https://{host}/{owner}/{repo}/releases/download/v{version}/{filename}"
)


class ConfigError(Exception):
    """Raised when launcher configuration is invalid or unreadable."""


def default_install_dir() -> Path:
    """The package's own ``bin`` directory."""
    return Path(__file__).resolve().parents[2] / "bin"


class LauncherConfig(BaseModel):
    """Everything the installer and launcher need to know."""

    tool: str = "gohome"
    version: str = __version__

    host: str = "github.com"
    owner: str = "anIcedAntFA"
    repo: str = "gohome"
    url_template: str = DEFAULT_URL_TEMPLATE

    install_dir: Path = Field(default_factory=default_install_dir)

    # artifact filename -> "algo:hex"
    checksums: dict[str, str] = Field(default_factory=dict)
    verify_release_checksums: bool = False
    checksums_filename: str = "{tool}_{version}_checksums.txt"

    max_redirects: int = Field(default=5, ge=1, le=20)
    download_timeout: float | None = Field(default=None, gt=0)
    user_agent: str = f"gohome-launcher/{__version__}"

    @field_validator("version")
    @classmethod
    def _check_version(cls, value: str) -> str:
        return normalize_version(value)

    @field_validator("checksums")
    @classmethod
    def _check_checksums(cls, value: dict[str, str]) -> dict[str, str]:
        return {name: normalize_checksum(digest) for name, digest in value.items()}

    @field_validator("install_dir")
    @classmethod
    def _expand_install_dir(cls, value: Path) -> Path:
        return value.expanduser()

    @property
    def releases_page(self) -> str:
        return f"https://{self.host}/{self.owner}/{self.repo}/releases"


def load_config(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> LauncherConfig:
    """Build the effective launcher configuration.

    Args:
        path: Explicit YAML file.  If None, ``GOHOME_LAUNCHER_CONFIG`` is used
            when set; otherwise only defaults and env overrides apply.
        environ: Environment to read overrides from (default: ``os.environ``).

    Returns:
        Validated LauncherConfig.

    Raises:
        ConfigError: If the file is missing, unreadable, or invalid.
    """
    env = os.environ if environ is None else environ

    if path is None and env.get(ENV_CONFIG):
        path = Path(env[ENV_CONFIG]).expanduser()

    data: dict = {}
    if path is not None:
        data = _read_yaml(path)

    data.update(_env_overrides(env, data))

    try:
        config = LauncherConfig.model_validate(data)
    except ValidationError as e:
        source = path or "environment"
        raise ConfigError(f"Invalid launcher configuration ({source}): {e}") from e

    logger.debug(
        "Launcher config: %s v%s, install_dir=%s",
        config.tool, config.version, config.install_dir,
    )
    return config


def _read_yaml(path: Path) -> dict:
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading launcher config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # Accept either a flat file or everything under a "launcher" key
    return dict(data.get("launcher", data))


def _env_overrides(env: Mapping[str, str], data: dict) -> dict:
    overrides: dict = {}

    install_dir = env.get(f"{ENV_PREFIX}INSTALL_DIR")
    if install_dir:
        overrides["install_dir"] = Path(install_dir).expanduser()

    timeout = env.get(f"{ENV_PREFIX}DOWNLOAD_TIMEOUT")
    if timeout:
        overrides["download_timeout"] = timeout

    # Pin the checksum of whatever artifact this machine resolves to
    sha256 = env.get(f"{ENV_PREFIX}SHA256")
    if sha256:
        overrides["checksums"] = {**data.get("checksums", {}), "*": f"sha256:{sha256}"}

    return overrides
