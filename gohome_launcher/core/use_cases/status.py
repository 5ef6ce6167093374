"""
Status use case — what would be installed, where, and whether it is.

Read-only and offline: never downloads anything.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from gohome_launcher.core.config.loader import ConfigError, LauncherConfig, load_config
from gohome_launcher.core.models.release import ArtifactDescriptor, InstallRoot, ReleaseSpec
from gohome_launcher.core.services.binary_install.detection.platform_detect import resolve
from gohome_launcher.core.services.binary_install.domain.artifact import describe_artifact
from gohome_launcher.core.services.binary_install.errors import InstallError
from gohome_launcher.core.services.binary_install.execution.installer import is_installed


@dataclass
class StatusResult:
    """Launcher status for this machine."""

    config: LauncherConfig | None = None
    spec: ReleaseSpec | None = None
    artifact: ArtifactDescriptor | None = None
    binary_path: Path | None = None
    installed: bool = False
    error: str | None = None

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        result: dict = {}
        if self.error:
            result["error"] = self.error
            return result

        if self.config:
            result["tool"] = self.config.tool
            result["version"] = self.config.version
            result["install_dir"] = str(self.config.install_dir)
        if self.spec:
            result["target"] = self.spec.target
        if self.artifact:
            result["artifact"] = {
                "filename": self.artifact.filename,
                "url": self.artifact.url,
                "checksum": self.artifact.expected_checksum,
            }
        result["binary_path"] = str(self.binary_path) if self.binary_path else None
        result["installed"] = self.installed
        return result


def get_status(
    config_path: Path | None = None,
    *,
    system: str | None = None,
    machine: str | None = None,
) -> StatusResult:
    """Resolve the target and check the install root.

    Args:
        config_path: Optional explicit launcher YAML.
        system: OS name override (default: this machine).
        machine: CPU name override (default: this machine).
    """
    result = StatusResult()

    try:
        config = load_config(config_path)
        result.config = config
        spec = resolve(config.version, system, machine)
        result.spec = spec
        result.artifact = describe_artifact(spec, config)
    except (ConfigError, InstallError) as e:
        result.error = str(e)
        return result

    root = InstallRoot.for_spec(config.install_dir, config.tool, spec)
    result.binary_path = root.binary_path
    result.installed = is_installed(root)
    return result
