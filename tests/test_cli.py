"""
Tests for CLI commands — gohome-launcher install/status and the gohome entry.
"""

import json
import os
import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner

from gohome_launcher import __version__
from gohome_launcher.main import cli, launch
from tests.helpers import FAKE_BINARY, make_tar_gz, sha256_of

posix_only = pytest.mark.skipif(os.name == "nt", reason="POSIX shebang scripts")


@pytest.fixture
def on_linux_amd64(monkeypatch):
    """Pin platform detection so artifact names are predictable."""
    import platform

    monkeypatch.setattr(platform, "system", lambda: "Linux")
    monkeypatch.setattr(platform, "machine", lambda: "x86_64")


@pytest.fixture
def launcher_yml(tmp_path: Path, release_server) -> Path:
    path = tmp_path / "launcher.yml"
    path.write_text(textwrap.dedent(f"""\
        launcher:
          version: 1.2.3
          install_dir: {tmp_path / "bin"}
          url_template: "{release_server.base_url}/{{owner}}/{{repo}}/releases/download/v{{version}}/{{filename}}"
    """))
    return path


ARTIFACT = "gohome_1.2.3_linux_amd64.tar.gz"
ARTIFACT_PATH = f"/anIcedAntFA/gohome/releases/download/v1.2.3/{ARTIFACT}"


class TestCLIGlobal:
    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "gohome launcher" in result.output

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


@pytest.mark.usefixtures("on_linux_amd64")
class TestInstallCommand:
    def test_install(self, launcher_yml: Path, release_server, tmp_path: Path):
        release_server.add(ARTIFACT_PATH, make_tar_gz({"gohome": FAKE_BINARY}))
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(launcher_yml), "install"])
        assert result.exit_code == 0, result.output
        assert "Installing gohome v1.2.3 for linux/amd64" in result.output
        assert ARTIFACT in result.output
        assert "installed successfully" in result.output
        assert (tmp_path / "bin" / "gohome").read_bytes() == FAKE_BINARY

    @posix_only
    def test_already_installed(self, launcher_yml: Path, release_server, tmp_path: Path):
        binary = tmp_path / "bin" / "gohome"
        binary.parent.mkdir()
        binary.write_bytes(FAKE_BINARY)
        binary.chmod(0o755)

        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(launcher_yml), "install"])

        assert result.exit_code == 0
        assert "already installed" in result.output
        assert release_server.requests == []

    @posix_only
    def test_force_reinstalls(self, launcher_yml: Path, release_server, tmp_path: Path):
        release_server.add(ARTIFACT_PATH, make_tar_gz({"gohome": FAKE_BINARY}))
        binary = tmp_path / "bin" / "gohome"
        binary.parent.mkdir()
        binary.write_bytes(b"#!/bin/sh\n")
        binary.chmod(0o755)

        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(launcher_yml), "install", "--force"])

        assert result.exit_code == 0, result.output
        assert binary.read_bytes() == FAKE_BINARY

    def test_download_failure(self, launcher_yml: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(launcher_yml), "install"])
        assert result.exit_code == 1
        assert "Installation failed" in result.output
        assert "HTTP 404" in result.output
        assert "go install github.com/anIcedAntFA/gohome/cmd/gohome@latest" in result.output

    def test_integrity_failure(self, tmp_path: Path, release_server):
        release_server.add(ARTIFACT_PATH, make_tar_gz({"gohome": FAKE_BINARY}))
        path = tmp_path / "launcher.yml"
        path.write_text(textwrap.dedent(f"""\
            version: 1.2.3
            install_dir: {tmp_path / "bin"}
            url_template: "{release_server.base_url}/{{owner}}/{{repo}}/releases/download/v{{version}}/{{filename}}"
            checksums:
              {ARTIFACT}: "{sha256_of(b"other")}"
        """))

        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(path), "install"])

        assert result.exit_code == 1
        assert "Checksum mismatch" in result.output
        assert not (tmp_path / "bin" / "gohome").exists()

    def test_bad_config(self, tmp_path: Path):
        path = tmp_path / "launcher.yml"
        path.write_text("max_redirects: 0\n")
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(path), "install"])
        assert result.exit_code == 1
        assert "Invalid launcher configuration" in result.output


@pytest.mark.usefixtures("on_linux_amd64")
class TestStatusCommand:
    def test_not_installed(self, launcher_yml: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(launcher_yml), "status"])
        assert result.exit_code == 0
        assert "linux/amd64" in result.output
        assert ARTIFACT in result.output
        assert "not installed" in result.output
        assert "unverified" in result.output

    def test_json(self, launcher_yml: Path, tmp_path: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(launcher_yml), "status", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["tool"] == "gohome"
        assert data["target"] == "linux/amd64"
        assert data["artifact"]["filename"] == ARTIFACT
        assert data["binary_path"] == str(tmp_path / "bin" / "gohome")
        assert data["installed"] is False

    def test_unsupported_platform(self, launcher_yml: Path, monkeypatch):
        import platform

        monkeypatch.setattr(platform, "machine", lambda: "armv7l")
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(launcher_yml), "status", "--json"])
        assert result.exit_code == 1
        assert "Unsupported platform" in json.loads(result.output)["error"]

    def test_unsupported_platform_text(self, launcher_yml: Path, monkeypatch):
        import platform

        monkeypatch.setattr(platform, "machine", lambda: "armv7l")
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(launcher_yml), "status"])
        assert result.exit_code == 1
        assert "❌ Unsupported platform" in result.output
        assert "Target:" not in result.output


class TestLaunchEntry:
    def test_config_error_exits_1(self, tmp_path: Path, monkeypatch, capsys):
        path = tmp_path / "launcher.yml"
        path.write_text("version: nope\n")
        monkeypatch.setenv("GOHOME_LAUNCHER_CONFIG", str(path))

        with pytest.raises(SystemExit) as exc:
            launch([])

        assert exc.value.code == 1
        assert "Invalid launcher configuration" in capsys.readouterr().err

    @posix_only
    def test_exit_code(self, tmp_path: Path, monkeypatch):
        binary = tmp_path / "bin" / "gohome"
        binary.parent.mkdir()
        binary.write_text("#!/bin/sh\nexit 4\n")
        binary.chmod(0o755)
        monkeypatch.setenv("GOHOME_LAUNCHER_INSTALL_DIR", str(binary.parent))
        monkeypatch.delenv("GOHOME_LAUNCHER_CONFIG", raising=False)
        monkeypatch.setattr("platform.system", lambda: "Linux")
        monkeypatch.setattr("platform.machine", lambda: "x86_64")

        with pytest.raises(SystemExit) as exc:
            launch(["--help"])

        assert exc.value.code == 4

    @posix_only
    def test_spawn_failure(self, tmp_path: Path, monkeypatch, capsys):
        binary = tmp_path / "bin" / "gohome"
        binary.parent.mkdir()
        # Executable bit but no valid interpreter
        binary.write_text("#!/nonexistent/interpreter\n")
        binary.chmod(0o755)
        monkeypatch.setenv("GOHOME_LAUNCHER_INSTALL_DIR", str(binary.parent))
        monkeypatch.delenv("GOHOME_LAUNCHER_CONFIG", raising=False)
        monkeypatch.setattr("platform.system", lambda: "Linux")
        monkeypatch.setattr("platform.machine", lambda: "x86_64")

        with pytest.raises(SystemExit) as exc:
            launch([])

        assert exc.value.code == 1
        err = capsys.readouterr().err
        assert "Cannot run gohome" in err
        assert str(binary) in err
