"""
gohome launcher — console entry points.

Two scripts:

    gohome ...             transparent launcher; every argument belongs
                           to the real binary, so nothing is parsed here
    gohome-launcher ...    admin commands (install, status)

Usage:
    gohome --help
    gohome-launcher install --force
    gohome-launcher status --json
"""

from __future__ import annotations

import json
import os
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import NoReturn

import click

from gohome_launcher import __version__
from gohome_launcher.core.config.loader import ConfigError, LauncherConfig, load_config
from gohome_launcher.core.models.launch import LaunchState
from gohome_launcher.core.observability.logging_config import (
    ENV_LOG_FILE,
    ENV_LOG_LEVEL,
    setup_logging,
    setup_logging_from_env,
)
from gohome_launcher.core.services.binary_install.errors import (
    InstallError,
    alternate_install_hint,
)


def _report_failure(title: str, error: Exception, config: LauncherConfig | None) -> None:
    """One paragraph for the failure, then what to do about it."""
    click.secho(f"❌ {title}: {error}", fg="red", err=True)
    hint = getattr(error, "hint", "")
    if hint:
        click.echo(f"   {hint}", err=True)
    if config is not None:
        click.echo(err=True)
        click.secho("💡 " + alternate_install_hint(
            config.tool, config.host, config.owner, config.repo,
        ), fg="yellow", err=True)


# ── gohome ─────────────────────────────────────────────────────


def launch(argv: Sequence[str] | None = None) -> NoReturn:
    """Run the installed binary with ``argv`` (default: ``sys.argv[1:]``).

    Exits with the child's code, dies by the child's signal, or exits 1
    if configuration, install, or spawn failed.
    """
    from gohome_launcher.core.services.launcher import Launcher, exit_with

    args = list(sys.argv[1:] if argv is None else argv)
    setup_logging_from_env()

    try:
        config = load_config()
    except ConfigError as e:
        _report_failure("Invalid launcher configuration", e, None)
        sys.exit(1)

    launcher = Launcher(config)
    try:
        outcome = launcher.launch(args, os.environ)
    except InstallError as e:
        _report_failure("Installation failed", e, config)
        sys.exit(1)
    except ConfigError as e:
        _report_failure("Invalid launcher configuration", e, None)
        sys.exit(1)

    if outcome.state is LaunchState.SPAWN_FAILED:
        _report_failure(f"Cannot run {config.tool}", outcome.error, config)
        sys.exit(1)

    exit_with(outcome)


# ── gohome-launcher ────────────────────────────────────────────


@click.group()
@click.version_option(version=__version__, prog_name="gohome-launcher")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to a launcher YAML file (default: $GOHOME_LAUNCHER_CONFIG).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """gohome launcher — install and inspect the gohome binary."""
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get(ENV_LOG_LEVEL, "WARNING")

    setup_logging(level=level, log_file=os.environ.get(ENV_LOG_FILE))


@cli.command()
@click.option("--force", is_flag=True, help="Reinstall even if the binary is present.")
@click.pass_context
def install(ctx: click.Context, force: bool) -> None:
    """Download and install the pinned gohome release."""
    from gohome_launcher.core.models.release import InstallRoot
    from gohome_launcher.core.services.binary_install import (
        describe_artifact,
        install as install_release,
        is_installed,
        resolve,
    )

    quiet = ctx.obj.get("quiet", False)
    config: LauncherConfig | None = None
    try:
        config = load_config(ctx.obj.get("config_path"))
        spec = resolve(config.version)
        root = InstallRoot.for_spec(config.install_dir, config.tool, spec)

        if is_installed(root) and not force:
            if not quiet:
                click.secho(f"✅ {config.tool} v{config.version} already installed", fg="green")
                click.echo(f"📍 Binary location: {root.binary_path}")
            return

        if not quiet:
            artifact = describe_artifact(spec, config)
            click.echo(f"📦 Installing {config.tool} v{spec.version} for {spec.target}...")
            click.echo(f"🔗 Downloading from: {artifact.url}")

        path = install_release(spec, root, config)
    except ConfigError as e:
        _report_failure("Invalid launcher configuration", e, None)
        sys.exit(1)
    except InstallError as e:
        _report_failure("Installation failed", e, config)
        sys.exit(1)

    if not quiet:
        click.secho(f"✅ {config.tool} installed successfully!", fg="green", bold=True)
        click.echo(f"📍 Binary location: {path}")
        click.echo()
        click.echo("🚀 Get started:")
        click.echo(f"   {config.tool} --help")


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def status(ctx: click.Context, as_json: bool) -> None:
    """Show the resolved target, artifact, and install state."""
    from gohome_launcher.core.use_cases.status import get_status

    result = get_status(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)

    config, spec, artifact = result.config, result.spec, result.artifact
    if result.error or config is None or spec is None or artifact is None:
        click.secho(f"❌ {result.error or 'status unavailable'}", fg="red")
        sys.exit(1)

    click.secho(f"\n📋 {config.tool} v{config.version}", fg="cyan", bold=True)
    click.echo(f"   Target:   {spec.target}")
    click.echo(f"   Artifact: {artifact.filename}")
    click.echo(f"   URL:      {artifact.url}")
    checksum = artifact.expected_checksum
    if checksum:
        click.echo(f"   Checksum: {checksum}")
    elif config.verify_release_checksums:
        click.echo("   Checksum: from release manifest")
    else:
        click.secho("   Checksum: none (downloads are trusted unverified)", fg="yellow")
    click.echo(f"   Binary:   {result.binary_path}")
    if result.installed:
        click.secho("   ✓ installed", fg="green")
    else:
        click.secho("   ✗ not installed (installs on first run)", fg="yellow")
    click.echo()


if __name__ == "__main__":
    cli()
