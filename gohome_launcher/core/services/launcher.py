"""
Launcher — make sure the binary is installed, then hand the process over.

To the calling shell, ``gohome`` must look exactly like the real
binary: same argv, same environment, same stdio handles, same exit
code, and death by the same signal.  The only visible difference is
the one-time install on first use.

Signal handling while the child runs:
    SIGTERM, SIGHUP   forwarded to the child (a supervisor usually
                      signals only our pid)
    SIGINT, SIGQUIT   swallowed when we are the terminal's foreground
                      process group, since the terminal delivers them
                      to the child too; forwarded otherwise

A no-op Python handler is used instead of ``SIG_IGN`` because ignored
dispositions survive ``exec`` and the child would inherit them.
"""

from __future__ import annotations

import contextlib
import logging
import os
import signal
import subprocess
import sys
import threading
from collections.abc import Iterator, Mapping, Sequence
from pathlib import Path
from typing import NoReturn

from gohome_launcher.core.config.loader import LauncherConfig
from gohome_launcher.core.models.launch import ExitOutcome, LaunchRequest, LaunchState
from gohome_launcher.core.models.release import InstallRoot, ReleaseSpec
from gohome_launcher.core.services.binary_install.detection.platform_detect import resolve
from gohome_launcher.core.services.binary_install.errors import (
    EnsureInstallError,
    InstallError,
    SpawnError,
)
from gohome_launcher.core.services.binary_install.execution.installer import (
    install,
    is_installed,
)

logger = logging.getLogger(__name__)

_FORWARDED = tuple(
    getattr(signal, name) for name in ("SIGTERM", "SIGHUP") if hasattr(signal, name)
)
_KEYBOARD = tuple(
    getattr(signal, name) for name in ("SIGINT", "SIGQUIT") if hasattr(signal, name)
)


# ── Install check ───────────────────────────────────────────────


def ensure_installed(
    root: InstallRoot,
    config: LauncherConfig,
    spec: ReleaseSpec | None = None,
) -> Path:
    """Return the runnable binary, installing the pinned release if needed.

    ``spec`` defaults to ``config.version`` resolved for this machine.

    Raises:
        EnsureInstallError: The binary was missing and install failed;
            the installer's own error is ``cause`` and ``__cause__``.
    """
    if is_installed(root):
        return root.binary_path
    if spec is None:
        spec = resolve(config.version)
    return _install_missing(root, config, spec)


def _install_missing(root: InstallRoot, config: LauncherConfig, spec: ReleaseSpec) -> Path:
    logger.info("%s not found at %s; installing v%s", config.tool, root.binary_path, spec.version)
    try:
        return install(spec, root, config)
    except InstallError as e:
        raise EnsureInstallError(root.binary_path, e) from e


# ── Child process ───────────────────────────────────────────────


class _SignalRelay:
    """Forwards selected signals to the child once it exists."""

    def __init__(self) -> None:
        self.child: subprocess.Popen | None = None
        self.pending: list[int] = []

    def forward(self, signum: int, frame) -> None:
        if self.child is None:
            self.pending.append(signum)
            return
        logger.debug("Forwarding signal %d to child %d", signum, self.child.pid)
        with contextlib.suppress(ProcessLookupError):
            self.child.send_signal(signum)

    def attach(self, child: subprocess.Popen) -> None:
        self.child = child
        for signum in self.pending:
            self.forward(signum, None)
        self.pending.clear()


def _swallow(signum: int, frame) -> None:
    logger.debug("Launcher ignoring signal %d; the child receives it directly", signum)


def _in_foreground() -> bool:
    """True if our process group owns the controlling terminal."""
    try:
        return os.tcgetpgrp(sys.stdin.fileno()) == os.getpgrp()
    except (AttributeError, OSError, ValueError):
        # No stdin, no tty, or no job control on this platform
        return False


@contextlib.contextmanager
def _relay_signals() -> Iterator[_SignalRelay]:
    relay = _SignalRelay()
    if threading.current_thread() is not threading.main_thread():
        # signal.signal only works from the main thread
        yield relay
        return

    previous: dict[int, object] = {}
    try:
        for signum in _FORWARDED:
            previous[signum] = signal.signal(signum, relay.forward)
        keyboard_handler = _swallow if _in_foreground() else relay.forward
        for signum in _KEYBOARD:
            previous[signum] = signal.signal(signum, keyboard_handler)
        yield relay
    finally:
        for signum, handler in previous.items():
            # None means the handler was installed outside Python
            signal.signal(signum, signal.SIG_DFL if handler is None else handler)


def run(request: LaunchRequest) -> ExitOutcome:
    """Run the binary with inherited stdio and wait for it.

    Nothing is piped or buffered: the child writes straight to our
    stdout/stderr, so output is complete once ``wait`` returns.
    """
    with _relay_signals() as relay:
        try:
            child = subprocess.Popen(request.command, env=request.env)
        except OSError as e:
            reason = e.strerror or str(e)
            logger.debug("Spawn failed for %s: %s", request.binary, reason)
            return ExitOutcome(LaunchState.SPAWN_FAILED, error=SpawnError(request.binary, reason))

        relay.attach(child)
        returncode = child.wait()

    if returncode < 0 and os.name != "nt":
        return ExitOutcome(LaunchState.SIGNALED, signal=-returncode)
    return ExitOutcome(LaunchState.EXITED, code=returncode)


# ── Relaying the outcome ────────────────────────────────────────


def terminate_self_with_signal(signum: int) -> NoReturn:
    """Die by ``signum`` so our parent sees a signaled process.

    Windows has no POSIX signals; there the conventional ``128 + n``
    exit code stands in.
    """
    sys.stdout.flush()
    sys.stderr.flush()

    if os.name != "nt":
        with contextlib.suppress(OSError, ValueError):
            signal.signal(signum, signal.SIG_DFL)
        if hasattr(signal, "pthread_sigmask"):
            signal.pthread_sigmask(signal.SIG_UNBLOCK, {signum})
        os.kill(os.getpid(), signum)

    # Only reached on Windows, or for a signal whose default is not fatal
    sys.exit(128 + signum)


def exit_with(outcome: ExitOutcome) -> NoReturn:
    """Leave the process the way the child left."""
    if outcome.state is LaunchState.SIGNALED and outcome.signal is not None:
        terminate_self_with_signal(outcome.signal)
    if outcome.state is LaunchState.EXITED and outcome.code is not None:
        sys.exit(outcome.code)
    sys.exit(1)


# ── State machine ───────────────────────────────────────────────


_TRANSITIONS: dict[LaunchState, frozenset[LaunchState]] = {
    LaunchState.START: frozenset({LaunchState.CHECK_INSTALLED, LaunchState.FAILED}),
    LaunchState.CHECK_INSTALLED: frozenset({
        LaunchState.INSTALLING, LaunchState.READY, LaunchState.FAILED,
    }),
    LaunchState.INSTALLING: frozenset({LaunchState.READY, LaunchState.FAILED}),
    LaunchState.READY: frozenset({LaunchState.RUNNING}),
    LaunchState.RUNNING: frozenset({
        LaunchState.EXITED, LaunchState.SIGNALED, LaunchState.SPAWN_FAILED,
    }),
}


class Launcher:
    """One invocation: check, maybe install, run, report.

    ``system`` and ``machine`` override the OS-reported values, which
    keeps platform detection out of ambient globals in tests.
    """

    def __init__(
        self,
        config: LauncherConfig,
        *,
        system: str | None = None,
        machine: str | None = None,
    ):
        self.config = config
        self.system = system
        self.machine = machine
        self.state = LaunchState.START
        self.history: list[LaunchState] = [LaunchState.START]
        self.spec: ReleaseSpec | None = None
        self.root: InstallRoot | None = None

    def _transition(self, new: LaunchState) -> None:
        allowed = _TRANSITIONS.get(self.state, frozenset())
        if new not in allowed or new in self.history:
            raise RuntimeError(f"Invalid launcher transition {self.state.value} -> {new.value}")
        logger.debug("Launcher: %s -> %s", self.state.value, new.value)
        self.state = new
        self.history.append(new)

    def prepare(self) -> Path:
        """START → … → READY.  Returns the binary to run.

        Any failure on the way leaves the launcher in FAILED.

        Raises:
            InstallError: Unsupported platform, or install failed.
        """
        try:
            return self._prepare()
        except Exception:
            if LaunchState.FAILED in _TRANSITIONS.get(self.state, frozenset()):
                self._transition(LaunchState.FAILED)
            raise

    def _prepare(self) -> Path:
        self.spec = resolve(self.config.version, self.system, self.machine)

        self.root = InstallRoot.for_spec(self.config.install_dir, self.config.tool, self.spec)
        self._transition(LaunchState.CHECK_INSTALLED)

        if is_installed(self.root):
            self._transition(LaunchState.READY)
            return self.root.binary_path

        self._transition(LaunchState.INSTALLING)
        path = _install_missing(self.root, self.config, self.spec)
        self._transition(LaunchState.READY)
        return path

    def launch(self, argv: Sequence[str], env: Mapping[str, str]) -> ExitOutcome:
        """Prepare, then run the binary with ``argv`` and ``env`` unchanged."""
        binary = self.prepare()
        self._transition(LaunchState.RUNNING)
        outcome = run(LaunchRequest(binary=binary, argv=tuple(argv), env=dict(env)))
        self._transition(outcome.state)
        return outcome
