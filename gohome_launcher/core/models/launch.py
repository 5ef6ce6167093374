"""
Launch models — one invocation of the wrapped binary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class LaunchState(str, Enum):
    """Launcher lifecycle.  No state is entered twice in one invocation."""

    START = "start"
    CHECK_INSTALLED = "check_installed"
    INSTALLING = "installing"
    READY = "ready"
    RUNNING = "running"
    EXITED = "exited"
    SIGNALED = "signaled"
    SPAWN_FAILED = "spawn_failed"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in _TERMINAL


_TERMINAL = frozenset({
    LaunchState.EXITED,
    LaunchState.SIGNALED,
    LaunchState.SPAWN_FAILED,
    LaunchState.FAILED,
})


@dataclass(frozen=True)
class LaunchRequest:
    """Binary plus the caller's argv (without program name) and environment."""

    binary: Path
    argv: tuple[str, ...] = ()
    env: dict[str, str] = field(default_factory=dict)

    @property
    def command(self) -> list[str]:
        return [str(self.binary), *self.argv]


@dataclass
class ExitOutcome:
    """How the child (or the launch attempt) ended."""

    state: LaunchState
    code: int | None = None
    signal: int | None = None
    error: Exception | None = None

    def to_dict(self) -> dict:
        result: dict = {"state": self.state.value}
        if self.code is not None:
            result["code"] = self.code
        if self.signal is not None:
            result["signal"] = self.signal
        if self.error is not None:
            result["error"] = str(self.error)
        return result
