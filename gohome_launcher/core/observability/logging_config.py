"""
Logging configuration — shared by both console scripts.

Every module does ``logger = logging.getLogger(__name__)`` and inherits
this setup.  Output goes to stderr only: stdout belongs to the wrapped
binary and must never carry launcher noise.

Levels are resolved in precedence order:
    CLI flag  >  GOHOME_LAUNCHER_LOG_LEVEL env var  >  WARNING (default)

``gohome`` itself owns no flags, so it only ever reads the env var.
Optional file output via GOHOME_LAUNCHER_LOG_FILE.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

# ── Format strings ──────────────────────────────────────────────

# WARNING level: the message is all the user needs
_FMT_MINIMAL = "%(message)s"

# INFO level: timestamped with module context
_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"

# DEBUG level and file output: file:line included
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"

_DATEFMT_CONSOLE = "%H:%M:%S"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

ENV_LOG_LEVEL = "GOHOME_LAUNCHER_LOG_LEVEL"
ENV_LOG_FILE = "GOHOME_LAUNCHER_LOG_FILE"


def setup_logging(level: str = "WARNING", log_file: str | None = None) -> None:
    """Configure the root logger for this process.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path; the file always gets DEBUG detail.
    """
    numeric_level = _parse_level(level)

    if numeric_level <= logging.DEBUG:
        fmt = _FMT_DEBUG
    elif numeric_level <= logging.INFO:
        fmt = _FMT_VERBOSE
    else:
        fmt = _FMT_MINIMAL

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=_DATEFMT_CONSOLE))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    effective_level = numeric_level

    if log_file:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FMT_DEBUG, datefmt=_DATEFMT_FILE))
        root.addHandler(fh)
        effective_level = logging.DEBUG

    root.setLevel(effective_level)

    # Don't propagate exceptions from logging itself
    logging.raiseExceptions = False


def setup_logging_from_env(environ: Mapping[str, str] | None = None) -> None:
    """Configure logging for the flagless ``gohome`` entry point."""
    env = os.environ if environ is None else environ
    setup_logging(
        level=env.get(ENV_LOG_LEVEL, "WARNING"),
        log_file=env.get(ENV_LOG_FILE) or None,
    )


def _parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
