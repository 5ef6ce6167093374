"""
L1 Domain — Download helpers (pure).

Size formatting and progress thresholds.  No I/O.
"""

from __future__ import annotations


def _fmt_size(n: int | float) -> str:
    """Format byte count to human-readable string."""
    for unit in ("B", "KB", "MB", "GB"):
        if n < 1024:
            return f"{n:.1f} {unit}"
        n /= 1024
    return f"{n:.1f} TB"


def _progress_step(downloaded: int, total: int, last_pct: int, every: int = 10) -> int | None:
    """Percentage to report, or None if the next threshold isn't reached.

    Unknown totals (no Content-Length) never report.
    """
    if total <= 0:
        return None
    pct = min(100, int(downloaded * 100 / total))
    if pct >= last_pct + every:
        return pct
    return None
