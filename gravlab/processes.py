"""Local process helpers for tunnels and uptime display."""

from __future__ import annotations

import os
import signal
from datetime import datetime


def kill_process(pid: int) -> None:
    """Ask a process to terminate, forcing it if the polite request fails."""
    try:
        os.kill(pid, signal.SIGTERM)
    except OSError:
        force = getattr(signal, "SIGKILL", signal.SIGTERM)
        try:
            os.kill(pid, force)
        except OSError as error:
            raise OSError(f"failed to kill process {pid}: {error}") from error


def process_alive(pid: int) -> bool:
    """Whether a process with this PID currently exists."""
    if pid <= 0:
        return False
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        return True
    except OSError:
        return False
    return True


def _truncated_rem(value: int, divisor: int) -> int:
    return value - int(value / divisor) * divisor


def format_uptime(start: datetime, now: datetime | None = None) -> str:
    """Format the time elapsed since start as hours and minutes, e.g. "2h30m"."""
    if now is None:
        now = datetime.now(start.tzinfo)
    seconds = (now - start).total_seconds()
    hours = int(seconds / 3600)
    minutes = _truncated_rem(int(seconds / 60), 60)
    return f"{hours}h{minutes}m"