import os
import signal
import subprocess
import sys
from datetime import datetime, timedelta, timezone

import pytest

from gravlab.processes import format_uptime, kill_process, process_alive

NOW = datetime(2024, 5, 1, 12, 0, 0)


@pytest.mark.parametrize(
    "elapsed, expected",
    [
        (timedelta(hours=2, minutes=30), "2h30m"),
        (timedelta(hours=1), "1h0m"),
        (timedelta(minutes=45), "0h45m"),
        (timedelta(minutes=90), "1h30m"),
        (timedelta(hours=3, minutes=15), "3h15m"),
    ],
)
def test_format_uptime(elapsed, expected):
    assert format_uptime(NOW - elapsed, NOW) == expected


def test_format_uptime_ignores_seconds():
    assert format_uptime(NOW - timedelta(minutes=45, seconds=59), NOW) == "0h45m"


def test_format_uptime_defaults_to_current_time():
    start = datetime.now(timezone.utc) - timedelta(hours=2, minutes=30, seconds=5)
    assert format_uptime(start) == "2h30m"


def _sleeper():
    return subprocess.Popen([sys.executable, "-c", "import time; time.sleep(60)"])


def test_kill_process_terminates_child():
    proc = _sleeper()
    try:
        assert process_alive(proc.pid)
        kill_process(proc.pid)
        returncode = proc.wait(timeout=10)
    finally:
        if proc.poll() is None:
            proc.kill()
            proc.wait()
    assert returncode == -signal.SIGTERM


def test_kill_process_missing_pid_raises():
    proc = subprocess.Popen([sys.executable, "-c", "pass"])
    proc.wait(timeout=10)
    with pytest.raises(OSError, match="failed to kill process"):
        kill_process(proc.pid)


def test_process_alive_for_self():
    assert process_alive(os.getpid()) is True


def test_process_alive_after_exit():
    proc = subprocess.Popen([sys.executable, "-c", "pass"])
    proc.wait(timeout=10)
    assert process_alive(proc.pid) is False


@pytest.mark.parametrize("pid", [0, -1])
def test_process_alive_rejects_non_positive(pid):
    assert process_alive(pid) is False