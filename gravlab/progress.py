"""Follow instance setup progress and throttle readiness reports."""

from __future__ import annotations

from dataclasses import dataclass, field

PROGRESS_LOG = "/var/log/setup-progress.log"
STEP_PREFIX = "STEP:"
COMPLETE_MARKER = "COMPLETE"
DEFAULT_REPORT_INTERVAL = 20.0


def progress_command(key_path: str, host: str) -> str:
    """Return the shell command that tails the setup progress log over SSH."""
    return (
        f"ssh -i {key_path} -o StrictHostKeyChecking=no -o ConnectTimeout=3 "
        f"-o BatchMode=yes ubuntu@{host} "
        f"'tail -20 {PROGRESS_LOG} 2>/dev/null || echo \"\"' 2>/dev/null"
    )


@dataclass
class ProgressTracker:
    """Turns successive tails of the progress log into new display lines.

    Each step is reported once; the tracker stops at the completion marker.
    """

    seen_steps: set[str] = field(default_factory=set)
    last_line: str = ""
    complete: bool = False

    def feed(self, output: str) -> list[str]:
        """Consume one tail of the log and return the lines worth showing."""
        messages: list[str] = []
        if self.complete:
            return messages
        for raw in output.split("\n"):
            line = raw.strip()
            if not line or line == self.last_line:
                continue
            if line.startswith(STEP_PREFIX):
                step = line[len(STEP_PREFIX):]
                if step not in self.seen_steps:
                    self.seen_steps.add(step)
                    messages.append(f"   📋 {step}")
            elif line == COMPLETE_MARKER:
                self.complete = True
                messages.append("   ✅ Setup complete!")
                return messages
            self.last_line = line
        return messages


@dataclass
class ReadinessThrottle:
    """Decides which readiness messages are shown, to avoid flooding output.

    A message is shown when the interval has passed since the last one shown,
    or when it mentions readiness or SSM.
    """

    start: float
    interval: float = DEFAULT_REPORT_INTERVAL
    last_update: float = field(init=False)

    def __post_init__(self) -> None:
        self.last_update = self.start

    def should_report(self, message: str, now: float) -> bool:
        """Whether to show this message at time now (seconds, same clock as start)."""
        if (
            now - self.last_update >= self.interval
            or "ready" in message
            or "SSM" in message
        ):
            self.last_update = now
            return True
        return False