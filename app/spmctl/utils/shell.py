"""Subprocess helpers used by the install backends."""

import shutil
import subprocess
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Captured output and exit code of a finished command."""

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if the command exited with status 0."""
        return self.returncode == 0


def run_command(args: list[str], *, timeout: float | None = 60.0) -> CommandResult:
    """Run a command to completion and capture its text output.

    A non-zero exit status is reported through the result, never raised.

    Raises:
        subprocess.TimeoutExpired: If the command runs longer than timeout.
        OSError: If the executable cannot be started.
    """
    completed = subprocess.run(args, capture_output=True, text=True, timeout=timeout)
    return CommandResult(completed.stdout, completed.stderr, completed.returncode)


def command_exists(name: str) -> bool:
    """Check if an executable name or path resolves on this system."""
    return shutil.which(name) is not None
