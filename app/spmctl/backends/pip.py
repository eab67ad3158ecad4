"""Pip install backend implementation.

Lists and installs packages with `python -m pip`. Pip accepts VCS
requirement strings such as "git+https://host/repo.git", which is the
source reference format catalog packages produce.
"""

import json
import logging
import subprocess
import sys

from spmctl.backends.base import InstallBackend
from spmctl.core.operation import Operation, TaskOperation
from spmctl.errors import BackendError
from spmctl.models.package import InstalledPackage
from spmctl.utils.shell import CommandResult, command_exists, run_command

logger = logging.getLogger(__name__)


class PipBackend(InstallBackend):
    """Backend driving pip for the given interpreter.

    Each operation runs the pip subprocess in a worker thread and is
    reported through a TaskOperation.

    Attributes:
        python: Interpreter whose environment is managed.
    """

    # Hard limit for a single pip subprocess (5 minutes). The reconciler's
    # own timeout is usually shorter and merely stops waiting.
    _PIP_TIMEOUT: float = 300.0

    def __init__(self, python: str | None = None) -> None:
        """Initialize the backend.

        Args:
            python: Interpreter path. Defaults to the running interpreter.
        """
        self.python = python or sys.executable

    @property
    def name(self) -> str:
        """Return "pip" as the backend name."""
        return "pip"

    def is_available(self) -> bool:
        """Check if the configured interpreter exists."""
        return command_exists(self.python)

    def list_installed(self) -> Operation[list[InstalledPackage]]:
        """Start `pip list --format=json` in a worker thread."""
        return TaskOperation.start(self._list_installed)

    def add(self, source_reference: str) -> Operation[None]:
        """Start `pip install --upgrade <source_reference>` in a worker thread.

        Raises:
            BackendError: If source_reference is empty.
        """
        if not source_reference:
            raise BackendError("Source reference cannot be empty")
        return TaskOperation.start(self._install, source_reference)

    def _list_installed(self) -> list[InstalledPackage]:
        """List installed distributions.

        Raises:
            BackendError: If pip fails or prints malformed output.
        """
        result = self._run_pip(["list", "--format=json"])
        if not result.success:
            raise BackendError(self._error_message(result, "pip list failed"))
        return self._parse_list_output(result.stdout)

    def _install(self, source_reference: str) -> None:
        """Install or upgrade a single requirement.

        Raises:
            BackendError: If pip exits with a non-zero code.
        """
        logger.info("Installing %s with pip", source_reference)
        result = self._run_pip(["install", "--upgrade", source_reference])
        if not result.success:
            raise BackendError(self._error_message(result, "pip install failed"))

    def _parse_list_output(self, stdout: str) -> list[InstalledPackage]:
        """Parse the JSON printed by `pip list --format=json`.

        Args:
            stdout: Raw pip output, a JSON array of {"name", "version"} objects.

        Returns:
            List of InstalledPackage. Entries without a name are skipped.

        Raises:
            BackendError: If the output is not a JSON array.
        """
        try:
            data = json.loads(stdout or "[]")
        except json.JSONDecodeError as e:
            raise BackendError(f"Malformed pip list output: {e}") from e

        if not isinstance(data, list):
            raise BackendError("Malformed pip list output: expected a JSON array")

        packages: list[InstalledPackage] = []
        for item in data:
            if not isinstance(item, dict):
                continue
            name = item.get("name")
            version = item.get("version")
            if not isinstance(name, str) or not name or not isinstance(version, str):
                logger.debug("Skipping malformed pip list entry: %r", item)
                continue
            packages.append(InstalledPackage(name=name, version=version))

        return packages

    def _run_pip(self, args: list[str]) -> CommandResult:
        """Run pip with the given arguments.

        Raises:
            BackendError: If pip cannot be started or exceeds its hard limit.
        """
        command = [self.python, "-m", "pip", *args, "--disable-pip-version-check"]
        try:
            return run_command(command, timeout=self._PIP_TIMEOUT)
        except subprocess.TimeoutExpired as e:
            raise BackendError(f"pip did not finish within {e.timeout:.0f}s") from e
        except OSError as e:
            raise BackendError(f"Cannot run pip: {e}") from e

    def _error_message(self, result: CommandResult, fallback: str) -> str:
        """Pick the most useful error text from a failed pip run."""
        return result.stderr.strip() or result.stdout.strip() or fallback
