"""Unit tests for shell execution utilities."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest
from spmctl.utils.shell import CommandResult, command_exists, run_command


class TestCommandResult:
    """Tests for CommandResult dataclass."""

    def test_success_on_zero_exit(self) -> None:
        """Exit code 0 is a success."""
        assert CommandResult(stdout="", stderr="", returncode=0).success is True

    def test_failure_on_nonzero_exit(self) -> None:
        """Any other exit code is a failure."""
        assert CommandResult(stdout="", stderr="err", returncode=1).success is False


class TestRunCommand:
    """Tests for run_command function."""

    @patch("spmctl.utils.shell.subprocess.run")
    def test_captures_output(self, mock_run: MagicMock) -> None:
        """run_command returns captured stdout, stderr and exit code."""
        mock_run.return_value = MagicMock(stdout="out", stderr="err", returncode=3)

        result = run_command(["pip", "list"])

        assert result == CommandResult(stdout="out", stderr="err", returncode=3)
        kwargs = mock_run.call_args.kwargs
        assert kwargs["capture_output"] is True
        assert kwargs["text"] is True

    @patch("spmctl.utils.shell.subprocess.run")
    def test_passes_timeout(self, mock_run: MagicMock) -> None:
        """The timeout is forwarded and failures are not raised."""
        mock_run.return_value = MagicMock(stdout="", stderr="", returncode=0)

        run_command(["ls"], timeout=5.0)

        assert mock_run.call_args.kwargs["timeout"] == 5.0
        assert "check" not in mock_run.call_args.kwargs

    @patch("spmctl.utils.shell.subprocess.run")
    def test_timeout_propagates(self, mock_run: MagicMock) -> None:
        """subprocess.TimeoutExpired is not swallowed."""
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="sleep", timeout=1)

        with pytest.raises(subprocess.TimeoutExpired):
            run_command(["sleep", "10"], timeout=1)


class TestCommandExists:
    """Tests for command_exists function."""

    def test_found(self) -> None:
        """Returns True when shutil.which finds the command."""
        with patch("spmctl.utils.shell.shutil.which", return_value="/usr/bin/python3"):
            assert command_exists("python3") is True

    def test_missing(self) -> None:
        """Returns False when the command is not on PATH."""
        with patch("spmctl.utils.shell.shutil.which", return_value=None):
            assert command_exists("no-such-tool") is False
