"""CLI commands for spmctl.

This package contains all subcommand implementations.
"""

from spmctl.cli.commands import config, install, status

__all__ = ["config", "install", "status"]
