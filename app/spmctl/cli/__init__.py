"""CLI package for spmctl.

This package contains the Typer application and all subcommands.
"""

from spmctl.cli.main import app

__all__ = ["app"]
