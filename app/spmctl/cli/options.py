"""Shared helpers for CLI commands.

Provides logging setup and configuration loading based on the global
options stored in the Typer context.
"""

import logging
from pathlib import Path

import typer
from rich.logging import RichHandler

from spmctl.core.config import SpmConfig, load_config
from spmctl.errors import ConfigError
from spmctl.utils.formatting import err_console, print_error


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Route spmctl log records to stderr through Rich.

    Args:
        verbose: Log everything down to DEBUG.
        quiet: Only log errors.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    logger = logging.getLogger("spmctl")
    logger.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(RichHandler(console=err_console, show_path=verbose, markup=False))


def get_config(ctx: typer.Context) -> SpmConfig:
    """Load the configuration selected by the global --config option.

    Raises:
        typer.Exit: If the configuration cannot be loaded.
    """
    config_path: Path | None = None
    if ctx.obj:
        config_path = ctx.obj.get("config_path")

    try:
        return load_config(config_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def is_quiet(ctx: typer.Context) -> bool:
    """Check if the global --quiet option is set."""
    return bool(ctx.obj and ctx.obj.get("quiet"))
