"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from pathlib import Path
from typing import Annotated

import typer

from spmctl import __version__
from spmctl.cli.commands import config, install, status
from spmctl.cli.options import configure_logging

# Create main Typer app
app = typer.Typer(
    name="spmctl",
    help="Track and install packages from the Shusmo package catalog.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"spmctl version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to the config file.",
        ),
    ] = None,
) -> None:
    """spmctl - package status tracker for the Shusmo package catalog.

    Compares the remote package manifest with the locally installed
    packages and installs or updates them on request.
    """
    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = config_path

    configure_logging(verbose=verbose, quiet=quiet)


# Register commands
app.add_typer(status.app, name="status")
app.add_typer(config.app, name="config")
app.command(name="install")(install.install)
app.command(name="update")(install.update)


if __name__ == "__main__":
    app()
