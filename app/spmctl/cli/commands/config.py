"""Configuration commands.

Shows the effective configuration and writes a default config file.
"""

from typing import Annotated

import typer
from rich.table import Table

from spmctl.cli.options import get_config
from spmctl.core.config import SpmConfig, save_config
from spmctl.core.paths import get_config_path
from spmctl.errors import ConfigError
from spmctl.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show or initialize the spmctl configuration.",
    no_args_is_help=True,
)


@app.command()
def show(ctx: typer.Context) -> None:
    """Show the effective configuration."""
    config = get_config(ctx)
    path = (ctx.obj or {}).get("config_path") or get_config_path()

    table = Table(
        title="Configuration",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Setting", no_wrap=True)
    table.add_column("Value", style="info")

    for key, value in config.model_dump().items():
        table.add_row(key, str(value))

    console.print(table)
    state = "" if path.exists() else " (not created, showing defaults)"
    console.print(f"\n[dim]Config file: {path}{state}[/]")


@app.command()
def init(
    ctx: typer.Context,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file with default settings."""
    path = (ctx.obj or {}).get("config_path") or get_config_path()

    if path.exists() and not force:
        print_info(f"Config already exists: {path} (use --force to overwrite)")
        return

    try:
        saved = save_config(SpmConfig(), path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Wrote default config to {saved}")
