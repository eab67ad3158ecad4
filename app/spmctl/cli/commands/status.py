"""Status command implementation.

Fetches the manifest, reconciles it against the installed packages and
shows the status of every catalog package.
"""

import asyncio
import json
from enum import Enum
from typing import Annotated

import typer

from spmctl.cli.display import catalog_to_dict, print_catalog, progress_view
from spmctl.cli.options import get_config
from spmctl.core.config import SpmConfig
from spmctl.core.reconciler import Reconciler
from spmctl.core.session import create_reconciler, running
from spmctl.utils.formatting import console, print_error

app = typer.Typer(
    help="Show the install status of catalog packages.",
    invoke_without_command=True,
)


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


async def refresh_status(reconciler: Reconciler, show_progress: bool = True) -> bool:
    """Refresh the catalog and wait for the reconciliation to finish.

    Args:
        reconciler: Reconciler to drive. Its poller must not be running yet.
        show_progress: Whether to display the progress spinner.

    Returns:
        True if the manifest was fetched, False otherwise.
    """
    async with running(reconciler):
        with progress_view(reconciler, enabled=show_progress):
            fetched = await reconciler.refresh_catalog()
            await reconciler.wait_until_idle()
    return fetched


@app.callback(invoke_without_command=True)
def show_status(
    ctx: typer.Context,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format: table or json.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
    manifest_url: Annotated[
        str | None,
        typer.Option(
            "--manifest-url",
            "-u",
            help="Override the configured manifest URL.",
        ),
    ] = None,
) -> None:
    """Fetch the catalog and show each package's install status.

    Examples:
        spmctl status                     # Table of all catalog packages
        spmctl status --format json       # Machine-readable output
        spmctl status -u http://localhost:8000/packages.json
    """
    if ctx.invoked_subcommand is not None:
        return

    config: SpmConfig = get_config(ctx)
    if manifest_url:
        config = config.model_copy(update={"manifest_url": manifest_url})

    reconciler = create_reconciler(config)
    show_progress = output_format == OutputFormat.TABLE
    fetched = asyncio.run(refresh_status(reconciler, show_progress=show_progress))

    if not fetched:
        print_error(f"Could not load the package catalog from {config.manifest_url}")
        raise typer.Exit(code=1)

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(catalog_to_dict(reconciler)))
        return

    print_catalog(reconciler.catalog)
