"""Install and update commands.

Both commands refresh the catalog first, validate the package's current
status, run the backend operation and wait for the follow-up refresh so
the printed table reflects the new install state.
"""

import asyncio
from typing import Annotated

import typer

from spmctl.cli.display import print_catalog, progress_view
from spmctl.cli.options import get_config, is_quiet
from spmctl.core.reconciler import Reconciler
from spmctl.core.session import create_reconciler, running
from spmctl.models.operation import OperationKind
from spmctl.models.package import PackageStatus
from spmctl.utils.formatting import print_error, print_success, print_warning

# Status a package must have for each command, unless --force is given
_REQUIRED_STATUS: dict[OperationKind, PackageStatus] = {
    OperationKind.INSTALL: PackageStatus.NOT_INSTALLED,
    OperationKind.UPDATE: PackageStatus.OUTDATED,
}


class CommandFailed(Exception):
    """Raised inside a session when the command cannot proceed."""


async def run_package_operation(
    reconciler: Reconciler,
    name: str,
    kind: OperationKind,
    force: bool = False,
    show_progress: bool = True,
) -> None:
    """Refresh, run an install/update and wait for the resync.

    Args:
        reconciler: Reconciler to drive. Its poller must not be running yet.
        name: Catalog package name.
        kind: OperationKind.INSTALL or OperationKind.UPDATE.
        force: Skip the package status check.
        show_progress: Whether to display the progress spinner.

    Raises:
        CommandFailed: If the backend is unavailable, the catalog cannot be
            loaded, the package is unknown or in the wrong state, or the
            operation fails.
    """
    backend = reconciler.backend
    if not backend.is_available():
        raise CommandFailed(f"The {backend.name} backend is not available on this system")

    async with running(reconciler):
        with progress_view(reconciler, enabled=show_progress):
            if not await reconciler.refresh_catalog():
                msg = f"Could not load the package catalog from {reconciler.config.manifest_url}"
                raise CommandFailed(msg)
            await reconciler.wait_until_idle()

            package = reconciler.catalog.find(name)
            if package is None:
                raise CommandFailed(f"Package '{name}' is not in the catalog")

            required = _REQUIRED_STATUS[kind]
            if package.status != required and not force:
                msg = (
                    f"Package '{name}' is {package.status.value.replace('_', ' ')}; "
                    f"use --force to {kind.value} anyway"
                )
                raise CommandFailed(msg)

            if kind == OperationKind.INSTALL:
                started = reconciler.install_package(package)
            else:
                started = reconciler.update_package(package)
            if not started:
                raise CommandFailed(f"Could not start {kind.value} of '{name}'")

            await reconciler.wait_until_idle()

    result = reconciler.last_results.get(kind)
    if result is None or not result.succeeded:
        if result is not None and result.timed_out:
            reason = f"timed out after {reconciler.timeout:.0f}s"
        else:
            reason = (result.error if result else None) or "unknown error"
        raise CommandFailed(f"Failed to {kind.value} '{name}': {reason}")


def _run(ctx: typer.Context, name: str, kind: OperationKind, force: bool) -> None:
    config = get_config(ctx)
    quiet = is_quiet(ctx)
    reconciler = create_reconciler(config)

    try:
        asyncio.run(
            run_package_operation(reconciler, name, kind, force=force, show_progress=not quiet)
        )
    except CommandFailed as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    verb = "Installed" if kind == OperationKind.INSTALL else "Updated"
    print_success(f"{verb} {name}")

    package = reconciler.catalog.find(name)
    if package is not None and package.status != PackageStatus.UP_TO_DATE:
        print_warning(
            f"'{name}' reports status {package.status.value} after the {kind.value}; "
            "the installed version does not match the catalog"
        )

    if not quiet:
        print_catalog(reconciler.catalog)


def install(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Catalog package name.")],
    force: Annotated[
        bool,
        typer.Option("--force", help="Install even if the package is already installed."),
    ] = False,
) -> None:
    """Install a catalog package.

    Examples:
        spmctl install shusmo-core
        spmctl install shusmo-core --force
    """
    _run(ctx, name, OperationKind.INSTALL, force)


def update(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Catalog package name.")],
    force: Annotated[
        bool,
        typer.Option("--force", help="Update even if the package is not outdated."),
    ] = False,
) -> None:
    """Update an outdated catalog package to the catalog version.

    Examples:
        spmctl update shusmo-core
    """
    _run(ctx, name, OperationKind.UPDATE, force)
