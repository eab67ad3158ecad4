"""Terminal view over the reconciler state.

Renders the catalog store and the in-flight progress message. The view
never mutates the catalog; it only reads it after the reconciler notifies
a change.
"""

import contextlib
from collections.abc import Iterator
from typing import Any

from spmctl.core.catalog import CatalogStore
from spmctl.core.reconciler import Reconciler
from spmctl.models.package import PackageStatus
from spmctl.utils.formatting import console, create_catalog_table, format_catalog_row

FETCH_MESSAGE = "Fetching packages..."


def print_catalog(catalog: CatalogStore, title: str = "Packages") -> None:
    """Print the catalog as a table followed by a status summary.

    Args:
        catalog: Catalog to render, in manifest order.
        title: Table title.
    """
    if len(catalog) == 0:
        console.print("[muted]No packages in catalog.[/]")
        return

    table = create_catalog_table(title)
    for pkg in catalog:
        table.add_row(*format_catalog_row(pkg))
    console.print(table)

    counts = catalog.count_by_status()
    console.print(
        f"\n[dim]{len(catalog)} packages: "
        f"{counts[PackageStatus.UP_TO_DATE]} up to date, "
        f"{counts[PackageStatus.OUTDATED]} outdated, "
        f"{counts[PackageStatus.NOT_INSTALLED]} not installed"
        + (
            f", {counts[PackageStatus.UNKNOWN]} unknown"
            if counts[PackageStatus.UNKNOWN]
            else ""
        )
        + "[/]"
    )


def catalog_to_dict(reconciler: Reconciler) -> dict[str, Any]:
    """Convert the observable reconciler state to a JSON-serializable dict."""
    return {
        "manifest_url": reconciler.config.manifest_url,
        "operation": reconciler.state.snapshot(),
        "packages": [
            {
                "name": pkg.name,
                "version": pkg.version,
                "url": pkg.url,
                "status": pkg.status.value,
            }
            for pkg in reconciler.catalog
        ],
    }


@contextlib.contextmanager
def progress_view(reconciler: Reconciler, enabled: bool = True) -> Iterator[None]:
    """Show a spinner carrying the reconciler's progress message.

    The spinner text is repainted from a reconciler listener whenever an
    operation starts.

    Args:
        reconciler: Reconciler to observe.
        enabled: If False, nothing is displayed.
    """
    if not enabled:
        yield
        return

    with console.status(FETCH_MESSAGE) as status:

        def repaint(observed: Reconciler) -> None:
            if observed.state.in_flight:
                status.update(observed.state.message)
            else:
                status.update(FETCH_MESSAGE)

        reconciler.add_listener(repaint)
        try:
            yield
        finally:
            reconciler.remove_listener(repaint)
