"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from spmctl.core.theme import get_theme
from spmctl.models.package import PackageStatus

if TYPE_CHECKING:
    from spmctl.models.package import CatalogPackage

# Label and action shown per status: (label, action hint)
STATUS_DISPLAY: dict[PackageStatus, tuple[str, str]] = {
    PackageStatus.NOT_INSTALLED: ("not installed", "install"),
    PackageStatus.OUTDATED: ("outdated", "update"),
    PackageStatus.UP_TO_DATE: ("up to date", ""),
    PackageStatus.UNKNOWN: ("unknown", ""),
}


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def create_catalog_table(title: str = "Packages") -> Table:
    """Create a pre-configured table for displaying catalog packages.

    Args:
        title: Table title.

    Returns:
        Rich Table configured for catalog display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],  # Zebra striping for readability
    )
    table.add_column("Package", no_wrap=True)
    table.add_column("Version", style="muted")
    table.add_column("Status")
    table.add_column("Action", style="info")
    return table


def format_catalog_row(pkg: CatalogPackage) -> tuple[str, str, str, str]:
    """Format a catalog package as a table row.

    Args:
        pkg: The package to format.

    Returns:
        Tuple of (name, version, status, action) with Rich markup.
    """
    label, action = STATUS_DISPLAY[pkg.status]
    style = f"status.{pkg.status.value}"
    return (
        f"[package.name]{pkg.name}[/]",
        f"[package.version]{pkg.version}[/]",
        f"[{style}]{label}[/]",
        action,
    )


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
