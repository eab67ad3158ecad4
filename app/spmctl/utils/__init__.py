"""Utility modules for spmctl.

This module exports commonly used utility functions.
"""

from spmctl.utils.formatting import (
    console,
    create_catalog_table,
    err_console,
    format_catalog_row,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from spmctl.utils.shell import CommandResult, command_exists, run_command

__all__ = [
    "CommandResult",
    "command_exists",
    "console",
    "create_catalog_table",
    "err_console",
    "format_catalog_row",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
]
