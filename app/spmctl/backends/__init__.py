"""Install backends for listing and installing packages.

This module exports the abstract backend and its pip implementation.
"""

from spmctl.backends.base import InstallBackend
from spmctl.backends.pip import PipBackend

__all__ = ["InstallBackend", "PipBackend"]
