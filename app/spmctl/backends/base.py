"""Abstract base class for install backends.

This module defines the InstallBackend interface that the reconciler uses
to list installed packages and to install or update a package.
"""

from abc import ABC, abstractmethod

from spmctl.core.operation import Operation
from spmctl.models.package import InstalledPackage


class InstallBackend(ABC):
    """Abstract base class for all install backends.

    Both operations are long-running: they return an Operation handle
    immediately and report completion through it. Callers hand the handle
    to the OperationPoller instead of awaiting it.

    Example:
        >>> backend = PipBackend()
        >>> operation = backend.list_installed()
        >>> poller.watch(operation, timeout=60.0, callback=on_listed)
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return a short identifier for log messages."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the backend can be used on this system.

        Returns:
            True if the backend tool is available, False otherwise.
        """

    @abstractmethod
    def list_installed(self) -> Operation[list[InstalledPackage]]:
        """Start listing installed packages.

        Returns:
            Operation whose result is the list of installed packages.
            Failures are reported through the operation's error.
        """

    @abstractmethod
    def add(self, source_reference: str) -> Operation[None]:
        """Start installing or updating a package.

        Args:
            source_reference: Backend locator such as "git+https://...".

        Returns:
            Operation that completes when the install finishes.

        Raises:
            BackendError: If the operation cannot be started at all.
        """
