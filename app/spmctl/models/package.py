"""Package models for catalog tracking.

This module defines the core data structures for representing packages
from the remote catalog and packages reported by the install backend.
"""

from dataclasses import dataclass, field
from enum import Enum

# Scheme prefix that turns a repository URL into a VCS fetch reference
VCS_SCHEME_PREFIX = "git+"


class PackageStatus(Enum):
    """Install state of a catalog package.

    UNKNOWN is the state between a manifest fetch and the first successful
    reconciliation against the installed set.
    """

    NOT_INSTALLED = "not_installed"
    OUTDATED = "outdated"
    UP_TO_DATE = "up_to_date"
    UNKNOWN = "unknown"


@dataclass(slots=True)
class CatalogPackage:
    """Represents a package listed in the remote manifest.

    Identity is the package name. Only the status is mutated after creation,
    and only by the reconciler.

    Attributes:
        name: Package name, unique within a catalog.
        version: Version string advertised by the manifest.
        url: Repository URL the package is installed from.
        status: Install state derived from the last reconciliation.
    """

    name: str
    version: str
    url: str
    status: PackageStatus = field(default=PackageStatus.UNKNOWN)

    def __post_init__(self) -> None:
        """Validate package data after initialization."""
        if not self.name:
            msg = "Package name cannot be empty"
            raise ValueError(msg)
        if not self.version:
            msg = "Package version cannot be empty"
            raise ValueError(msg)
        if not self.url:
            msg = "Package url cannot be empty"
            raise ValueError(msg)

    @property
    def source_reference(self) -> str:
        """Return the backend locator used to install this package."""
        return f"{VCS_SCHEME_PREFIX}{self.url}"


@dataclass(frozen=True, slots=True)
class InstalledPackage:
    """A package reported as installed by the install backend.

    Attributes:
        name: Installed package name.
        version: Installed version string.
    """

    name: str
    version: str

    def __post_init__(self) -> None:
        """Validate package data after initialization."""
        if not self.name:
            msg = "Package name cannot be empty"
            raise ValueError(msg)
