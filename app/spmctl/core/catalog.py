"""Catalog store holding the known packages and their statuses.

The store is a passive container: it is owned by one reconciler, which is
the only writer. Views get a read reference and iterate it for rendering.
"""

import logging
from collections import Counter
from collections.abc import Iterable, Iterator

from spmctl.models.package import CatalogPackage, InstalledPackage, PackageStatus

logger = logging.getLogger(__name__)


class CatalogStore:
    """Ordered collection of catalog packages keyed by name.

    Manifest order is preserved for display; the name index is used for
    lookups during reconciliation.
    """

    def __init__(self, packages: Iterable[CatalogPackage] | None = None) -> None:
        self._packages: list[CatalogPackage] = []
        self._index: dict[str, CatalogPackage] = {}
        if packages is not None:
            self.replace_all(packages)

    def __iter__(self) -> Iterator[CatalogPackage]:
        return iter(self._packages)

    def __len__(self) -> int:
        return len(self._packages)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def replace_all(self, packages: Iterable[CatalogPackage]) -> None:
        """Replace the whole catalog.

        Args:
            packages: New packages in display order.

        Raises:
            ValueError: If two packages share a name. The store is unchanged.
        """
        new_packages = list(packages)
        index: dict[str, CatalogPackage] = {}
        for package in new_packages:
            if package.name in index:
                msg = f"Duplicate package name in catalog: {package.name}"
                raise ValueError(msg)
            index[package.name] = package

        self._packages = new_packages
        self._index = index
        logger.debug("Catalog replaced with %d package(s)", len(new_packages))

    def find(self, name: str) -> CatalogPackage | None:
        """Find a package by name.

        Returns:
            The matching CatalogPackage, or None if the name is unknown.
        """
        return self._index.get(name)

    def names(self) -> list[str]:
        """Return package names in display order."""
        return [package.name for package in self._packages]

    def statuses(self) -> dict[str, PackageStatus]:
        """Return the current status of every package keyed by name."""
        return {package.name: package.status for package in self._packages}

    def count_by_status(self) -> dict[PackageStatus, int]:
        """Count packages per status."""
        counts = Counter(package.status for package in self._packages)
        return {status: counts.get(status, 0) for status in PackageStatus}

    def apply_installed(self, installed: Iterable[InstalledPackage]) -> None:
        """Derive every package status from the backend's installed set.

        Versions are compared by exact string equality: any difference,
        formatting included, makes an installed package OUTDATED. Catalog
        packages absent from the installed set become NOT_INSTALLED.

        Args:
            installed: Packages reported by the install backend.
        """
        installed_versions: dict[str, str] = {}
        for entry in installed:
            installed_versions[entry.name] = entry.version

        for package in self._packages:
            version = installed_versions.get(package.name)
            if version is None:
                package.status = PackageStatus.NOT_INSTALLED
            elif version == package.version:
                package.status = PackageStatus.UP_TO_DATE
            else:
                package.status = PackageStatus.OUTDATED
