"""Data models for spmctl.

This module exports the core data structures used throughout the application.
"""

from spmctl.models.manifest import ManifestEntry, PackageManifest, parse_manifest
from spmctl.models.operation import (
    OperationKind,
    OperationOutcome,
    OperationState,
    PollResult,
)
from spmctl.models.package import CatalogPackage, InstalledPackage, PackageStatus

__all__ = [
    "CatalogPackage",
    "InstalledPackage",
    "ManifestEntry",
    "OperationKind",
    "OperationOutcome",
    "OperationState",
    "PackageManifest",
    "PackageStatus",
    "PollResult",
    "parse_manifest",
]
