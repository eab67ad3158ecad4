"""Manifest models for the remote package catalog.

This module defines the Pydantic models describing the JSON document
served at the configured manifest URL:

    {"packages": [{"name": "...", "version": "...", "url": "..."}]}
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from spmctl.errors import ParseError
from spmctl.models.package import CatalogPackage


class ManifestEntry(BaseModel):
    """Entry for a single package in the manifest.

    Attributes:
        name: Package name (catalog key).
        version: Version string the catalog advertises.
        url: Repository URL the package is fetched from.
    """

    model_config = ConfigDict(extra="ignore")

    name: Annotated[str, Field(min_length=1, description="Package name")]
    version: Annotated[str, Field(min_length=1, description="Advertised version")]
    url: Annotated[str, Field(min_length=1, description="Repository URL")]


class PackageManifest(BaseModel):
    """Complete remote package manifest.

    Attributes:
        packages: Package entries in display order.
    """

    model_config = ConfigDict(extra="ignore")

    packages: Annotated[list[ManifestEntry], Field(description="Available packages")]

    @model_validator(mode="after")
    def validate_unique_names(self) -> "PackageManifest":
        """Validate that no package name appears twice."""
        seen: set[str] = set()
        duplicates: set[str] = set()
        for entry in self.packages:
            if entry.name in seen:
                duplicates.add(entry.name)
            seen.add(entry.name)
        if duplicates:
            msg = f"Duplicate package names in manifest: {sorted(duplicates)}"
            raise ValueError(msg)
        return self

    def to_catalog(self) -> list[CatalogPackage]:
        """Build fresh catalog packages, all with UNKNOWN status.

        Returns:
            List of CatalogPackage in manifest order.
        """
        return [
            CatalogPackage(name=entry.name, version=entry.version, url=entry.url)
            for entry in self.packages
        ]


def parse_manifest(data: bytes | str) -> PackageManifest:
    """Parse a raw manifest body.

    Args:
        data: JSON document as received from the manifest URL.

    Returns:
        Validated PackageManifest.

    Raises:
        ParseError: If the body is not valid JSON or violates the schema.
    """
    try:
        return PackageManifest.model_validate_json(data)
    except ValidationError as e:
        raise ParseError(f"Invalid package manifest: {e}") from e
