"""Fixtures for CLI command tests.

Commands build their reconciler through spmctl.core.session; these
fixtures swap the pip backend and the HTTP fetcher for in-memory fakes.
"""

from collections.abc import Iterator
from unittest.mock import patch

import pytest
from spmctl.models.package import InstalledPackage

from tests.fakes import CliEnv, FakeBackend, FakeFetcher


@pytest.fixture
def cli_env(two_package_manifest: bytes) -> Iterator[CliEnv]:
    """Catalog A 1.0 / B 2.0 with only A 1.0 installed."""
    env = CliEnv(
        backend=FakeBackend([InstalledPackage(name="A", version="1.0")]),
        fetcher=FakeFetcher(two_package_manifest),
    )
    with (
        patch("spmctl.core.session.PipBackend", return_value=env.backend),
        patch("spmctl.core.session.ManifestFetcher", return_value=env.fetcher),
    ):
        yield env
