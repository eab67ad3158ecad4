"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from tests.fakes import FakeBackend, FakeClock, make_manifest


@pytest.fixture(autouse=True)
def isolated_config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point XDG_CONFIG_HOME at a temporary directory for every test."""
    config_home = tmp_path / "xdg-config"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.delenv("SPMCTL_MANIFEST_URL", raising=False)
    yield config_home


@pytest.fixture
def two_package_manifest() -> bytes:
    """Manifest with packages A 1.0 and B 2.0."""
    return make_manifest(
        ("A", "1.0", "https://example.com/a.git"),
        ("B", "2.0", "https://example.com/b.git"),
    )


@pytest.fixture
def fake_backend() -> FakeBackend:
    """Empty in-memory backend with auto-completing operations."""
    return FakeBackend()


@pytest.fixture
def fake_clock() -> FakeClock:
    """Manual clock starting at t=1000."""
    return FakeClock()


@pytest.fixture(autouse=True)
def reset_spmctl_logger() -> Iterator[None]:
    """Restore the spmctl logger after CLI runs reconfigure it."""
    logger = logging.getLogger("spmctl")
    level = logger.level
    handlers = list(logger.handlers)
    yield
    logger.setLevel(level)
    logger.handlers[:] = handlers
