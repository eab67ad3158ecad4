"""Reconciler assembly and event-loop lifetime.

Provides the factory that wires a reconciler to its collaborators and the
context manager that keeps the poller ticking while a view works with it.
These are shared by the CLI commands.
"""

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator

from spmctl.backends.base import InstallBackend
from spmctl.backends.pip import PipBackend
from spmctl.core.config import SpmConfig
from spmctl.core.fetcher import ManifestFetcher
from spmctl.core.poller import OperationPoller
from spmctl.core.reconciler import Reconciler

logger = logging.getLogger(__name__)


def create_reconciler(
    config: SpmConfig,
    backend: InstallBackend | None = None,
    fetcher: ManifestFetcher | None = None,
) -> Reconciler:
    """Build a reconciler with its default collaborators.

    Args:
        config: Effective configuration.
        backend: Install backend. Defaults to pip for the running interpreter.
        fetcher: Manifest fetcher. Defaults to an httpx-based fetcher.

    Returns:
        A new, empty Reconciler.
    """
    return Reconciler(
        fetcher=fetcher or ManifestFetcher(timeout=config.http_timeout_seconds),
        backend=backend or PipBackend(),
        poller=OperationPoller(),
        config=config,
    )


@contextlib.asynccontextmanager
async def running(reconciler: Reconciler) -> AsyncIterator[Reconciler]:
    """Tick the poller in the background for the duration of the block.

    On exit the ticker is stopped and any pending work of the reconciler
    is abandoned.

    Args:
        reconciler: Reconciler to operate.
    """
    ticker = asyncio.create_task(reconciler.poller.run(reconciler.config.poll_interval_seconds))
    try:
        yield reconciler
    finally:
        reconciler.close()
        ticker.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await ticker
