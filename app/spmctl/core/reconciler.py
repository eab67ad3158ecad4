"""Catalog reconciliation and operation sequencing.

The reconciler merges the remote catalog with the backend's installed set
and drives install/update requests. It owns the catalog store and a single
OperationState: at most one list/install/update operation is in flight at
a time, and requests made meanwhile are rejected rather than queued.

Manifest fetches are independent of that gate. They run as fire-and-forget
tasks and, once the catalog is replaced, start a reconciliation.

Every backend operation is handed to the OperationPoller; its completion
handler clears the in-flight state on every terminal path (success,
failure, timeout) so the reconciler never stays busy.
"""

import asyncio
import logging
from collections.abc import Callable
from functools import partial
from typing import Any

from spmctl.backends.base import InstallBackend
from spmctl.core.catalog import CatalogStore
from spmctl.core.config import SpmConfig
from spmctl.core.fetcher import ManifestFetcher
from spmctl.core.operation import Operation
from spmctl.core.poller import OperationPoller, WatchHandle
from spmctl.errors import (
    BackendError,
    ConcurrencyRejectedError,
    NetworkError,
    OperationTimeoutError,
    ParseError,
)
from spmctl.models.manifest import parse_manifest
from spmctl.models.operation import OperationKind, OperationState, PollResult
from spmctl.models.package import CatalogPackage, InstalledPackage

logger = logging.getLogger(__name__)

Listener = Callable[["Reconciler"], None]

LIST_MESSAGE = "Updating package statuses..."

# Progress verb, past participle and infinitive per add operation
_ADD_WORDING: dict[OperationKind, tuple[str, str, str]] = {
    OperationKind.INSTALL: ("Installing", "installed", "install"),
    OperationKind.UPDATE: ("Updating", "updated", "update"),
}


class Reconciler:
    """Keeps the catalog store in sync with the manifest and the backend.

    All methods must be called from the event loop thread that runs the
    poller. Listeners are invoked after every observable change (catalog
    replaced, operation started, operation finished) and serve as the
    view's repaint hook.

    Attributes:
        config: Static configuration (manifest URL, timeouts).
        last_results: Terminal result of the latest finished operation per kind.
    """

    def __init__(
        self,
        fetcher: ManifestFetcher,
        backend: InstallBackend,
        poller: OperationPoller,
        config: SpmConfig | None = None,
        catalog: CatalogStore | None = None,
    ) -> None:
        self.config = config or SpmConfig()
        self._fetcher = fetcher
        self._backend = backend
        self._poller = poller
        self._catalog = catalog if catalog is not None else CatalogStore()
        self._state = OperationState()
        self._watch: WatchHandle | None = None
        self._refresh_tasks: set[asyncio.Task[bool]] = set()
        self._listeners: list[Listener] = []
        self.last_results: dict[OperationKind, PollResult[Any]] = {}

    @property
    def catalog(self) -> CatalogStore:
        """Catalog store, read-only for everyone but the reconciler."""
        return self._catalog

    @property
    def backend(self) -> InstallBackend:
        """Backend that lists and installs packages."""
        return self._backend

    @property
    def poller(self) -> OperationPoller:
        """Poller that samples this reconciler's operations."""
        return self._poller

    @property
    def state(self) -> OperationState:
        """In-flight operation state."""
        return self._state

    @property
    def in_flight(self) -> bool:
        """Check if a list/install/update operation is running."""
        return self._state.in_flight

    @property
    def is_busy(self) -> bool:
        """Check if an operation or a manifest fetch is still pending."""
        return self._state.in_flight or bool(self._refresh_tasks)

    @property
    def timeout(self) -> float:
        """Timeout budget for each backend operation, in seconds."""
        return self.config.operation_timeout_seconds

    def add_listener(self, listener: Listener) -> None:
        """Register a callback invoked after every state change."""
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        """Unregister a previously added listener."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ------------------------------------------------------------------
    # Manifest refresh
    # ------------------------------------------------------------------

    def refresh_catalog(self) -> "asyncio.Task[bool]":
        """Start a manifest fetch in the background.

        Must be called while an event loop is running.

        Returns:
            Task resolving to True if the catalog was replaced.
        """
        task = asyncio.get_running_loop().create_task(self.fetch_catalog())
        self._refresh_tasks.add(task)
        task.add_done_callback(self._refresh_tasks.discard)
        return task

    async def fetch_catalog(self) -> bool:
        """Fetch the manifest, replace the catalog and reconcile it.

        On a network or parse failure the catalog is left untouched.

        Returns:
            True if the catalog was replaced, False otherwise.
        """
        url = self.config.manifest_url
        try:
            data = await self._fetcher.fetch(url)
            manifest = parse_manifest(data)
        except NetworkError as e:
            logger.error("Failed to fetch packages: %s", e)
            return False
        except ParseError as e:
            logger.error("Manifest parse error: %s", e)
            return False

        self._catalog.replace_all(manifest.to_catalog())
        logger.info("Fetched %d package(s) from %s", len(self._catalog), url)
        self._notify()

        self.reconcile_installed_status()
        return True

    # ------------------------------------------------------------------
    # Backend operations
    # ------------------------------------------------------------------

    def reconcile_installed_status(self) -> bool:
        """Start listing installed packages and re-derive every status.

        Returns:
            True if the list operation was started, False if rejected.
        """
        if not self._begin(OperationKind.LIST, LIST_MESSAGE):
            return False
        return self._start(OperationKind.LIST, self._backend.list_installed, self._on_listed)

    def install_package(self, package: CatalogPackage) -> bool:
        """Start installing a catalog package.

        Returns:
            True if the install was started, False if rejected.
        """
        return self._add(package, OperationKind.INSTALL)

    def update_package(self, package: CatalogPackage) -> bool:
        """Start updating a catalog package.

        Returns:
            True if the update was started, False if rejected.
        """
        return self._add(package, OperationKind.UPDATE)

    def request_refresh(self) -> "asyncio.Task[bool]":
        """View command: refresh the catalog."""
        return self.refresh_catalog()

    def request_install(self, name: str) -> bool:
        """View command: install the package with the given name."""
        package = self._lookup(name)
        return package is not None and self.install_package(package)

    def request_update(self, name: str) -> bool:
        """View command: update the package with the given name."""
        package = self._lookup(name)
        return package is not None and self.update_package(package)

    async def wait_until_idle(self, poll_interval: float = 0.05) -> None:
        """Wait until no operation or manifest fetch is pending.

        The poller must be running (see OperationPoller.run) for in-flight
        operations to finish.
        """
        while self.is_busy:
            await asyncio.sleep(poll_interval)

    def close(self) -> None:
        """Abandon pending work and clear the in-flight state."""
        for task in list(self._refresh_tasks):
            task.cancel()
        if self._watch is not None:
            self._watch.cancel()
            self._watch = None
        self._state.clear()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _lookup(self, name: str) -> CatalogPackage | None:
        package = self._catalog.find(name)
        if package is None:
            logger.error("Unknown package: %s", name)
        return package

    def _add(self, package: CatalogPackage, kind: OperationKind) -> bool:
        progress, _, _ = _ADD_WORDING[kind]
        if not self._begin(kind, f"{progress} {package.name}..."):
            return False
        return self._start(
            kind,
            partial(self._backend.add, package.source_reference),
            partial(self._on_added, package, kind),
        )

    def _begin(self, kind: OperationKind, message: str) -> bool:
        """Claim the single operation slot.

        Returns:
            True if the slot was free, False if the request was rejected.
        """
        try:
            self._check_idle()
        except ConcurrencyRejectedError as e:
            logger.warning("%s", e)
            return False
        self._state.begin(kind, message)
        return True

    def _check_idle(self) -> None:
        if self._state.in_flight:
            msg = f"Another operation is already in progress: {self._state.message}"
            raise ConcurrencyRejectedError(msg)

    def _start(
        self,
        kind: OperationKind,
        start_operation: Callable[[], Operation[Any]],
        handler: Callable[[PollResult[Any]], None],
    ) -> bool:
        """Start a backend operation and register it with the poller."""
        try:
            operation = start_operation()
        except BackendError as e:
            logger.error("Failed to start %s operation: %s", kind.value, e.message)
            self._abort_start()
            return False
        except Exception:
            logger.exception("Backend crashed while starting %s operation", kind.value)
            self._abort_start()
            return False

        self._watch = self._poller.watch(operation, self.timeout, handler)
        self._state.attach(operation, self._watch.started_at, self.timeout)
        self._notify()
        return True

    def _abort_start(self) -> None:
        self._state.clear()
        self._notify()

    def _on_listed(self, result: PollResult[list[InstalledPackage]]) -> None:
        try:
            installed = result.unwrap() or []
            self._catalog.apply_installed(installed)
            logger.info(
                "Reconciled %d package(s) against %d installed",
                len(self._catalog),
                len(installed),
            )
        except BackendError as e:
            logger.error("Failed to list installed packages: %s", e.message)
        except OperationTimeoutError as e:
            logger.warning("Listing installed packages timed out: %s", e)
        finally:
            self._finish(OperationKind.LIST, result)

    def _on_added(
        self,
        package: CatalogPackage,
        kind: OperationKind,
        result: PollResult[None],
    ) -> None:
        _, done, verb = _ADD_WORDING[kind]
        try:
            result.unwrap()
            logger.info("Successfully %s %s", done, package.name)
        except BackendError as e:
            logger.error("Failed to %s %s: %s", verb, package.name, e.message)
        except OperationTimeoutError as e:
            logger.warning("Could not %s %s: %s", verb, package.name, e)
        finally:
            self._finish(kind, result)

        # Resync manifest and install state whatever the outcome
        self.refresh_catalog()

    def _finish(self, kind: OperationKind, result: PollResult[Any]) -> None:
        self._watch = None
        self._state.clear()
        self.last_results[kind] = result
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Reconciler listener %r raised", listener)
