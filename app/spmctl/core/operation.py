"""Handles for long-running asynchronous operations.

An operation handle exposes the completion state of work running off the
scheduling thread. Callers never await it; the operation poller samples
it once per tick until it is complete.
"""

import asyncio
import contextlib
import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from spmctl.errors import BackendError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Operation(ABC, Generic[T]):
    """Abstract handle to an in-flight asynchronous operation.

    Example:
        >>> operation = backend.list_installed()
        >>> if operation.is_completed and operation.succeeded:
        ...     print(operation.result)
    """

    @property
    @abstractmethod
    def is_completed(self) -> bool:
        """Check if the operation reached a terminal state."""

    @property
    @abstractmethod
    def succeeded(self) -> bool:
        """Check if the operation completed without error.

        Returns False while the operation is still running.
        """

    @property
    @abstractmethod
    def result(self) -> T | None:
        """Return the operation result, or None unless it succeeded."""

    @property
    @abstractmethod
    def error(self) -> str | None:
        """Return the failure message, or None unless it failed."""


class TaskOperation(Operation[T]):
    """Operation backed by an asyncio future.

    Exceptions raised by the underlying work become the failure message;
    a cancelled future counts as a failure.
    """

    def __init__(self, future: "asyncio.Future[T]") -> None:
        self._future = future
        # Retrieve the exception even if nobody polls us any more (timeout),
        # so asyncio does not report it as never retrieved.
        future.add_done_callback(_consume_exception)

    @classmethod
    def start(cls, func: Callable[..., T], *args: Any) -> "TaskOperation[T]":
        """Run a blocking callable in a daemon worker thread.

        The thread never holds up interpreter or event loop shutdown: work
        that is still running when the loop closes is abandoned and its
        outcome discarded.

        Must be called from a running event loop.

        Args:
            func: Blocking function to execute.
            *args: Positional arguments passed to func.

        Returns:
            TaskOperation tracking the worker.
        """
        loop = asyncio.get_running_loop()
        future: asyncio.Future[T] = loop.create_future()

        def worker() -> None:
            try:
                outcome: Any = func(*args)
                failed = False
            except Exception as exc:
                outcome = exc
                failed = True
            # The loop is closed if the operation was abandoned
            with contextlib.suppress(RuntimeError):
                loop.call_soon_threadsafe(_settle, future, outcome, failed)

        name = f"spmctl-{getattr(func, '__name__', 'operation')}"
        threading.Thread(target=worker, daemon=True, name=name).start()
        return cls(future)

    @property
    def future(self) -> "asyncio.Future[T]":
        """Return the wrapped future."""
        return self._future

    @property
    def is_completed(self) -> bool:
        return self._future.done()

    @property
    def succeeded(self) -> bool:
        if not self._future.done() or self._future.cancelled():
            return False
        return self._future.exception() is None

    @property
    def result(self) -> T | None:
        if not self.succeeded:
            return None
        return self._future.result()

    @property
    def error(self) -> str | None:
        if not self._future.done():
            return None
        if self._future.cancelled():
            return "Operation was cancelled"
        exc = self._future.exception()
        if exc is None:
            return None
        if isinstance(exc, BackendError):
            return exc.message
        return str(exc) or type(exc).__name__


def _consume_exception(future: "asyncio.Future[Any]") -> None:
    """Mark a finished future's exception as retrieved."""
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.debug("Operation finished with error: %s", exc)


def _settle(future: "asyncio.Future[Any]", outcome: Any, failed: bool) -> None:
    """Resolve a worker's future on the loop thread unless it was cancelled."""
    if future.done():
        return
    if failed:
        future.set_exception(outcome)
    else:
        future.set_result(outcome)
