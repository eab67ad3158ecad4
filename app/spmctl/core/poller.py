"""Tick-driven completion polling for asynchronous operations.

The poller is the only place where the completion of backend operations is
observed. Each tick samples every watched operation once; an operation's
callback fires exactly once, either when the operation reports completion
or when its timeout has elapsed, whichever is seen first.

Typical use:

    poller = OperationPoller()
    poller.watch(operation, timeout=60.0, callback=on_done)
    ticker = asyncio.create_task(poller.run(interval=0.1))
"""

import asyncio
import logging
import time
from collections.abc import Callable
from typing import Any

from spmctl.core.operation import Operation
from spmctl.models.operation import OperationOutcome, PollResult

logger = logging.getLogger(__name__)

CompletionCallback = Callable[[PollResult[Any]], None]


class WatchHandle:
    """Registration of one operation with the poller.

    Attributes:
        operation: The operation being sampled.
        timeout: Seconds allowed before the watch times out.
        started_at: Clock value at registration.
    """

    def __init__(
        self,
        poller: "OperationPoller",
        operation: Operation[Any],
        timeout: float,
        callback: CompletionCallback,
        started_at: float,
    ) -> None:
        self._poller = poller
        self.operation = operation
        self.timeout = timeout
        self.callback = callback
        self.started_at = started_at
        self.fired = False
        self.cancelled = False

    @property
    def deadline(self) -> float:
        """Clock value after which the watch times out."""
        return self.started_at + self.timeout

    @property
    def active(self) -> bool:
        """Check if the watch can still fire."""
        return not (self.fired or self.cancelled)

    def cancel(self) -> None:
        """Stop watching without firing the callback."""
        if self.active:
            self.cancelled = True
            self._poller._unsubscribe(self)


class OperationPoller:
    """Samples watched operations on every tick and fires their callbacks.

    The poller is not thread-safe; tick() must run on the event loop thread
    that owns the callers' state.

    Attributes:
        clock: Monotonic clock used for timeouts.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self.clock = clock
        self._watches: list[WatchHandle] = []

    @property
    def pending(self) -> int:
        """Number of operations still being watched."""
        return len(self._watches)

    def watch(
        self,
        operation: Operation[Any],
        timeout: float,
        callback: CompletionCallback,
    ) -> WatchHandle:
        """Register an operation for polling.

        Args:
            operation: Operation handle to sample.
            timeout: Seconds to wait before firing a TIMED_OUT result.
            callback: Called exactly once with the terminal PollResult.

        Returns:
            WatchHandle that can cancel the registration.

        Raises:
            ValueError: If timeout is not positive.
        """
        if timeout <= 0:
            msg = f"Timeout must be positive, got {timeout}"
            raise ValueError(msg)

        handle = WatchHandle(self, operation, timeout, callback, self.clock())
        self._watches.append(handle)
        logger.debug("Watching %r with %.1fs timeout", operation, timeout)
        return handle

    def tick(self) -> int:
        """Sample every watched operation once.

        Returns:
            Number of callbacks fired during this tick.
        """
        if not self._watches:
            return 0

        now = self.clock()
        fired = 0

        # Callbacks may register new watches; those are sampled next tick.
        for handle in list(self._watches):
            if not handle.active:
                continue

            result = self._sample(handle, now)
            if result is None:
                continue

            handle.fired = True
            self._unsubscribe(handle)
            fired += 1

            try:
                handle.callback(result)
            except Exception:
                logger.exception("Completion callback for %r raised", handle.operation)

        return fired

    async def run(self, interval: float = 0.1) -> None:
        """Drive tick() once per interval until cancelled.

        Args:
            interval: Seconds between ticks.
        """
        logger.debug("Poller started with %.3fs interval", interval)
        try:
            while True:
                self.tick()
                await asyncio.sleep(interval)
        finally:
            logger.debug("Poller stopped with %d pending watch(es)", self.pending)

    def _sample(self, handle: WatchHandle, now: float) -> PollResult[Any] | None:
        """Return the terminal result for a watch, or None if still pending."""
        operation = handle.operation
        elapsed = now - handle.started_at

        if operation.is_completed:
            if operation.succeeded:
                return PollResult(
                    outcome=OperationOutcome.SUCCEEDED,
                    value=operation.result,
                    elapsed=elapsed,
                )
            return PollResult(
                outcome=OperationOutcome.FAILED,
                error=operation.error,
                elapsed=elapsed,
            )

        if elapsed > handle.timeout:
            return PollResult(outcome=OperationOutcome.TIMED_OUT, elapsed=elapsed)

        return None

    def _unsubscribe(self, handle: WatchHandle) -> None:
        if handle in self._watches:
            self._watches.remove(handle)
