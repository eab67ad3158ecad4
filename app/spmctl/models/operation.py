"""Operation models for long-running backend requests.

This module defines the terminal outcome reported by the operation poller
and the in-flight state a reconciler keeps for its single active operation.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from spmctl.errors import BackendError, OperationTimeoutError

T = TypeVar("T")


class OperationOutcome(Enum):
    """Terminal state of a polled operation."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


class OperationKind(Enum):
    """Kind of backend operation a reconciler can have in flight."""

    LIST = "list"
    INSTALL = "install"
    UPDATE = "update"


@dataclass(frozen=True, slots=True)
class PollResult(Generic[T]):
    """Outcome delivered to a poller completion callback.

    Attributes:
        outcome: Terminal state that fired the callback.
        value: Operation result when the operation succeeded.
        error: Backend error message when the operation failed.
        elapsed: Seconds between registration and firing.
    """

    outcome: OperationOutcome
    value: T | None = None
    error: str | None = None
    elapsed: float = 0.0

    @property
    def succeeded(self) -> bool:
        """Check if the operation completed successfully."""
        return self.outcome == OperationOutcome.SUCCEEDED

    @property
    def failed(self) -> bool:
        """Check if the operation completed with an error."""
        return self.outcome == OperationOutcome.FAILED

    @property
    def timed_out(self) -> bool:
        """Check if the timeout elapsed before the operation completed."""
        return self.outcome == OperationOutcome.TIMED_OUT

    def unwrap(self) -> T | None:
        """Return the value of a successful operation.

        Raises:
            BackendError: If the operation failed.
            OperationTimeoutError: If the operation timed out.
        """
        if self.failed:
            raise BackendError(self.error or "unknown backend error")
        if self.timed_out:
            msg = f"Operation did not complete within {self.elapsed:.1f}s"
            raise OperationTimeoutError(msg)
        return self.value


@dataclass(slots=True)
class OperationState:
    """In-flight bookkeeping owned by a single reconciler.

    At most one operation is tracked at a time. The state is created by
    begin() and dropped by clear() once the poller reports a terminal outcome.

    Attributes:
        in_flight: Whether an operation is currently running.
        message: Human-readable progress message for the view.
        kind: Kind of the active operation.
        handle: Backend operation handle being polled.
        started_at: Monotonic timestamp when the operation was registered.
        deadline: Monotonic timestamp after which the operation times out.
    """

    in_flight: bool = False
    message: str = ""
    kind: OperationKind | None = None
    handle: Any = field(default=None, repr=False)
    started_at: float | None = None
    deadline: float | None = None

    def begin(self, kind: OperationKind, message: str) -> None:
        """Mark an operation of the given kind as in flight."""
        self.in_flight = True
        self.kind = kind
        self.message = message

    def attach(self, handle: Any, started_at: float, timeout: float) -> None:
        """Record the backend handle and timing of the active operation."""
        self.handle = handle
        self.started_at = started_at
        self.deadline = started_at + timeout

    def clear(self) -> None:
        """Drop all in-flight data."""
        self.in_flight = False
        self.message = ""
        self.kind = None
        self.handle = None
        self.started_at = None
        self.deadline = None

    def snapshot(self) -> dict[str, Any]:
        """Return a plain view of the state for presentation."""
        return {
            "in_flight": self.in_flight,
            "message": self.message,
            "kind": self.kind.value if self.kind else None,
        }
