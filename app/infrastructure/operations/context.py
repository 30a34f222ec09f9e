"""Cancellation token with an optional deadline.

An OperationContext is handed to every blocking step of a dispatch (transport
sends, retry delays). Cancelling a context also cancels every child derived
from it, and a child never outlives its parent's deadline.

Usage:
    ctx = OperationContext.with_timeout(5.0)
    child = ctx.child(timeout=2.0)
    if child.wait(0.5):
        return OperationResult.cancelled()
"""

import threading
import time
from typing import Optional


class OperationContext:
    """Cooperative cancellation token carrying a monotonic deadline."""

    def __init__(
        self,
        deadline: Optional[float] = None,
        parent: Optional["OperationContext"] = None,
    ):
        self._event = threading.Event()
        self._parent = parent
        self._deadline = deadline
        if parent is not None and parent.deadline is not None:
            if deadline is None or parent.deadline < deadline:
                self._deadline = parent.deadline

    @classmethod
    def background(cls) -> "OperationContext":
        """Context that is never cancelled unless asked to and has no deadline."""
        return cls()

    @classmethod
    def with_timeout(cls, timeout: Optional[float]) -> "OperationContext":
        """Context whose deadline is ``timeout`` seconds from now."""
        if timeout is None:
            return cls()
        return cls(deadline=time.monotonic() + timeout)

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    @property
    def cancelled(self) -> bool:
        """True once this context or any ancestor has been cancelled."""
        if self._event.is_set():
            return True
        return self._parent is not None and self._parent.cancelled

    @property
    def expired(self) -> bool:
        """True once the deadline has passed."""
        return self._deadline is not None and time.monotonic() >= self._deadline

    @property
    def done(self) -> bool:
        return self.cancelled or self.expired

    def cancel(self) -> None:
        self._event.set()

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, ``None`` when there is no deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def child(self, timeout: Optional[float] = None) -> "OperationContext":
        """Derive a context cancelled with this one and bounded by ``timeout`` seconds."""
        deadline = None if timeout is None else time.monotonic() + timeout
        return OperationContext(deadline=deadline, parent=self)

    def wait(self, seconds: float, poll_interval: float = 0.05) -> bool:
        """Sleep up to ``seconds``, returning early when the context is done.

        Returns:
            True if the wait was interrupted by cancellation or the deadline.
        """
        end = time.monotonic() + max(0.0, seconds)
        while True:
            if self.done:
                return True
            left = end - time.monotonic()
            if left <= 0:
                return False
            remaining = self.remaining()
            if remaining is not None:
                left = min(left, remaining)
            # parent cancellation is only observed by polling
            self._event.wait(min(left, poll_interval))
