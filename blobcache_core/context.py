"""BlobCache Context - Cancellation and Deadlines.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import threading
import time
from typing import Optional

from blobcache_core.errors import DeadlineExceededError, OperationCancelledError


class Context:
    """Cancellation token with an optional deadline.

    A context is shared between the caller and the backend. The caller
    cancels it (or lets the deadline pass); the backend checks it before
    starting work and between chunks of I/O.

    Example:
        ctx = Context.with_timeout(5.0)
        entry = cacher.get("mod/@v/list", ctx=ctx)

        # From another thread
        ctx.cancel()
    """

    def __init__(self, deadline: Optional[float] = None):
        """Initialize context.

        Args:
            deadline: Absolute deadline on the ``time.monotonic`` clock
        """
        self._deadline = deadline
        self._cancel_event = threading.Event()

    @classmethod
    def with_timeout(cls, seconds: float) -> "Context":
        """Create a context that expires after ``seconds``."""
        return cls(deadline=time.monotonic() + seconds)

    @property
    def deadline(self) -> Optional[float]:
        """Monotonic deadline, or None."""
        return self._deadline

    @property
    def cancelled(self) -> bool:
        """Check if the context was cancelled explicitly."""
        return self._cancel_event.is_set()

    @property
    def expired(self) -> bool:
        """Check if the deadline has passed."""
        return self._deadline is not None and time.monotonic() >= self._deadline

    @property
    def done(self) -> bool:
        """Check if work under this context should stop."""
        return self.cancelled or self.expired

    def cancel(self) -> None:
        """Cancel the context. Safe to call more than once."""
        self._cancel_event.set()

    def remaining(self) -> Optional[float]:
        """Get seconds left before the deadline, or None if unbounded."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until cancelled, the deadline passes, or ``timeout`` elapses.

        Returns:
            True if the context is done
        """
        end = None if timeout is None else time.monotonic() + timeout
        while not self.done:
            limits = []
            if self._deadline is not None:
                limits.append(self._deadline - time.monotonic())
            if end is not None:
                limits.append(end - time.monotonic())
            wait_for = min(limits) if limits else None
            if wait_for is not None and wait_for <= 0:
                break
            self._cancel_event.wait(wait_for)
        return self.done

    def err(self) -> Optional[OperationCancelledError]:
        """Get the error describing why the context is done, or None."""
        if self.cancelled:
            return OperationCancelledError("context cancelled")
        if self.expired:
            return DeadlineExceededError("context deadline exceeded")
        return None

    def raise_if_done(self, name: Optional[str] = None) -> None:
        """Raise the context error if the context is done.

        Args:
            name: Cache name to attach to the error

        Raises:
            OperationCancelledError: If cancelled
            DeadlineExceededError: If the deadline passed
        """
        error = self.err()
        if error is not None:
            error.name = name
            raise error

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "expired" if self.expired else "active"
        return f"Context(state={state}, remaining={self.remaining()})"


def background() -> Context:
    """Get a context that is never cancelled and has no deadline."""
    return Context()


__all__ = ["Context", "background"]
