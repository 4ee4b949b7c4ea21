"""Cancellation and deadline handle passed along with a request."""

from __future__ import annotations

import threading
import time

from .errors import DeadlineExceededError, KeycloakError, RequestCancelledError


class RequestContext:
    """Caller-owned cancellation handle.

    A context is done once ``cancel()`` was called or its deadline passed.
    ``cancel()`` may be called from any thread.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self._cancelled = threading.Event()
        self._timeout = timeout
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    @classmethod
    def background(cls) -> RequestContext:
        """Context that is never done on its own."""
        return cls()

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def deadline(self) -> float | None:
        """Deadline on the ``time.monotonic()`` clock."""
        return self._deadline

    def remaining(self) -> float | None:
        """Seconds until the deadline, ``None`` without one."""
        if self._deadline is None:
            return None
        return max(self._deadline - time.monotonic(), 0.0)

    def done(self) -> bool:
        if self._cancelled.is_set():
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    def error(self) -> KeycloakError | None:
        """Reason the context is done, ``None`` while it is still live."""
        if self._cancelled.is_set():
            return RequestCancelledError()
        if self._deadline is not None and time.monotonic() >= self._deadline:
            return DeadlineExceededError(timeout_seconds=self._timeout)
        return None
