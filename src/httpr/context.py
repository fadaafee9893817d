"""Cancellation token threaded from the caller to the transport."""

from __future__ import annotations

import threading
from time import monotonic

from .errors import RequestCancelledError


class CancelToken:
    """Cooperative cancellation signal with an optional deadline.

    A token can be shared by several calls. Cancelling it, or letting its
    deadline pass, makes every call that has not yet reached the transport
    fail with ``RequestCancelledError``.
    """

    def __init__(self, *, timeout: float | None = None) -> None:
        if timeout is not None and timeout <= 0:
            raise ValueError("timeout must be > 0 when provided")
        self._event = threading.Event()
        self._deadline = monotonic() + timeout if timeout is not None else None

    @classmethod
    def background(cls) -> CancelToken:
        """Return a token that is never cancelled and has no deadline."""
        return cls()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._deadline is not None and monotonic() >= self._deadline

    def remaining(self) -> float | None:
        """Seconds until the deadline, or None when there is no deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - monotonic())

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise RequestCancelledError("request cancelled")
        if self._deadline is not None and monotonic() >= self._deadline:
            raise RequestCancelledError("request deadline exceeded")
