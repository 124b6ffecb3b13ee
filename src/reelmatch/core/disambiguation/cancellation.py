"""Cooperative cancellation token shared by a batch's workers."""

from __future__ import annotations

import threading

from reelmatch.shared.constants import EventChannelDefaults


class CancellationToken:
    """Thread-safe cancellation flag.

    Workers poll ``is_cancelled`` between items; a request already being
    resolved always runs to completion.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._reason: str | None = None
        self._lock = threading.Lock()

    def cancel(self, reason: str = EventChannelDefaults.CANCEL_REASON) -> None:
        """Signal cancellation. The first reason given is kept."""
        with self._lock:
            if self._reason is None:
                self._reason = reason
            self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        with self._lock:
            return self._reason

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled or the timeout expires.

        Returns:
            True if the token was cancelled
        """
        return self._event.wait(timeout)
