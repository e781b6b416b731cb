"""
Cooperative cancellation for long-running loads.

A caller that abandons a load (for example when the selected variable
changes mid-fetch) cancels its token. The pipeline checks the token after
each request and discards late results; in-flight requests are not aborted.
"""

import threading


class LoadCancelled(Exception):
    """Raised inside the pipeline when a load was abandoned by its caller."""


class CancellationToken:
    """Thread-safe cancellation flag."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise LoadCancelled("Load cancelled by caller")
