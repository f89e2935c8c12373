"""
Receive context handed to subscription handlers.
"""

import threading
from typing import Any, Optional


class ReceiveContext:
    """
    Context for one streaming pull.

    Handlers get it as their first argument and can call cancel() to stop
    the receive loop. cancel() is thread safe and may also be called from
    outside the handler.
    """

    def __init__(self, subscription_path: str):
        self.subscription_path = subscription_path
        self._cancelled = threading.Event()
        self._lock = threading.Lock()
        self._future: Optional[Any] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def attach(self, future: Any) -> None:
        """Bind the streaming pull future. Cancels it at once if cancel() already ran."""
        with self._lock:
            self._future = future
            if self._cancelled.is_set():
                future.cancel()

    def cancel(self) -> None:
        """Stop the streaming pull."""
        with self._lock:
            if self._cancelled.is_set():
                return
            self._cancelled.set()
            if self._future is not None:
                self._future.cancel()
