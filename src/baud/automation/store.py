"""
Shared automation state.

Scripts run on the automation worker thread while the session loop polls
for queued responses, so every access goes through a lock or a
thread-safe queue.
"""

from __future__ import annotations

import queue
import threading
from typing import Any

from baud.logging import get_logger

logger = get_logger(__name__)


class StateStore:
    """Key/value state plus a FIFO of auto-responses."""

    def __init__(self) -> None:
        self._state: dict[str, Any] = {}
        self._lock = threading.Lock()
        self._responses: queue.SimpleQueue[str] = queue.SimpleQueue()

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._state[key] = value
        logger.debug(f"Set state: {key!r} = {value!r}")

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._state.get(key, default)

    def snapshot(self) -> dict[str, Any]:
        """Copy of all state variables."""
        with self._lock:
            return dict(self._state)

    def queue_response(self, text: str | None) -> None:
        """Queue text to be sent to the remote as if typed. Empty text is ignored."""
        if not text:
            return
        self._responses.put(text)
        logger.debug(f"Queued auto-response: {text!r}")

    def poll_response(self) -> str | None:
        """Next queued auto-response, or None without blocking."""
        try:
            return self._responses.get_nowait()
        except queue.Empty:
            return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._state)


__all__ = ["StateStore"]
