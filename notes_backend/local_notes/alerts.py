"""
Alert queue for validation messages.

Holds the latest batch of messages and clears itself a fixed delay after the most
recent publish. There is at most one pending clear per queue: publishing again
cancels it and schedules a fresh one.
"""
import logging
import os
import threading
from typing import Callable, List, Optional, Sequence

logger = logging.getLogger(__name__)

DEFAULT_CLEAR_DELAY = 3.0


def _delay_from_env() -> float:
    raw = (os.getenv("NOTES_ALERT_DELAY_SECONDS") or "").strip()
    if not raw:
        return DEFAULT_CLEAR_DELAY
    try:
        delay = float(raw)
    except ValueError:
        delay = 0.0
    if not 0 < delay < float("inf"):
        logger.warning("Invalid NOTES_ALERT_DELAY_SECONDS=%r; using %s", raw, DEFAULT_CLEAR_DELAY)
        return DEFAULT_CLEAR_DELAY
    return delay


class AlertQueue:
    """
    Latest validation messages with a debounced auto-clear.

    ``timer_factory`` is called as ``timer_factory(delay, callback)`` and must return an
    object with ``start()`` and ``cancel()``, like ``threading.Timer``.
    """

    def __init__(self, delay: Optional[float] = None, timer_factory: Callable = threading.Timer):
        self.delay = _delay_from_env() if delay is None else delay
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._messages: List[str] = []
        self._timer = None
        # Bumped on every publish/clear so a superseded timer that already fired is ignored.
        self._generation = 0

    @property
    def messages(self) -> List[str]:
        with self._lock:
            return list(self._messages)

    def publish(self, messages: Sequence[str]) -> None:
        """Replace the displayed messages and restart the clear timer."""
        with self._lock:
            self._cancel_pending()
            self._messages = list(messages)
            if not self._messages:
                return
            generation = self._generation
            timer = self._timer_factory(self.delay, lambda: self._expire(generation))
            if hasattr(timer, "daemon"):
                timer.daemon = True
            self._timer = timer
            timer.start()
        logger.debug("Published %d alert(s); clearing in %ss", len(messages), self.delay)

    def clear(self) -> None:
        with self._lock:
            self._cancel_pending()
            self._messages = []

    def close(self) -> None:
        """Cancel any pending clear without touching the messages."""
        with self._lock:
            self._cancel_pending()

    def _cancel_pending(self) -> None:
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _expire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._messages = []
            self._timer = None
        logger.debug("Alerts auto-cleared")
