from __future__ import annotations

import threading
from typing import Optional

from ..schemas.events import StopReason


class CancellationToken:
    """
    Cooperative stop signal shared between a loop and its caller.

    The loop polls it; it never interrupts a call already in flight. The
    first reason given wins, so a timeout that fires after a user stop is
    still reported as a user stop.
    """

    def __init__(self):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._reason: Optional[StopReason] = None

    def cancel(self, reason: StopReason = StopReason.CANCELLED) -> None:
        with self._lock:
            if self._reason is None:
                self._reason = reason
            self._event.set()

    def is_set(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[StopReason]:
        return self._reason

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._event.wait(timeout)

    def start_timer(self, seconds: float) -> threading.Timer:
        """Fire ``cancel(TIMED_OUT)`` after ``seconds``. The caller owns the timer."""
        timer = threading.Timer(seconds, self.cancel, args=(StopReason.TIMED_OUT,))
        timer.daemon = True
        timer.start()
        return timer
