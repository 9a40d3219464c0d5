"""
Cancellation token for generation runs.

A run checks the token before every candidate attempt, caps each network
timeout by the remaining deadline, and waits on the token during the quota
backoff so that cancel() (or the deadline) interrupts the pause at once.
"""

import threading
import time
from typing import Optional

from .errors import GenerationCancelled


class CancellationToken:
    """Thread-safe cancel flag with an optional monotonic deadline."""

    def __init__(self, deadline_s: Optional[float] = None):
        self._event = threading.Event()
        self._deadline = time.monotonic() + deadline_s if deadline_s else None

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None without one."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def bound_timeout(self, timeout_s: float) -> float:
        remaining = self.remaining()
        if remaining is None:
            return timeout_s
        return min(timeout_s, remaining)

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise GenerationCancelled("generation cancelled")

    def wait(self, seconds: float) -> bool:
        """
        Block for up to `seconds`.

        Returns:
            True if the token was cancelled (or the deadline hit) while waiting
        """
        timeout = self.bound_timeout(seconds)
        if self._event.wait(timeout):
            return True
        # a wait shortened by the deadline ends at the deadline
        return self.cancelled or timeout < seconds
