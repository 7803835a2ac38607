"""
Time sources for the governance state machine.

Every operation reads the clock exactly once and uses that reading for all
of its time comparisons.
"""

import threading
import time
from abc import ABC, abstractmethod


class Clock(ABC):
    """Supplies the current time in seconds since the epoch."""

    @abstractmethod
    def now(self) -> float:
        ...


class SystemClock(Clock):
    """Wall-clock time."""

    def now(self) -> float:
        return time.time()

    def __repr__(self) -> str:
        return "<SystemClock>"


class ManualClock(Clock):
    """
    Clock that only moves when told to.

    Used by tests and simulations to fast-forward past voting deadlines.
    """

    def __init__(self, start: float = 1_700_000_000.0):
        self._now = float(start)
        self._lock = threading.Lock()

    def now(self) -> float:
        with self._lock:
            return self._now

    def advance(self, seconds: float) -> float:
        """Move forward by *seconds* and return the new time."""
        if seconds < 0:
            raise ValueError("Cannot move a clock backwards")
        with self._lock:
            self._now += seconds
            return self._now

    def set(self, timestamp: float):
        with self._lock:
            if timestamp < self._now:
                raise ValueError(
                    f"Cannot move a clock backwards ({timestamp} < {self._now})"
                )
            self._now = float(timestamp)

    def __repr__(self) -> str:
        return f"<ManualClock now={self._now}>"
