"""Clock adapters implementing :class:`ClockPort`."""

from __future__ import annotations

import threading
import time

from lib_error_gate.application.ports.time import ClockPort


class SystemClock(ClockPort):
    """Monotonic process clock in milliseconds.

    Monotonic time keeps windows and cooldowns stable across wall-clock
    adjustments; values are only meaningful relative to each other.
    """

    def now_ms(self) -> float:
        return time.monotonic() * 1000.0


class ManualClock(ClockPort):
    """Clock advanced explicitly; used for simulations and tests.

    Examples
    --------
    >>> clock = ManualClock(start_ms=100)
    >>> clock.advance(50)
    150.0
    >>> clock.now_ms()
    150.0
    """

    def __init__(self, *, start_ms: float = 0.0) -> None:
        self._now = float(start_ms)
        self._lock = threading.Lock()

    def now_ms(self) -> float:
        with self._lock:
            return self._now

    def advance(self, delta_ms: float) -> float:
        """Move the clock forward by ``delta_ms`` and return the new time."""

        if delta_ms < 0:
            raise ValueError("delta_ms must not be negative")
        with self._lock:
            self._now += delta_ms
            return self._now

    def set(self, now_ms: float) -> None:
        """Jump to ``now_ms``; going backwards is rejected."""

        with self._lock:
            if now_ms < self._now:
                raise ValueError("ManualClock cannot move backwards")
            self._now = float(now_ms)


__all__ = ["ManualClock", "SystemClock"]
