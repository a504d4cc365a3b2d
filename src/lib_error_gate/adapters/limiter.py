"""Per-signature error rate limiter.

Purpose
-------
Own the signature → :class:`WindowCounter` map of one category, run the
admission policy against it, and keep it bounded through sweeps.

Contents
--------
* :class:`ErrorRateLimiter` – concrete limiter used by the registry.

System Role
-----------
Adapter around the pure domain policy. A single lock guards every
read-modify-write of a counter and the sweep, so the background sweeper can
never drop a counter another thread is updating, and concurrent callers can
never let more than ``max_occurrences`` through.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from typing import Any

from lib_error_gate.application.ports.time import ClockPort
from lib_error_gate.domain.counter import LimiterConfig, WindowCounter
from lib_error_gate.domain.policy import decide
from lib_error_gate.domain.reports import LimiterStats, RateLimitStatus
from lib_error_gate.domain.signature import derive_signature

from .clock import SystemClock

LOGGER = logging.getLogger(__name__)


class ErrorRateLimiter:
    """Limit occurrences per signature within a window, with cooldown.

    Examples
    --------
    >>> from lib_error_gate.adapters.clock import ManualClock
    >>> clock = ManualClock()
    >>> limiter = ErrorRateLimiter(LimiterConfig(max_occurrences=2, window_ms=1000, cooldown_ms=5000), clock=clock)
    >>> [limiter.should_log("boom") for _ in range(3)]
    [True, True, False]
    >>> limiter.get_status("boom").is_rate_limited
    True
    """

    def __init__(self, config: LimiterConfig, *, clock: ClockPort | None = None, name: str = "limiter") -> None:
        self._config = config
        self._clock: ClockPort = clock if clock is not None else SystemClock()
        self._name = name
        self._counters: dict[str, WindowCounter] = {}
        self._lock = threading.Lock()

    @property
    def config(self) -> LimiterConfig:
        return self._config

    @property
    def name(self) -> str:
        return self._name

    def __len__(self) -> int:
        with self._lock:
            return len(self._counters)

    def signature_for(self, error: Any, context: Mapping[str, Any] | None = None) -> str:
        """Return the signature this limiter files ``error`` under."""

        return derive_signature(error, context)

    def should_log(self, error: Any, context: Mapping[str, Any] | None = None) -> bool:
        """Record one occurrence and return whether it should be forwarded."""

        signature = derive_signature(error, context)
        with self._lock:
            now = self._clock.now_ms()
            decision = decide(self._counters.get(signature), self._config, now, signature=signature)
            self._counters[signature] = decision.counter
        if not decision.admit:
            LOGGER.debug(
                "Suppressed occurrence %s in %s (count=%d)",
                signature,
                self._name,
                decision.counter.count,
            )
        return decision.admit

    def get_status(self, error: Any, context: Mapping[str, Any] | None = None) -> RateLimitStatus:
        """Return the advisory status for ``error`` without recording it."""

        signature = derive_signature(error, context)
        with self._lock:
            counter = self._counters.get(signature)
            now = self._clock.now_ms()
        return RateLimitStatus.from_counter(counter, self._config, now)

    def get_stats(self) -> LimiterStats:
        with self._lock:
            counters = list(self._counters.values())
            now = self._clock.now_ms()
        return LimiterStats.collect(counters, self._config, now)

    def sweep(self, now: float | None = None) -> int:
        """Drop counters idle for longer than ``window_ms + cooldown_ms``.

        Returns the number of removed signatures.
        """

        with self._lock:
            current = self._clock.now_ms() if now is None else now
            cutoff = current - self._config.retention_ms
            stale = [signature for signature, counter in self._counters.items() if counter.last_seen < cutoff]
            for signature in stale:
                del self._counters[signature]
        if stale:
            LOGGER.debug("Swept %d stale signatures from %s", len(stale), self._name)
        return len(stale)

    def reset_signature(self, error: Any, context: Mapping[str, Any] | None = None) -> bool:
        """Forget the counter of ``error``; return ``True`` when one existed."""

        signature = derive_signature(error, context)
        with self._lock:
            return self._counters.pop(signature, None) is not None

    def reset_all(self) -> None:
        with self._lock:
            self._counters.clear()

    def update_config(self, **changes: Any) -> LimiterConfig:
        """Swap in a copy of the configuration with ``changes`` applied.

        Existing counters are kept and judged against the new values from the
        next occurrence on.
        """

        with self._lock:
            self._config = self._config.replace(**changes)
            return self._config


__all__ = ["ErrorRateLimiter"]
