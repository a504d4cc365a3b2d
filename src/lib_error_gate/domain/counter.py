"""Per-signature counters and limiter configuration.

Purpose
-------
Hold the two value objects the admission policy reasons about: the
immutable :class:`LimiterConfig` of a limiter and the :class:`WindowCounter`
tracking one signature inside it.

Contents
--------
* :class:`LimiterConfig` – ceiling, counting window, and cooldown (ms).
* :class:`WindowCounter` – window start, count, and last-seen time (ms).

System Role
-----------
Domain layer; adapters store counters and swap them for the copies returned by
:func:`lib_error_gate.domain.policy.decide`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any


@dataclass(slots=True, frozen=True)
class LimiterConfig:
    """Immutable tuning of a single limiter.

    Attributes
    ----------
    max_occurrences:
        Ceiling of admitted occurrences per window before suppression begins.
    window_ms:
        Rolling period over which occurrences are counted.
    cooldown_ms:
        Minimum quiet time after hitting the ceiling before counting resumes,
        measured from the most recent occurrence.
    """

    max_occurrences: int
    window_ms: float
    cooldown_ms: float

    def __post_init__(self) -> None:
        if isinstance(self.max_occurrences, bool) or not isinstance(self.max_occurrences, int):
            raise ValueError("max_occurrences must be an integer")
        if self.max_occurrences <= 0:
            raise ValueError("max_occurrences must be positive")
        if self.window_ms <= 0:
            raise ValueError("window_ms must be positive")
        if self.cooldown_ms <= 0:
            raise ValueError("cooldown_ms must be positive")

    @property
    def retention_ms(self) -> float:
        """Idle time after which a counter can be swept."""

        return self.window_ms + self.cooldown_ms

    def replace(self, **changes: Any) -> "LimiterConfig":
        """Return a validated copy with ``changes`` applied."""

        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "max_occurrences": self.max_occurrences,
            "window_ms": self.window_ms,
            "cooldown_ms": self.cooldown_ms,
        }


@dataclass(slots=True, frozen=True)
class WindowCounter:
    """Occurrence bookkeeping for one signature within one limiter."""

    signature: str
    window_start: float
    count: int
    last_seen: float

    def __post_init__(self) -> None:
        if self.count < 1:
            raise ValueError("count must be at least 1")
        if self.last_seen < self.window_start:
            raise ValueError("last_seen must not precede window_start")

    @classmethod
    def open(cls, signature: str, now: float) -> "WindowCounter":
        """Return a fresh window holding a single occurrence at ``now``."""

        return cls(signature=signature, window_start=now, count=1, last_seen=now)

    def is_saturated(self, config: LimiterConfig) -> bool:
        return self.count >= config.max_occurrences


__all__ = ["LimiterConfig", "WindowCounter"]
