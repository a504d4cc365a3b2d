"""Read-only reports derived from limiter state."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from .counter import LimiterConfig, WindowCounter


@dataclass(slots=True, frozen=True)
class RateLimitStatus:
    """Advisory status of one signature at a point in time.

    The status is computed from the stored counter only. A counter whose
    cooldown has elapsed keeps its saturated ``count`` until the next
    occurrence reopens the window, so ``count`` may exceed what a fresh
    decision would report while ``is_rate_limited`` is already ``False``.
    """

    is_rate_limited: bool
    count: int
    time_until_reset: float
    time_until_cooldown_end: float

    @classmethod
    def unknown(cls) -> "RateLimitStatus":
        return cls(is_rate_limited=False, count=0, time_until_reset=0, time_until_cooldown_end=0)

    @classmethod
    def from_counter(cls, counter: WindowCounter | None, config: LimiterConfig, now: float) -> "RateLimitStatus":
        """Compute the status of ``counter`` at ``now`` without touching it."""

        if counter is None:
            return cls.unknown()
        time_until_reset = max(0, config.window_ms - (now - counter.window_start))
        saturated = counter.is_saturated(config)
        time_until_cooldown_end = max(0, config.cooldown_ms - (now - counter.last_seen)) if saturated else 0
        return cls(
            is_rate_limited=saturated and time_until_cooldown_end > 0,
            count=counter.count,
            time_until_reset=time_until_reset,
            time_until_cooldown_end=time_until_cooldown_end,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_rate_limited": self.is_rate_limited,
            "count": self.count,
            "time_until_reset": self.time_until_reset,
            "time_until_cooldown_end": self.time_until_cooldown_end,
        }


@dataclass(slots=True, frozen=True)
class LimiterStats:
    """Aggregate view over every counter of a limiter.

    Attributes
    ----------
    total_unique_signatures:
        Number of signatures currently tracked.
    active_signatures:
        Signatures seen within the last ``window_ms``.
    rate_limited_signatures:
        Saturated signatures still inside their cooldown.
    total_occurrences:
        Sum of the stored counts.
    config:
        Configuration the numbers were computed against.
    """

    total_unique_signatures: int
    active_signatures: int
    rate_limited_signatures: int
    total_occurrences: int
    config: LimiterConfig

    @classmethod
    def collect(cls, counters: Iterable[WindowCounter], config: LimiterConfig, now: float) -> "LimiterStats":
        unique = active = limited = occurrences = 0
        for counter in counters:
            unique += 1
            occurrences += counter.count
            idle = now - counter.last_seen
            if idle < config.window_ms:
                active += 1
            if counter.is_saturated(config) and idle < config.cooldown_ms:
                limited += 1
        return cls(
            total_unique_signatures=unique,
            active_signatures=active,
            rate_limited_signatures=limited,
            total_occurrences=occurrences,
            config=config,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_unique_signatures": self.total_unique_signatures,
            "active_signatures": self.active_signatures,
            "rate_limited_signatures": self.rate_limited_signatures,
            "total_occurrences": self.total_occurrences,
            "config": self.config.to_dict(),
        }


__all__ = ["LimiterStats", "RateLimitStatus"]
