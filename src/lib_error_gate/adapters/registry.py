"""Registry of named limiters routed by error category.

Purpose
-------
Hold one independently tuned :class:`ErrorRateLimiter` per category and route
each occurrence to the right one, falling back to the default category for
unknown names.

Contents
--------
* :class:`LimiterRegistry` – implementation of :class:`AdmissionPort`.

System Role
-----------
The object telemetry wrappers hold. Its category set is fixed at construction;
limiters may be reset or retuned individually but never replaced.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from lib_error_gate.application.ports.rate_limiter import AdmissionPort
from lib_error_gate.application.ports.time import ClockPort
from lib_error_gate.domain.categories import DEFAULT_CATEGORY, DEFAULT_LIMITS, ErrorCategory, category_name
from lib_error_gate.domain.counter import LimiterConfig
from lib_error_gate.domain.reports import LimiterStats, RateLimitStatus

from .clock import SystemClock
from .limiter import ErrorRateLimiter

LOGGER = logging.getLogger(__name__)

CategoryLike = str | ErrorCategory | None


class LimiterRegistry(AdmissionPort):
    """Route occurrences to per-category limiters.

    Parameters
    ----------
    limits:
        Mapping of category name to :class:`LimiterConfig`; defaults to
        :data:`~lib_error_gate.domain.categories.DEFAULT_LIMITS`.
    clock:
        Shared time source for every limiter.
    default_category:
        Category used when callers pass ``None`` or an unknown name.

    Examples
    --------
    >>> registry = LimiterRegistry()
    >>> registry.log_error("boom", {"component": "cart"}, "network")
    True
    >>> sorted(registry.categories)
    ['api', 'general', 'network', 'validation']
    """

    def __init__(
        self,
        limits: Mapping[str | ErrorCategory, LimiterConfig] | None = None,
        *,
        clock: ClockPort | None = None,
        default_category: str | ErrorCategory = DEFAULT_CATEGORY,
    ) -> None:
        source = DEFAULT_LIMITS if limits is None else limits
        if not source:
            raise ValueError("limits must define at least one category")
        self._clock: ClockPort = clock if clock is not None else SystemClock()
        limiters: dict[str, ErrorRateLimiter] = {}
        for key, config in source.items():
            name = category_name(key)
            if not name:
                raise ValueError("category names must not be empty")
            limiters[name] = ErrorRateLimiter(config, clock=self._clock, name=name)
        default = category_name(default_category)
        if default not in limiters:
            raise ValueError(f"default category {default!r} is not configured")
        self._limiters: Mapping[str, ErrorRateLimiter] = MappingProxyType(limiters)
        self._default_category = default

    @property
    def categories(self) -> tuple[str, ...]:
        return tuple(self._limiters)

    @property
    def default_category(self) -> str:
        return self._default_category

    @property
    def clock(self) -> ClockPort:
        return self._clock

    def limiter(self, category: CategoryLike = None) -> ErrorRateLimiter:
        """Return the limiter serving ``category`` (default when unknown)."""

        name = category_name(category)
        if name is not None and name in self._limiters:
            return self._limiters[name]
        if name is not None:
            LOGGER.debug("Unknown error category %r; routing to %r", name, self._default_category)
        return self._limiters[self._default_category]

    def log_error(
        self,
        error: Any,
        context: Mapping[str, Any] | None = None,
        category: CategoryLike = None,
    ) -> bool:
        """Return ``True`` when the occurrence should be forwarded."""

        return self.limiter(category).should_log(error, context)

    should_log = log_error

    def get_status(
        self,
        error: Any,
        context: Mapping[str, Any] | None = None,
        category: CategoryLike = None,
    ) -> RateLimitStatus:
        return self.limiter(category).get_status(error, context)

    def get_all_stats(self) -> dict[str, LimiterStats]:
        return {name: limiter.get_stats() for name, limiter in self._limiters.items()}

    def reset(self, category: CategoryLike = None) -> None:
        """Reset one category (unknown names reset the default) or all."""

        if category is None:
            for limiter in self._limiters.values():
                limiter.reset_all()
            return
        self.limiter(category).reset_all()

    def reset_signature(
        self,
        error: Any,
        context: Mapping[str, Any] | None = None,
        category: CategoryLike = None,
    ) -> bool:
        return self.limiter(category).reset_signature(error, context)

    def sweep(self, now: float | None = None) -> dict[str, int]:
        """Sweep every limiter and return removed counts keyed by category."""

        current = self._clock.now_ms() if now is None else now
        return {name: limiter.sweep(current) for name, limiter in self._limiters.items()}

    def update_config(self, category: CategoryLike, **changes: Any) -> LimiterConfig:
        return self.limiter(category).update_config(**changes)


__all__ = ["CategoryLike", "LimiterRegistry"]
