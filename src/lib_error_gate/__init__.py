"""Public package surface for the error admission gate.

Hosts either compose the gate explicitly::

    registry = LimiterRegistry()
    if registry.log_error(exc, {"component": "checkout"}, "api"):
        telemetry.capture_exception(exc)

or let :func:`init` own a registry plus background sweeper and use the
façade helpers re-exported here.
"""

from __future__ import annotations

from .adapters import (
    ErrorRateLimiter,
    LimiterRegistry,
    LoggingTransport,
    ManualClock,
    PeriodicSweeper,
    RateLimitedErrorFilter,
    SensitiveDataScrubber,
    SystemClock,
)
from .domain import (
    Breadcrumb,
    BreadcrumbTrail,
    ErrorCategory,
    ErrorOccurrence,
    LimiterConfig,
    LimiterStats,
    RateLimitStatus,
    Severity,
    derive_signature,
)
from .runtime import (
    RuntimeSnapshot,
    get_all_stats,
    get_capture,
    get_registry,
    get_status,
    init,
    inspect_runtime,
    is_initialised,
    log_error,
    reset,
    shutdown,
    shutdown_async,
    summary_info,
)

__all__ = [
    "Breadcrumb",
    "BreadcrumbTrail",
    "ErrorCategory",
    "ErrorOccurrence",
    "ErrorRateLimiter",
    "LimiterConfig",
    "LimiterRegistry",
    "LimiterStats",
    "LoggingTransport",
    "ManualClock",
    "PeriodicSweeper",
    "RateLimitStatus",
    "RateLimitedErrorFilter",
    "RuntimeSnapshot",
    "SensitiveDataScrubber",
    "Severity",
    "SystemClock",
    "derive_signature",
    "get_all_stats",
    "get_capture",
    "get_registry",
    "get_status",
    "init",
    "inspect_runtime",
    "is_initialised",
    "log_error",
    "reset",
    "shutdown",
    "shutdown_async",
    "summary_info",
]
