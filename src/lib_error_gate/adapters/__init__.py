"""Adapters implementing the application ports."""

from __future__ import annotations

from .clock import ManualClock, SystemClock
from .console import RichReportConsole
from .limiter import ErrorRateLimiter
from .log_filter import RateLimitedErrorFilter
from .registry import LimiterRegistry
from .scrubber import SensitiveDataScrubber
from .sweeper import PeriodicSweeper
from .transport import LoggingTransport

__all__ = [
    "ErrorRateLimiter",
    "LimiterRegistry",
    "LoggingTransport",
    "ManualClock",
    "PeriodicSweeper",
    "RateLimitedErrorFilter",
    "RichReportConsole",
    "SensitiveDataScrubber",
    "SystemClock",
]
