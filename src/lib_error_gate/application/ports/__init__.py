"""Protocols the application layer depends on."""

from __future__ import annotations

from .rate_limiter import AdmissionPort
from .scrubber import ScrubberPort
from .telemetry import BreadcrumbPort, TelemetryTransportPort
from .time import ClockPort

__all__ = [
    "AdmissionPort",
    "BreadcrumbPort",
    "ClockPort",
    "ScrubberPort",
    "TelemetryTransportPort",
]
