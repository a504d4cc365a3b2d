"""Ports describing the telemetry SDK boundary.

Purpose
-------
Keep the transmitting SDK (Sentry or similar) outside the library: the capture
use case only talks to these protocols.

Contents
--------
* :class:`TelemetryTransportPort` – forwards admitted exceptions and messages.
* :class:`BreadcrumbPort` – records local traces of suppressed occurrences.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from lib_error_gate.domain.breadcrumbs import Breadcrumb
from lib_error_gate.domain.levels import Severity


@runtime_checkable
class TelemetryTransportPort(Protocol):
    """Hand admitted events to the telemetry backend."""

    def capture_exception(
        self,
        error: Any,
        *,
        level: Severity,
        tags: Mapping[str, str] | None = None,
        extra: Mapping[str, Any] | None = None,
        fingerprint: Sequence[str] | None = None,
    ) -> str | None:
        """Transmit ``error`` and return the backend event id when known."""

    def capture_message(
        self,
        message: str,
        *,
        level: Severity,
        tags: Mapping[str, str] | None = None,
        extra: Mapping[str, Any] | None = None,
    ) -> str | None:
        """Transmit ``message`` and return the backend event id when known."""


@runtime_checkable
class BreadcrumbPort(Protocol):
    """Record a breadcrumb for later inspection."""

    def add(self, breadcrumb: Breadcrumb) -> None: ...


__all__ = ["BreadcrumbPort", "TelemetryTransportPort"]
