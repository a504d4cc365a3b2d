"""Transport adapter forwarding admitted telemetry to :mod:`logging`.

Hosts without a telemetry SDK (or tests) still get admitted events somewhere
visible; hosts with an SDK implement :class:`TelemetryTransportPort` instead.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any
from uuid import uuid4

from lib_error_gate.application.ports.telemetry import TelemetryTransportPort
from lib_error_gate.domain.levels import Severity


class LoggingTransport(TelemetryTransportPort):
    """Emit admitted events as records on ``logger``."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger if logger is not None else logging.getLogger("lib_error_gate.telemetry")

    def capture_exception(
        self,
        error: Any,
        *,
        level: Severity,
        tags: Mapping[str, str] | None = None,
        extra: Mapping[str, Any] | None = None,
        fingerprint: Sequence[str] | None = None,
    ) -> str | None:
        event_id = uuid4().hex
        exc_info = error if isinstance(error, BaseException) else None
        self._logger.log(
            level.to_python_level(),
            "%s",
            error,
            exc_info=exc_info,
            extra=self._record_extra(event_id, tags, extra, fingerprint),
        )
        return event_id

    def capture_message(
        self,
        message: str,
        *,
        level: Severity,
        tags: Mapping[str, str] | None = None,
        extra: Mapping[str, Any] | None = None,
    ) -> str | None:
        event_id = uuid4().hex
        self._logger.log(level.to_python_level(), "%s", message, extra=self._record_extra(event_id, tags, extra, None))
        return event_id

    @staticmethod
    def _record_extra(
        event_id: str,
        tags: Mapping[str, str] | None,
        extra: Mapping[str, Any] | None,
        fingerprint: Sequence[str] | None,
    ) -> dict[str, Any]:
        return {
            "telemetry_event_id": event_id,
            "telemetry_tags": dict(tags or {}),
            "telemetry_extra": dict(extra or {}),
            "telemetry_fingerprint": list(fingerprint) if fingerprint else None,
        }


__all__ = ["LoggingTransport"]
