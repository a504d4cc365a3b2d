"""Use case gating telemetry capture behind the admission decision.

Purpose
-------
Implement the consumer side of the gate: consult the limiter before handing an
error to the telemetry transport, and leave a breadcrumb instead when the
occurrence is suppressed. Suppressed occurrences are never queued, retried, or
replayed.

Contents
--------
* :func:`create_error_capture` – factory wiring ports into an :class:`ErrorCapture`.
* :class:`ErrorCapture` – ``capture_exception`` / ``capture_message`` plus the
  API, navigation and form wrappers, and the pseudonymised user context.

System Role
-----------
Application-layer orchestrator invoked by the runtime façade; depends only on
ports so hosts can plug in any telemetry SDK.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from lib_error_gate.application.ports import (
    AdmissionPort,
    BreadcrumbPort,
    ScrubberPort,
    TelemetryTransportPort,
)
from lib_error_gate.domain.breadcrumbs import Breadcrumb
from lib_error_gate.domain.categories import ErrorCategory
from lib_error_gate.domain.levels import GATED_SEVERITIES, Severity
from lib_error_gate.domain.occurrence import normalise_error
from lib_error_gate.domain.privacy import anonymise_user

logger = logging.getLogger(__name__)

CaptureResult = dict[str, Any]
DiagnosticHook = Callable[[str, dict[str, Any]], None] | None


def create_error_capture(
    *,
    gate: AdmissionPort,
    transport: TelemetryTransportPort,
    breadcrumbs: BreadcrumbPort,
    scrubber: ScrubberPort,
    wall_clock: Callable[[], Any],
    diagnostic: DiagnosticHook = None,
) -> "ErrorCapture":
    """Build the capture use case from its collaborators.

    Parameters
    ----------
    gate:
        Admission decision, normally a :class:`LimiterRegistry`.
    transport:
        Telemetry SDK boundary receiving admitted events.
    breadcrumbs:
        Sink for local traces of suppressed occurrences.
    scrubber:
        Redacts URLs and request/response payloads of API errors.
    wall_clock:
        Callable returning a timezone-aware :class:`datetime` for breadcrumbs.
    diagnostic:
        Optional hook receiving ``rate_limited`` notifications.
    """

    toolkit = _CaptureToolkit(
        gate=gate,
        transport=transport,
        breadcrumbs=breadcrumbs,
        scrubber=scrubber,
        wall_clock=wall_clock,
        emit=_build_diagnostic_emitter(diagnostic),
    )
    return ErrorCapture(toolkit)


@dataclass(frozen=True)
class _CaptureToolkit:
    gate: AdmissionPort
    transport: TelemetryTransportPort
    breadcrumbs: BreadcrumbPort
    scrubber: ScrubberPort
    wall_clock: Callable[[], Any]
    emit: Callable[[str, dict[str, Any]], None]


class ErrorCapture:
    """Rate-limited front door to the telemetry transport."""

    def __init__(self, toolkit: _CaptureToolkit) -> None:
        self._toolkit = toolkit
        self._user: dict[str, Any] | None = None

    @property
    def user(self) -> dict[str, Any] | None:
        """Pseudonymised user context attached to forwarded events, if any."""

        return self._user

    def set_user(self, user: Mapping[str, Any]) -> None:
        """Attach ``user`` to later events with its id and email hashed."""

        self._user = anonymise_user(user)

    def clear_user(self) -> None:
        self._user = None

    def capture_exception(
        self,
        error: Any,
        *,
        tags: Mapping[str, str] | None = None,
        extra: Mapping[str, Any] | None = None,
        level: Severity | str = Severity.ERROR,
        fingerprint: Sequence[str] | None = None,
        skip_rate_limit: bool = False,
    ) -> CaptureResult:
        """Forward ``error`` unless the ``general`` limiter suppresses it.

        ``tags`` may carry ``component``, ``action``, and ``url`` which take
        part in grouping.
        """

        severity = _coerce_severity(level)
        if not skip_rate_limit and not _admits(self._toolkit, error, _context_from_tags(tags), ErrorCategory.GENERAL):
            occurrence = normalise_error(error)
            _leave_breadcrumb(
                self._toolkit,
                f"Rate limited error: {occurrence.message}",
                category="error",
                data={"rate_limited": True, "error_name": occurrence.name},
            )
            return _reject_due_to_rate_limit(self._toolkit, occurrence.name, ErrorCategory.GENERAL)
        event_id = self._toolkit.transport.capture_exception(
            error,
            level=severity,
            tags=tags,
            extra=self._with_user(extra),
            fingerprint=fingerprint,
        )
        return {"ok": True, "event_id": event_id}

    def capture_message(
        self,
        message: str,
        level: Severity | str = Severity.INFO,
        *,
        tags: Mapping[str, str] | None = None,
        extra: Mapping[str, Any] | None = None,
        skip_rate_limit: bool = False,
    ) -> CaptureResult:
        """Forward ``message``; only warnings and worse are rate limited."""

        severity = _coerce_severity(level)
        gated = severity in GATED_SEVERITIES and not skip_rate_limit
        if gated and not _admits(self._toolkit, message, _context_from_tags(tags), ErrorCategory.GENERAL):
            return _reject_due_to_rate_limit(self._toolkit, "message", ErrorCategory.GENERAL)
        event_id = self._toolkit.transport.capture_message(message, level=severity, tags=tags, extra=self._with_user(extra))
        return {"ok": True, "event_id": event_id}

    def capture_api_error(
        self,
        error: Any,
        *,
        url: str,
        method: str,
        status: int | None = None,
        request_data: Any = None,
        response_data: Any = None,
    ) -> CaptureResult:
        """Forward an HTTP client error through the ``api`` limiter."""

        toolkit = self._toolkit
        safe_url = toolkit.scrubber.scrub_url(url)
        status_label = str(status) if status is not None else "unknown"
        context = {"url": url, "method": method, "status": status}
        if not _admits(toolkit, error, context, ErrorCategory.API):
            occurrence = normalise_error(error)
            _leave_breadcrumb(
                toolkit,
                f"Rate limited API error: {method} {safe_url} - {occurrence.message}",
                category="http",
                data={"rate_limited": True, "status": status, "method": method},
            )
            return _reject_due_to_rate_limit(toolkit, occurrence.name, ErrorCategory.API)

        api_request = {
            "url": safe_url,
            "method": method,
            "status": status,
            "request_data": toolkit.scrubber.scrub_data(request_data),
            "response_data": toolkit.scrubber.scrub_data(response_data),
        }
        return self.capture_exception(
            error,
            tags={"error_type": "api_error", "http_method": method, "http_status": status_label},
            extra={"api_request": api_request},
            fingerprint=["api_error", method, url.split("?", 1)[0], status_label],
            skip_rate_limit=True,
        )

    def capture_navigation_error(self, error: Any, *, route: str, params: Any = None) -> CaptureResult:
        """Forward a routing failure, grouped per ``route``, with scrubbed ``params``."""

        return self.capture_exception(
            error,
            tags={"error_type": "navigation_error", "route": route},
            extra={"navigation_params": self._toolkit.scrubber.scrub_data(params)},
            fingerprint=["navigation_error", route],
        )

    def capture_form_error(self, error: Any, *, form_name: str, form_data: Any = None) -> CaptureResult:
        """Forward a form validation failure with scrubbed ``form_data``."""

        return self.capture_exception(
            error,
            tags={"error_type": "form_error", "form_name": form_name},
            extra={"form_data": self._toolkit.scrubber.scrub_data(form_data)},
            fingerprint=["form_error", form_name],
        )

    def _with_user(self, extra: Mapping[str, Any] | None) -> Mapping[str, Any] | None:
        user = self._user
        if user is None:
            return extra
        return {**(extra or {}), "user": user}


def _build_diagnostic_emitter(diagnostic: DiagnosticHook) -> Callable[[str, dict[str, Any]], None]:
    def emit(name: str, payload: dict[str, Any]) -> None:
        if diagnostic is None:
            return
        try:
            diagnostic(name, payload)
        except Exception as exc:  # noqa: BLE001
            logger.error("Diagnostic hook raised while reporting %s", name, exc_info=exc)

    return emit


def _coerce_severity(level: Severity | str) -> Severity:
    return level if isinstance(level, Severity) else Severity.from_name(level)


def _context_from_tags(tags: Mapping[str, str] | None) -> dict[str, Any]:
    tags = tags or {}
    return {"component": tags.get("component"), "action": tags.get("action"), "url": tags.get("url")}


def _admits(toolkit: _CaptureToolkit, error: Any, context: Mapping[str, Any], category: ErrorCategory) -> bool:
    return toolkit.gate.log_error(error, context, category)


def _leave_breadcrumb(toolkit: _CaptureToolkit, message: str, *, category: str, data: dict[str, Any]) -> None:
    breadcrumb = Breadcrumb(
        message=message,
        category=category,
        level=Severity.INFO,
        timestamp=toolkit.wall_clock(),
        data=data,
    )
    toolkit.breadcrumbs.add(breadcrumb)


def _reject_due_to_rate_limit(toolkit: _CaptureToolkit, error_name: str, category: ErrorCategory) -> CaptureResult:
    toolkit.emit("rate_limited", {"error_name": error_name, "category": category.value})
    return {"ok": False, "reason": "rate_limited"}


__all__ = ["CaptureResult", "ErrorCapture", "create_error_capture"]
