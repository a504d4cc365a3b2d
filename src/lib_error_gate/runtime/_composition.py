"""Runtime composition helpers wiring domain, application, and adapters.

Purpose
-------
Translate :class:`RuntimeSettings` into the live :class:`GateRuntime`
singleton. The helpers here keep wiring small, declarative, and testable.

System Role
-----------
Anchors the clean-architecture boundary: adapters are instantiated here,
while :mod:`lib_error_gate.runtime` exposes only the façade.
"""

from __future__ import annotations

from datetime import datetime, timezone

from lib_error_gate.adapters import LimiterRegistry, LoggingTransport, PeriodicSweeper, SensitiveDataScrubber
from lib_error_gate.application.use_cases import create_error_capture, create_shutdown
from lib_error_gate.domain import BreadcrumbTrail

from ._settings import RuntimeSettings
from ._state import GateRuntime


def build_runtime(settings: RuntimeSettings) -> GateRuntime:
    """Assemble the gate runtime from resolved settings.

    The sweeper thread, when enabled, is started before returning so the
    caller receives a fully running runtime.
    """

    registry = LimiterRegistry(settings.limits, clock=settings.clock, default_category=settings.default_category)
    breadcrumbs = BreadcrumbTrail(max_breadcrumbs=settings.breadcrumb_capacity)
    capture = create_error_capture(
        gate=registry,
        transport=settings.transport if settings.transport is not None else LoggingTransport(),
        breadcrumbs=breadcrumbs,
        scrubber=settings.scrubber if settings.scrubber is not None else SensitiveDataScrubber(),
        wall_clock=_utc_now,
        diagnostic=settings.diagnostic_hook,
    )
    sweeper = _create_sweeper(registry, settings)
    shutdown_async = create_shutdown(sweeper=sweeper, registry=registry, breadcrumbs=breadcrumbs)
    if sweeper is not None:
        sweeper.start()
    return GateRuntime(
        registry=registry,
        capture=capture,
        breadcrumbs=breadcrumbs,
        sweeper=sweeper,
        shutdown_async=shutdown_async,
        limits=settings.limits,
        default_category=settings.default_category,
        sweep_interval=settings.sweep_interval,
    )


def _create_sweeper(registry: LimiterRegistry, settings: RuntimeSettings) -> PeriodicSweeper | None:
    if not settings.sweeper_enabled:
        return None
    return PeriodicSweeper(registry, interval=settings.sweep_interval, diagnostic=settings.diagnostic_hook)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


__all__ = ["build_runtime"]
