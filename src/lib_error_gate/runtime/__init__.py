"""Runtime façade that wires the error admission gate.

Purpose
-------
Expose a stable entry point (``init``, ``log_error``, ``get_capture``,
``shutdown``) that host applications use instead of importing the inner layers
directly. The façade owns the lifecycle of one explicit
:class:`~lib_error_gate.adapters.LimiterRegistry` together with its background
sweeper; callers that prefer no global state can construct the registry
themselves and skip this module entirely.

Contents
--------
* ``init`` – composition root for assembling the gate.
* ``get_registry`` / ``get_capture`` – accessors for the live collaborators.
* ``log_error`` / ``get_status`` / ``get_all_stats`` / ``reset`` – shortcuts
  onto the registry.
* ``inspect_runtime`` – read-only snapshot for diagnostics.
* ``shutdown`` / ``shutdown_async`` – deterministic teardown paths.
* ``summary_info`` – metadata banner used by the CLI.

System Role
-----------
Forms the outer shell: high-level policy depends only on abstractions while
adapters stay hidden behind this interface.
"""

from __future__ import annotations

import asyncio
import inspect
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

from lib_error_gate.adapters import LimiterRegistry
from lib_error_gate.application.ports import ClockPort, ScrubberPort, TelemetryTransportPort
from lib_error_gate.application.use_cases import ErrorCapture
from lib_error_gate.domain import DEFAULT_CATEGORY, ErrorCategory, LimiterConfig, LimiterStats, RateLimitStatus

from ._composition import build_runtime
from ._settings import DiagnosticHook, LimitSpec, build_runtime_settings
from ._state import ALREADY_INITIALISED, GateRuntime, current_runtime, install_runtime, is_initialised, release_runtime


@dataclass(frozen=True)
class RuntimeSnapshot:
    """Immutable view over the active gate runtime."""

    limits: Mapping[str, LimiterConfig]
    default_category: str
    sweeper_running: bool
    sweep_interval: float
    tracked_signatures: Mapping[str, int]
    breadcrumb_count: int


__all__ = [
    "RuntimeSnapshot",
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


def init(
    *,
    limits: Mapping[str | ErrorCategory, LimitSpec] | None = None,
    default_category: str | ErrorCategory = DEFAULT_CATEGORY,
    enable_sweeper: bool = True,
    sweep_interval: float = 60.0,
    breadcrumb_capacity: int = 100,
    transport: TelemetryTransportPort | None = None,
    scrubber: ScrubberPort | None = None,
    clock: ClockPort | None = None,
    diagnostic_hook: DiagnosticHook = None,
) -> None:
    """Compose the gate runtime according to configuration inputs.

    Inputs
    ------
    limits:
        Per-category tuning merged over the built-in defaults. Values may be
        :class:`LimiterConfig` instances, ``(max, window_ms, cooldown_ms)``
        triples, or mappings with the same keys.
    default_category:
        Category serving unknown or missing category names.
    enable_sweeper, sweep_interval:
        Toggle and cadence (seconds) of the background sweeper thread.
    breadcrumb_capacity:
        Number of breadcrumbs retained for suppressed occurrences.
    transport, scrubber:
        Telemetry boundary and redaction policy; default to
        :class:`LoggingTransport` and :class:`SensitiveDataScrubber`.
    clock:
        Millisecond clock shared by all limiters; defaults to a monotonic clock.
    diagnostic_hook:
        Receives ``rate_limited``, ``sweep_completed`` and ``sweep_failed``.

    Side Effects
    ------------
    Raises :class:`RuntimeError` if called while a runtime is already active
    and :class:`ValueError` for invalid configuration (including
    ``ERROR_GATE_*`` environment overrides). Starts the sweeper thread when
    enabled.
    """

    if is_initialised():
        raise RuntimeError(ALREADY_INITIALISED)

    settings = build_runtime_settings(
        limits=limits,
        default_category=default_category,
        enable_sweeper=enable_sweeper,
        sweep_interval=sweep_interval,
        breadcrumb_capacity=breadcrumb_capacity,
        transport=transport,
        scrubber=scrubber,
        clock=clock,
        diagnostic_hook=diagnostic_hook,
    )
    runtime = build_runtime(settings)
    try:
        install_runtime(runtime)
    except RuntimeError:
        if runtime.sweeper is not None:
            runtime.sweeper.stop()
        raise


def get_registry() -> LimiterRegistry:
    """Return the registry owned by the active runtime."""

    return current_runtime().registry


def get_capture() -> ErrorCapture:
    """Return the rate-limited capture use case of the active runtime."""

    return current_runtime().capture


def log_error(error: Any, context: Mapping[str, Any] | None = None, category: str | ErrorCategory | None = None) -> bool:
    """Decide whether ``error`` should be forwarded; see :meth:`LimiterRegistry.log_error`."""

    return current_runtime().registry.log_error(error, context, category)


def get_status(
    error: Any,
    context: Mapping[str, Any] | None = None,
    category: str | ErrorCategory | None = None,
) -> RateLimitStatus:
    return current_runtime().registry.get_status(error, context, category)


def get_all_stats() -> dict[str, LimiterStats]:
    return current_runtime().registry.get_all_stats()


def reset(category: str | ErrorCategory | None = None) -> None:
    """Forget counters of one category, or of all categories when ``None``."""

    current_runtime().registry.reset(category)


def inspect_runtime() -> RuntimeSnapshot:
    """Return a read-only snapshot of the current runtime state."""

    runtime = current_runtime()
    registry = runtime.registry
    return RuntimeSnapshot(
        limits=MappingProxyType(dict(runtime.limits)),
        default_category=runtime.default_category,
        sweeper_running=runtime.sweeper is not None and runtime.sweeper.is_running,
        sweep_interval=runtime.sweep_interval,
        tracked_signatures=MappingProxyType({name: len(registry.limiter(name)) for name in registry.categories}),
        breadcrumb_count=len(runtime.breadcrumbs),
    )


def shutdown() -> None:
    """Stop the sweeper and clear runtime state synchronously.

    Raises :class:`RuntimeError` when invoked inside a running event loop to
    steer callers to :func:`shutdown_async`.
    """

    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None
    else:
        if loop.is_running():
            raise RuntimeError(
                "lib_error_gate.shutdown() cannot run inside an active event loop; await lib_error_gate.shutdown_async() instead",
            )
    asyncio.run(shutdown_async())


async def shutdown_async() -> None:
    """Stop the sweeper, drop counters and breadcrumbs, and clear the singleton."""

    runtime = current_runtime()
    try:
        await _perform_shutdown(runtime)
    finally:
        release_runtime()


async def _perform_shutdown(runtime: GateRuntime) -> None:
    """Await the runtime's shutdown hook.

    Examples
    --------
    >>> class DummyRuntime:
    ...     def __init__(self) -> None:
    ...         self.calls = []
    ...     def shutdown_async(self):
    ...         self.calls.append('shutdown')
    ...         return None
    >>> runtime = DummyRuntime()
    >>> asyncio.run(_perform_shutdown(runtime))
    >>> runtime.calls
    ['shutdown']
    """
    result = runtime.shutdown_async()
    if inspect.isawaitable(result):
        await result


def summary_info() -> str:
    """Return the metadata banner used by the CLI entry point and docs."""

    from .. import __init__conf__

    lines: list[str] = []

    def _capture(text: str) -> None:
        lines.append(text)

    __init__conf__.print_info(writer=_capture)
    return "".join(lines)
