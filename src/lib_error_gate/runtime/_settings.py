"""Runtime settings resolution.

Purpose
-------
Merge keyword arguments passed to :func:`lib_error_gate.init` with
``ERROR_GATE_*`` environment overrides into a validated
:class:`RuntimeSettings` value. Environment values win over arguments so
operators can retune a deployed service without code changes.

Recognised variables
--------------------
``ERROR_GATE_LIMIT_<CATEGORY>``
    ``MAX:WINDOW_MS:COOLDOWN_MS``; overrides or adds a category.
``ERROR_GATE_DEFAULT_CATEGORY``
    Category used for unknown or missing category names.
``ERROR_GATE_SWEEP_INTERVAL``
    Seconds between sweeps (positive number).
``ERROR_GATE_SWEEPER``
    Boolean toggle for the background sweeper.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Sequence, Union

from lib_error_gate.application.ports import ClockPort, ScrubberPort, TelemetryTransportPort
from lib_error_gate.config import parse_bool
from lib_error_gate.domain.categories import DEFAULT_CATEGORY, DEFAULT_LIMITS, ErrorCategory, category_name
from lib_error_gate.domain.counter import LimiterConfig

DiagnosticHook = Callable[[str, dict[str, Any]], None] | None
LimitSpec = Union[LimiterConfig, Sequence[float], Mapping[str, float]]

ENV_PREFIX = "ERROR_GATE_"
LIMIT_ENV_PREFIX = f"{ENV_PREFIX}LIMIT_"
LIMIT_FORMAT = "MAX:WINDOW_MS:COOLDOWN_MS"


@dataclass(frozen=True)
class RuntimeSettings:
    """Fully resolved configuration consumed by the composition root."""

    limits: Mapping[str, LimiterConfig]
    default_category: str
    sweeper_enabled: bool
    sweep_interval: float
    breadcrumb_capacity: int
    transport: TelemetryTransportPort | None
    scrubber: ScrubberPort | None
    clock: ClockPort | None
    diagnostic_hook: DiagnosticHook


def build_runtime_settings(
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
    environ: Mapping[str, str] | None = None,
) -> RuntimeSettings:
    """Resolve arguments and environment overrides into :class:`RuntimeSettings`."""

    env = os.environ if environ is None else environ
    resolved: dict[str, LimiterConfig] = dict(DEFAULT_LIMITS)
    for key, spec in (limits or {}).items():
        name = category_name(key)
        if not name:
            raise ValueError("category names must not be empty")
        resolved[name] = _coerce_limit_spec(name, spec)
    resolved.update(_limits_from_env(env))

    default = category_name(env.get(f"{ENV_PREFIX}DEFAULT_CATEGORY") or default_category) or DEFAULT_CATEGORY
    if default not in resolved:
        raise ValueError(f"default category {default!r} is not configured")

    raw_sweeper = env.get(f"{ENV_PREFIX}SWEEPER")
    sweeper_enabled = parse_bool(f"{ENV_PREFIX}SWEEPER", raw_sweeper) if raw_sweeper is not None else enable_sweeper
    interval = _coerce_interval(env.get(f"{ENV_PREFIX}SWEEP_INTERVAL"), sweep_interval)
    if breadcrumb_capacity <= 0:
        raise ValueError("breadcrumb_capacity must be positive")

    return RuntimeSettings(
        limits=MappingProxyType(resolved),
        default_category=default,
        sweeper_enabled=sweeper_enabled,
        sweep_interval=interval,
        breadcrumb_capacity=breadcrumb_capacity,
        transport=transport,
        scrubber=scrubber,
        clock=clock,
        diagnostic_hook=diagnostic_hook,
    )


def _coerce_limit_spec(name: str, spec: LimitSpec) -> LimiterConfig:
    """Accept a :class:`LimiterConfig`, a ``(max, window_ms, cooldown_ms)`` triple, or a mapping."""

    if isinstance(spec, LimiterConfig):
        return spec
    if isinstance(spec, Mapping):
        return LimiterConfig(**spec)
    values = tuple(spec)
    if len(values) != 3:
        raise ValueError(f"limit for {name!r} must be (max_occurrences, window_ms, cooldown_ms)")
    return LimiterConfig(max_occurrences=int(values[0]), window_ms=values[1], cooldown_ms=values[2])


def _limits_from_env(env: Mapping[str, str]) -> dict[str, LimiterConfig]:
    overrides: dict[str, LimiterConfig] = {}
    for key, raw in env.items():
        if not key.startswith(LIMIT_ENV_PREFIX):
            continue
        category = key[len(LIMIT_ENV_PREFIX) :].strip().lower()
        if not category:
            raise ValueError(f"{key} must name a category, e.g. {LIMIT_ENV_PREFIX}GENERAL")
        overrides[category] = _parse_limit(key, raw)
    return overrides


def _parse_limit(name: str, raw: str) -> LimiterConfig:
    """Parse ``MAX:WINDOW_MS:COOLDOWN_MS``.

    Examples
    --------
    >>> _parse_limit("ERROR_GATE_LIMIT_API", "10:60000:180000")
    LimiterConfig(max_occurrences=10, window_ms=60000, cooldown_ms=180000)
    """

    parts = [part.strip() for part in raw.split(":")]
    if len(parts) != 3:
        raise ValueError(f"{name} must use {LIMIT_FORMAT} format, got {raw!r}")
    numbers: list[int] = []
    for label, part in zip(("MAX", "WINDOW_MS", "COOLDOWN_MS"), parts):
        try:
            value = int(part)
        except ValueError as exc:
            raise ValueError(f"{name} {label} must be an integer, got {part!r}") from exc
        if value <= 0:
            raise ValueError(f"{name} {label} must be positive, got {value}")
        numbers.append(value)
    return LimiterConfig(max_occurrences=numbers[0], window_ms=numbers[1], cooldown_ms=numbers[2])


def _coerce_interval(raw: str | None, fallback: float) -> float:
    if raw is None:
        value = fallback
    else:
        try:
            value = float(raw)
        except ValueError as exc:
            raise ValueError(f"{ENV_PREFIX}SWEEP_INTERVAL must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{ENV_PREFIX}SWEEP_INTERVAL must be positive, got {value}")
    return value


__all__ = ["DiagnosticHook", "LimitSpec", "RuntimeSettings", "build_runtime_settings"]
