from __future__ import annotations

import threading

import pytest

from lib_error_gate.adapters.clock import ManualClock
from lib_error_gate.adapters.registry import LimiterRegistry
from lib_error_gate.adapters.sweeper import PeriodicSweeper


class _CountingTarget:
    def __init__(self) -> None:
        self.calls = 0
        self.swept = threading.Event()

    def sweep(self, now: float | None = None) -> dict[str, int]:
        self.calls += 1
        self.swept.set()
        return {"general": 2}


class _FailingTarget:
    def __init__(self) -> None:
        self.calls = 0
        self.failed_twice = threading.Event()

    def sweep(self, now: float | None = None) -> dict[str, int]:
        self.calls += 1
        if self.calls >= 2:
            self.failed_twice.set()
        raise RuntimeError("sweep exploded")


def test_run_once_sweeps_registry_and_reports() -> None:
    clock = ManualClock()
    registry = LimiterRegistry(clock=clock)
    registry.log_error("boom")
    clock.set(360_001)
    events: list[tuple[str, dict]] = []

    sweeper = PeriodicSweeper(registry, diagnostic=lambda name, payload: events.append((name, payload)))
    removed = sweeper.run_once()

    assert removed["general"] == 1
    assert events == [("sweep_completed", {"removed": removed, "total": 1})]


def test_background_thread_sweeps_until_stopped() -> None:
    target = _CountingTarget()
    sweeper = PeriodicSweeper(target, interval=0.01)
    sweeper.start()
    try:
        assert target.swept.wait(2.0)
        assert sweeper.is_running
    finally:
        sweeper.stop()
    assert not sweeper.is_running
    calls = target.calls
    assert calls >= 1


def test_start_is_idempotent_and_stop_without_start_is_noop() -> None:
    sweeper = PeriodicSweeper(_CountingTarget(), interval=60)
    sweeper.stop()
    sweeper.start()
    sweeper.start()
    sweeper.stop()
    assert not sweeper.is_running


def test_context_manager_starts_and_stops() -> None:
    target = _CountingTarget()
    with PeriodicSweeper(target, interval=0.01) as sweeper:
        assert target.swept.wait(2.0)
        assert sweeper.is_running
    assert not sweeper.is_running


def test_failures_are_reported_and_loop_continues() -> None:
    target = _FailingTarget()
    events: list[str] = []
    sweeper = PeriodicSweeper(target, interval=0.01, diagnostic=lambda name, payload: events.append(name))
    sweeper.start()
    try:
        assert target.failed_twice.wait(2.0)
    finally:
        sweeper.stop()
    assert "sweep_failed" in events


def test_failing_diagnostic_hook_is_swallowed() -> None:
    def explode(name: str, payload: dict) -> None:
        raise RuntimeError("hook failed")

    sweeper = PeriodicSweeper(_CountingTarget(), diagnostic=explode)
    assert sweeper.run_once() == {"general": 2}


def test_interval_must_be_positive() -> None:
    with pytest.raises(ValueError, match="interval must be positive"):
        PeriodicSweeper(_CountingTarget(), interval=0)
