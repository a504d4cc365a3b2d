from __future__ import annotations

import threading

import pytest

from lib_error_gate.adapters.clock import ManualClock
from lib_error_gate.adapters.limiter import ErrorRateLimiter
from lib_error_gate.domain.counter import LimiterConfig


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


def _limiter(clock: ManualClock, *, ceiling: int = 5, window: float = 60_000, cooldown: float = 300_000) -> ErrorRateLimiter:
    return ErrorRateLimiter(LimiterConfig(max_occurrences=ceiling, window_ms=window, cooldown_ms=cooldown), clock=clock)


def test_storm_scenario_against_clock(clock: ManualClock) -> None:
    limiter = _limiter(clock)
    admitted = []
    for at in (0, 1, 2, 3, 4, 5, 100, 300_100):
        clock.set(at)
        admitted.append(limiter.should_log("boom", {"component": "cart"}))

    assert admitted == [True, True, True, True, True, False, False, True]
    assert limiter.get_status("boom", {"component": "cart"}).count == 1


def test_distinct_signatures_are_counted_separately(clock: ManualClock) -> None:
    limiter = _limiter(clock, ceiling=1)
    assert limiter.should_log("boom", {"component": "a"}) is True
    assert limiter.should_log("boom", {"component": "b"}) is True
    assert limiter.should_log("boom", {"component": "a"}) is False
    assert len(limiter) == 2


def test_exceptions_with_same_origin_share_a_signature(clock: ManualClock) -> None:
    limiter = _limiter(clock, ceiling=1)

    def fail() -> None:
        raise ValueError("same")

    results = []
    for _ in range(2):
        try:
            fail()
        except ValueError as exc:
            results.append(limiter.should_log(exc))
    assert results == [True, False]


def test_get_status_does_not_record(clock: ManualClock) -> None:
    limiter = _limiter(clock, ceiling=2, window=1_000, cooldown=5_000)
    assert limiter.get_status("boom").count == 0
    limiter.should_log("boom")
    for _ in range(5):
        limiter.get_status("boom")
    assert limiter.get_status("boom").count == 1
    assert len(limiter) == 1


def test_status_reflects_cooldown(clock: ManualClock) -> None:
    limiter = _limiter(clock, ceiling=1, window=1_000, cooldown=5_000)
    limiter.should_log("boom")
    limiter.should_log("boom")
    clock.advance(2_000)
    status = limiter.get_status("boom")
    assert status.is_rate_limited is True
    assert status.time_until_cooldown_end == 3_000
    assert status.time_until_reset == 0


def test_sweep_removes_only_idle_counters(clock: ManualClock) -> None:
    limiter = _limiter(clock, ceiling=5, window=1_000, cooldown=5_000)
    limiter.should_log("old")
    clock.set(5_000)
    limiter.should_log("recent")
    clock.set(6_001)

    assert limiter.sweep() == 1
    assert len(limiter) == 1
    assert limiter.get_status("old").count == 0
    assert limiter.get_status("recent").count == 1


def test_sweep_accepts_explicit_now(clock: ManualClock) -> None:
    limiter = _limiter(clock, ceiling=5, window=1_000, cooldown=5_000)
    limiter.should_log("boom")
    assert limiter.sweep(6_000) == 0
    assert limiter.sweep(6_001) == 1


def test_memory_stays_bounded_with_periodic_sweeps(clock: ManualClock) -> None:
    limiter = _limiter(clock, ceiling=5, window=100, cooldown=100)
    for index in range(1_000):
        limiter.should_log(f"unique {index}")
        clock.advance(10)
        if index % 50 == 0:
            limiter.sweep()
    limiter.sweep()
    # retention is 200ms, so at most ~20 signatures survive
    assert len(limiter) <= 21


def test_stats_and_resets(clock: ManualClock) -> None:
    limiter = _limiter(clock, ceiling=2, window=1_000, cooldown=5_000)
    limiter.should_log("a")
    limiter.should_log("a")
    limiter.should_log("a")
    limiter.should_log("b")
    stats = limiter.get_stats()
    assert stats.total_unique_signatures == 2
    assert stats.rate_limited_signatures == 1
    assert stats.total_occurrences == 3

    assert limiter.reset_signature("a") is True
    assert limiter.reset_signature("a") is False
    assert limiter.should_log("a") is True

    limiter.reset_all()
    assert len(limiter) == 0


def test_update_config_keeps_counters(clock: ManualClock) -> None:
    limiter = _limiter(clock, ceiling=1, window=1_000, cooldown=5_000)
    limiter.should_log("boom")
    updated = limiter.update_config(max_occurrences=3)
    assert updated.max_occurrences == 3
    assert limiter.config is updated
    assert limiter.should_log("boom") is True
    assert limiter.get_status("boom").count == 2


def test_signature_for_matches_domain_deriver(clock: ManualClock) -> None:
    from lib_error_gate.domain.signature import derive_signature

    limiter = _limiter(clock)
    assert limiter.signature_for("boom", {"url": "/x"}) == derive_signature("boom", {"url": "/x"})


def test_concurrent_callers_never_exceed_ceiling(clock: ManualClock) -> None:
    limiter = _limiter(clock, ceiling=10)
    results: list[bool] = []
    lock = threading.Lock()
    barrier = threading.Barrier(8)

    def worker() -> None:
        barrier.wait()
        for _ in range(50):
            admitted = limiter.should_log("shared")
            with lock:
                results.append(admitted)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sum(results) == 10
    assert len(results) == 400
