from __future__ import annotations

import logging

import pytest

from lib_error_gate.adapters.clock import ManualClock
from lib_error_gate.adapters.registry import LimiterRegistry
from lib_error_gate.domain.categories import ErrorCategory
from lib_error_gate.domain.counter import LimiterConfig


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


def test_network_category_suppresses_fourth_occurrence_independently(clock: ManualClock) -> None:
    registry = LimiterRegistry(clock=clock)
    error = ConnectionError("reset by peer")
    context = {"component": "sync"}

    network = [registry.log_error(error, context, "network") for _ in range(4)]
    general = [registry.log_error(error, context) for _ in range(4)]

    assert network == [True, True, True, False]
    assert general == [True, True, True, True]


def test_unknown_and_missing_categories_route_to_default(clock: ManualClock, caplog: pytest.LogCaptureFixture) -> None:
    registry = LimiterRegistry({"general": LimiterConfig(1, 1_000, 5_000)}, clock=clock)
    with caplog.at_level(logging.DEBUG, logger="lib_error_gate.adapters.registry"):
        assert registry.log_error("boom", None, "does-not-exist") is True
    assert registry.log_error("boom") is False
    assert registry.limiter("does-not-exist") is registry.limiter()
    assert "Unknown error category" in caplog.text


def test_enum_and_string_categories_are_equivalent(clock: ManualClock) -> None:
    registry = LimiterRegistry(clock=clock)
    assert registry.limiter(ErrorCategory.API) is registry.limiter("API")


def test_should_log_is_alias_of_log_error(clock: ManualClock) -> None:
    registry = LimiterRegistry({"general": LimiterConfig(1, 1_000, 5_000)}, clock=clock)
    assert registry.should_log("boom") is True
    assert registry.log_error("boom") is False


def test_status_stats_and_reset(clock: ManualClock) -> None:
    registry = LimiterRegistry(clock=clock)
    for _ in range(4):
        registry.log_error("boom", None, "network")
    registry.log_error("boom", None, "api")

    assert registry.get_status("boom", None, "network").is_rate_limited is True
    stats = registry.get_all_stats()
    assert set(stats) == {"general", "api", "network", "validation"}
    assert stats["network"].rate_limited_signatures == 1
    assert stats["api"].total_occurrences == 1

    registry.reset("network")
    assert registry.get_status("boom", None, "network").count == 0
    assert registry.get_status("boom", None, "api").count == 1

    assert registry.reset_signature("boom", None, "api") is True
    registry.log_error("boom", None, "validation")
    registry.reset()
    assert all(stat.total_unique_signatures == 0 for stat in registry.get_all_stats().values())


def test_sweep_reports_removed_per_category(clock: ManualClock) -> None:
    registry = LimiterRegistry(clock=clock)
    registry.log_error("boom", None, "network")
    registry.log_error("boom", None, "validation")
    clock.set(150_001)

    removed = registry.sweep()

    assert removed == {"general": 0, "api": 0, "network": 1, "validation": 1}


def test_update_config_targets_one_category(clock: ManualClock) -> None:
    registry = LimiterRegistry(clock=clock)
    registry.update_config("network", max_occurrences=1)
    assert registry.limiter("network").config.max_occurrences == 1
    assert registry.limiter("general").config.max_occurrences == 5


def test_registry_validates_configuration() -> None:
    with pytest.raises(ValueError, match="at least one category"):
        LimiterRegistry({})
    with pytest.raises(ValueError, match="not configured"):
        LimiterRegistry({"api": LimiterConfig(1, 1, 1)})
    with pytest.raises(ValueError, match="must not be empty"):
        LimiterRegistry({" ": LimiterConfig(1, 1, 1), "general": LimiterConfig(1, 1, 1)})


def test_custom_default_category(clock: ManualClock) -> None:
    registry = LimiterRegistry({"jobs": LimiterConfig(2, 1_000, 1_000)}, clock=clock, default_category="jobs")
    assert registry.default_category == "jobs"
    assert registry.categories == ("jobs",)
    assert registry.clock is clock


def test_log_error_never_raises_for_hostile_inputs(clock: ManualClock) -> None:
    class HostileStr:
        def __str__(self) -> str:
            raise RuntimeError("no str")

    class HostileProperty:
        @property
        def message(self) -> str:
            raise RuntimeError("boom")

    registry = LimiterRegistry(clock=clock)
    assert registry.log_error("boom", {"component": HostileStr()}) is True
    assert registry.log_error(HostileProperty()) is True
