from __future__ import annotations

import logging

import pytest

from lib_error_gate.domain.categories import DEFAULT_LIMITS, ErrorCategory, category_name
from lib_error_gate.domain.levels import GATED_SEVERITIES, Severity


@pytest.mark.parametrize(
    "name, expected",
    [
        ("debug", Severity.DEBUG),
        ("INFO", Severity.INFO),
        ("Warning", Severity.WARNING),
        ("error", Severity.ERROR),
        ("fatal", Severity.FATAL),
        ("CRITICAL", Severity.FATAL),
    ],
)
def test_from_name_accepts_case_insensitive_matches(name: str, expected: Severity) -> None:
    assert Severity.from_name(name) is expected


def test_from_name_rejects_unknown_severity() -> None:
    with pytest.raises(ValueError, match="Unknown severity"):
        Severity.from_name("verbose")


@pytest.mark.parametrize(
    "severity, expected",
    [
        (Severity.DEBUG, logging.DEBUG),
        (Severity.INFO, logging.INFO),
        (Severity.WARNING, logging.WARNING),
        (Severity.ERROR, logging.ERROR),
        (Severity.FATAL, logging.CRITICAL),
    ],
)
def test_to_python_level_maps_standard_levels(severity: Severity, expected: int) -> None:
    assert severity.to_python_level() == expected


def test_only_warning_and_worse_are_gated() -> None:
    assert GATED_SEVERITIES == {Severity.WARNING, Severity.ERROR, Severity.FATAL}
    assert Severity.ERROR.label == "error"


def test_default_limits_cover_every_category() -> None:
    assert set(DEFAULT_LIMITS) == {category.value for category in ErrorCategory}
    network = DEFAULT_LIMITS["network"]
    assert (network.max_occurrences, network.window_ms, network.cooldown_ms) == (3, 30_000, 120_000)
    general = DEFAULT_LIMITS["general"]
    assert (general.max_occurrences, general.window_ms, general.cooldown_ms) == (5, 60_000, 300_000)


@pytest.mark.parametrize(
    "raw, expected",
    [(ErrorCategory.API, "api"), (" Network ", "network"), (None, None)],
)
def test_category_name_normalises(raw: object, expected: str | None) -> None:
    assert category_name(raw) == expected  # type: ignore[arg-type]
