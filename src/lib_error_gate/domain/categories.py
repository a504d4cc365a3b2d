"""Built-in error categories and their default limits."""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping

from .counter import LimiterConfig


class ErrorCategory(Enum):
    """Categories shipped with tuned defaults."""

    GENERAL = "general"
    API = "api"
    NETWORK = "network"
    VALIDATION = "validation"


DEFAULT_CATEGORY = ErrorCategory.GENERAL.value

DEFAULT_LIMITS: Mapping[str, LimiterConfig] = MappingProxyType(
    {
        ErrorCategory.GENERAL.value: LimiterConfig(max_occurrences=5, window_ms=60_000, cooldown_ms=300_000),
        ErrorCategory.API.value: LimiterConfig(max_occurrences=10, window_ms=60_000, cooldown_ms=180_000),
        ErrorCategory.NETWORK.value: LimiterConfig(max_occurrences=3, window_ms=30_000, cooldown_ms=120_000),
        ErrorCategory.VALIDATION.value: LimiterConfig(max_occurrences=15, window_ms=60_000, cooldown_ms=60_000),
    }
)
"""Per-category defaults; hosts override them through :func:`lib_error_gate.init`."""


def category_name(category: str | ErrorCategory | None) -> str | None:
    """Return the plain category name for ``category``."""

    if category is None:
        return None
    if isinstance(category, ErrorCategory):
        return category.value
    return str(category).strip().lower()


__all__ = ["DEFAULT_CATEGORY", "DEFAULT_LIMITS", "ErrorCategory", "category_name"]
