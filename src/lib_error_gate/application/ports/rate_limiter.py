"""Port for the admission gate consulted before transmitting telemetry."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from lib_error_gate.domain.categories import ErrorCategory


@runtime_checkable
class AdmissionPort(Protocol):
    """Decide whether an error occurrence may be forwarded."""

    def log_error(
        self,
        error: Any,
        context: Mapping[str, Any] | None = None,
        category: str | ErrorCategory | None = None,
    ) -> bool:
        """Return ``True`` when the occurrence should be transmitted."""


__all__ = ["AdmissionPort"]
