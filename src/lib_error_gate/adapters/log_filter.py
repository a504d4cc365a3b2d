"""Stdlib :mod:`logging` filter backed by the admission gate.

Attach :class:`RateLimitedErrorFilter` to a handler that ships errors to a
telemetry backend and repeated failures stop flooding it::

    handler.addFilter(RateLimitedErrorFilter(registry))
    logger.error("payment failed", extra={"component": "checkout", "error_category": "api"})
"""

from __future__ import annotations

import logging
from typing import Any

from lib_error_gate.application.ports.rate_limiter import AdmissionPort
from lib_error_gate.domain.signature import CONTEXT_FIELDS


class RateLimitedErrorFilter(logging.Filter):
    """Suppress log records the gate refuses to admit.

    Only records at or above ``min_level`` are gated; everything below
    passes untouched.
    """

    def __init__(
        self,
        gate: AdmissionPort,
        *,
        min_level: int = logging.ERROR,
        category_attr: str = "error_category",
    ) -> None:
        super().__init__()
        self._gate = gate
        self._min_level = min_level
        self._category_attr = category_attr

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno < self._min_level:
            return True
        category = getattr(record, self._category_attr, None)
        return self._gate.log_error(self._error_of(record), self._context_of(record), category)

    @staticmethod
    def _error_of(record: logging.LogRecord) -> Any:
        if record.exc_info and record.exc_info[1] is not None:
            return record.exc_info[1]
        return record.getMessage()

    @staticmethod
    def _context_of(record: logging.LogRecord) -> dict[str, Any]:
        return {field: getattr(record, field) for field in CONTEXT_FIELDS if getattr(record, field, None) is not None}


__all__ = ["RateLimitedErrorFilter"]
