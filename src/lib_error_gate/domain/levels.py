"""Telemetry severity levels.

Purpose
-------
Offer a domain-specific representation of the severities telemetry SDKs use
(``debug`` … ``fatal``) with a mapping onto the stdlib levels.

Contents
--------
* :class:`Severity` enum with conversion helpers.
* ``GATED_SEVERITIES`` – severities whose messages pass through the gate.

System Role
-----------
Used by the capture use case to decide which messages are rate limited and by
the logging transport to map telemetry severities onto :mod:`logging`.
"""

from __future__ import annotations

import logging
from enum import Enum


class Severity(Enum):
    """Enumerated telemetry severities."""

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    FATAL = 50

    @property
    def label(self) -> str:
        """Return the lowercase name used in telemetry payloads."""

        return self.name.lower()

    def to_python_level(self) -> int:
        """Return the :mod:`logging` constant matching this severity."""

        return _PYTHON_LEVELS[self]

    @classmethod
    def from_name(cls, name: str) -> "Severity":
        normalized = name.strip().upper()
        if normalized == "CRITICAL":
            return cls.FATAL
        try:
            return cls[normalized]
        except KeyError as exc:
            raise ValueError(f"Unknown severity: {name!r}") from exc


_PYTHON_LEVELS = {
    Severity.DEBUG: logging.DEBUG,
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
    Severity.FATAL: logging.CRITICAL,
}

GATED_SEVERITIES = frozenset({Severity.WARNING, Severity.ERROR, Severity.FATAL})


__all__ = ["GATED_SEVERITIES", "Severity"]
