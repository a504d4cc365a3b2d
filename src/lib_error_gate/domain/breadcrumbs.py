"""Breadcrumbs recorded in place of suppressed telemetry.

Purpose
-------
When the gate suppresses an occurrence the caller may leave a lightweight
local trace instead. This module holds the breadcrumb value object and the
bounded trail that retains the most recent ones.

Contents
--------
* :class:`Breadcrumb` – immutable, serialisable trace entry.
* :class:`BreadcrumbTrail` – fixed-size buffer of recent breadcrumbs.

System Role
-----------
Feeds the default :class:`~lib_error_gate.application.ports.telemetry.BreadcrumbPort`
adapter. Suppressed occurrences are never replayed from the trail.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Deque, Iterator

from .levels import Severity


def _ensure_aware(ts: datetime) -> datetime:
    """Validate that ``ts`` is timezone-aware and normalise to UTC."""
    if ts.tzinfo is None or ts.tzinfo.utcoffset(ts) is None:
        raise ValueError("timestamp must be timezone-aware")
    return ts.astimezone(timezone.utc)


@dataclass(slots=True, frozen=True)
class Breadcrumb:
    """Local trace noting an event that was not transmitted.

    Attributes
    ----------
    message:
        Human-readable description.
    category:
        Free-form grouping label (``"error"``, ``"http"`` …).
    level:
        :class:`Severity` of the breadcrumb itself.
    timestamp:
        Creation time, timezone-aware UTC.
    data:
        Shallow copy of structured metadata.
    """

    message: str
    category: str
    level: Severity
    timestamp: datetime
    data: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", _ensure_aware(self.timestamp))
        if not self.message.strip():
            raise ValueError("message must not be empty")
        object.__setattr__(self, "data", dict(self.data))

    def to_dict(self) -> dict[str, Any]:
        """Serialize the breadcrumb with an ISO8601 timestamp."""

        return {
            "message": self.message,
            "category": self.category,
            "level": self.level.label,
            "timestamp": self.timestamp.isoformat(),
            "data": dict(self.data),
        }


class BreadcrumbTrail:
    """Fixed-size buffer retaining the most recent :class:`Breadcrumb` objects."""

    def __init__(self, *, max_breadcrumbs: int = 100) -> None:
        if max_breadcrumbs <= 0:
            raise ValueError("max_breadcrumbs must be positive")
        self._max_breadcrumbs = max_breadcrumbs
        self._buffer: Deque[Breadcrumb] = deque(maxlen=max_breadcrumbs)

    @property
    def max_breadcrumbs(self) -> int:
        """Return the configured capacity."""

        return self._max_breadcrumbs

    def add(self, breadcrumb: Breadcrumb) -> None:
        """Append ``breadcrumb``, evicting the oldest entry when full."""

        self._buffer.append(breadcrumb)

    def snapshot(self) -> list[Breadcrumb]:
        """Return a copy of the current trail, oldest first."""

        return list(self._buffer)

    def __iter__(self) -> Iterator[Breadcrumb]:
        return iter(self._buffer)

    def __len__(self) -> int:
        return len(self._buffer)

    def clear(self) -> None:
        self._buffer.clear()


__all__ = ["Breadcrumb", "BreadcrumbTrail"]
