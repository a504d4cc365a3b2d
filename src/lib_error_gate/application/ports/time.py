"""Port for the time source used by admission decisions."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ClockPort(Protocol):
    """Provide the current time in milliseconds."""

    def now_ms(self) -> float: ...


__all__ = ["ClockPort"]
