"""Shutdown orchestration for the admission gate.

Purpose
-------
Provide a unified shutdown routine that stops the sweeper and releases the
state held by limiters and breadcrumb trails.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Protocol


class _Stoppable(Protocol):
    def stop(self) -> None: ...


class _Resettable(Protocol):
    def reset(self) -> None: ...


class _Clearable(Protocol):
    def clear(self) -> None: ...


def create_shutdown(
    *,
    sweeper: _Stoppable | None,
    registry: _Resettable,
    breadcrumbs: _Clearable | None,
) -> Callable[[], Awaitable[None]]:
    """Return an async callable performing the shutdown sequence."""

    async def shutdown() -> None:
        """Stop the sweeper, then drop counters and breadcrumbs."""
        try:
            if sweeper is not None:
                sweeper.stop()
        finally:
            registry.reset()
            if breadcrumbs is not None:
                breadcrumbs.clear()

    return shutdown


__all__ = ["create_shutdown"]
