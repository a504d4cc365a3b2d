"""Process-wide slot holding the composed gate runtime.

The slot admits one runtime at a time: :meth:`RuntimeSlot.install` refuses a
second runtime until :meth:`RuntimeSlot.release` empties it, so two racing
``init()`` calls cannot both win.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable, Mapping

from lib_error_gate.adapters import LimiterRegistry, PeriodicSweeper
from lib_error_gate.application.use_cases import ErrorCapture
from lib_error_gate.domain import BreadcrumbTrail, LimiterConfig

NOT_INITIALISED = "lib_error_gate.init() must be called before using the error gate API"
ALREADY_INITIALISED = "lib_error_gate.init() cannot be called twice without shutdown(); call lib_error_gate.shutdown() first"


@dataclass(slots=True)
class GateRuntime:
    """Live collaborators assembled by the composition root."""

    registry: LimiterRegistry
    capture: ErrorCapture
    breadcrumbs: BreadcrumbTrail
    sweeper: PeriodicSweeper | None
    shutdown_async: Callable[[], asyncio.Future | Any]
    limits: Mapping[str, LimiterConfig]
    default_category: str
    sweep_interval: float


class RuntimeSlot:
    """Lock-guarded holder for at most one :class:`GateRuntime`.

    Examples
    --------
    >>> slot = RuntimeSlot()
    >>> slot.occupied
    False
    >>> slot.release() is None
    True
    """

    def __init__(self) -> None:
        self._runtime: GateRuntime | None = None
        self._lock = Lock()

    @property
    def occupied(self) -> bool:
        with self._lock:
            return self._runtime is not None

    def install(self, runtime: GateRuntime) -> None:
        with self._lock:
            if self._runtime is not None:
                raise RuntimeError(ALREADY_INITIALISED)
            self._runtime = runtime

    def release(self) -> GateRuntime | None:
        """Empty the slot and return whatever it held."""

        with self._lock:
            runtime, self._runtime = self._runtime, None
            return runtime

    def current(self) -> GateRuntime:
        with self._lock:
            if self._runtime is None:
                raise RuntimeError(NOT_INITIALISED)
            return self._runtime


_SLOT = RuntimeSlot()


def install_runtime(runtime: GateRuntime) -> None:
    _SLOT.install(runtime)


def release_runtime() -> GateRuntime | None:
    return _SLOT.release()


def current_runtime() -> GateRuntime:
    """Return the active runtime or raise :class:`RuntimeError`."""

    return _SLOT.current()


def is_initialised() -> bool:
    return _SLOT.occupied


__all__ = [
    "ALREADY_INITIALISED",
    "GateRuntime",
    "NOT_INITIALISED",
    "RuntimeSlot",
    "current_runtime",
    "install_runtime",
    "is_initialised",
    "release_runtime",
]
