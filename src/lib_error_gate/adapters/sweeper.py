"""Thread-based periodic sweeper bounding limiter memory.

Purpose
-------
Drop stale signatures from every limiter of a registry on a fixed cadence,
independently of admission calls.

Contents
--------
* :class:`PeriodicSweeper` - background worker with an explicit, cancellable
  lifetime.

System Role
-----------
Owned by the runtime composition root: started by
:func:`lib_error_gate.init` and stopped by :func:`lib_error_gate.shutdown`.
Each tick performs a full sweep under the limiters' own locks, so admission
calls are delayed by at most one sweep of one limiter.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any, Protocol

LOGGER = logging.getLogger(__name__)


class SweepTarget(Protocol):
    def sweep(self, now: float | None = None) -> dict[str, int]: ...


class PeriodicSweeper:
    """Call ``target.sweep()`` every ``interval`` seconds on a daemon thread.

    Examples
    --------
    >>> class Target:
    ...     def __init__(self):
    ...         self.calls = 0
    ...     def sweep(self, now=None):
    ...         self.calls += 1
    ...         return {"general": 0}
    >>> target = Target()
    >>> sweeper = PeriodicSweeper(target, interval=60.0)
    >>> sweeper.run_once()
    {'general': 0}
    >>> sweeper.start()
    >>> sweeper.is_running
    True
    >>> sweeper.stop()
    >>> sweeper.is_running
    False
    """

    def __init__(
        self,
        target: SweepTarget,
        *,
        interval: float = 60.0,
        stop_timeout: float | None = 5.0,
        diagnostic: Callable[[str, dict[str, Any]], None] | None = None,
    ) -> None:
        """Configure the sweeper.

        Parameters
        ----------
        target:
            Object exposing ``sweep()``; normally a :class:`LimiterRegistry`.
        interval:
            Seconds between sweeps.
        stop_timeout:
            Default deadline (seconds) for :meth:`stop`. ``None`` waits forever.
        diagnostic:
            Optional hook receiving ``sweep_completed`` / ``sweep_failed``.
        """
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._target = target
        self._interval = interval
        self._stop_timeout = stop_timeout
        self._diagnostic = diagnostic
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def start(self) -> None:
        """Start the background thread if it is not already running."""
        with self._lock:
            if self._thread is not None and self._thread.is_alive():
                return
            self._stop_event.clear()
            self._thread = threading.Thread(target=self._run, name="lib_error_gate-sweeper", daemon=True)
            self._thread.start()

    def stop(self, *, timeout: float | None = None) -> None:
        """Stop the thread, waiting at most ``timeout`` seconds.

        Raises
        ------
        RuntimeError
            When the thread is still alive after the deadline.
        """
        with self._lock:
            thread = self._thread
            if thread is None:
                return
            self._stop_event.set()
            effective_timeout = timeout if timeout is not None else self._stop_timeout
            thread.join(effective_timeout)
            if thread.is_alive():
                self._emit_diagnostic("sweeper_shutdown_timeout", {"timeout": effective_timeout})
                raise RuntimeError("Sweeper thread failed to stop within the allotted timeout")
            self._thread = None

    def run_once(self) -> dict[str, int]:
        """Run a single sweep synchronously and return the removed counts."""

        removed = self._target.sweep()
        total = sum(removed.values())
        if total:
            LOGGER.debug("Sweep removed %d stale signatures", total)
        self._emit_diagnostic("sweep_completed", {"removed": dict(removed), "total": total})
        return removed

    def __enter__(self) -> "PeriodicSweeper":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def _run(self) -> None:
        while not self._stop_event.wait(self._interval):
            try:
                self.run_once()
            except Exception as exc:  # noqa: BLE001
                LOGGER.error("Sweep raised an exception; continuing", exc_info=exc)
                self._emit_diagnostic("sweep_failed", {"exception": repr(exc)})

    def _emit_diagnostic(self, name: str, payload: dict[str, Any]) -> None:
        """Invoke the diagnostic hook while guarding against callback failures."""

        if self._diagnostic is None:
            return
        try:
            self._diagnostic(name, payload)
        except Exception as diagnostic_exc:  # noqa: BLE001
            LOGGER.error("Sweeper diagnostic hook raised while reporting %s", name, exc_info=diagnostic_exc)


__all__ = ["PeriodicSweeper"]
