"""Admission policy deciding whether an occurrence is forwarded.

Purpose
-------
Encode the window/cooldown state machine as a pure function so limiters only
need to load a counter, call :func:`decide`, and store the result.

Contents
--------
* :class:`Decision` – outcome plus the counter to persist.
* :func:`decide` – the policy itself.

System Role
-----------
Domain core. The check order below produces the hysteresis: a signature that
hit the ceiling stays suppressed for a full cooldown measured from its most
recent occurrence, even when its counting window has already expired.

1. no counter: open a window, admit.
2. cooling down (saturated and ``now - last_seen < cooldown``): touch
   ``last_seen``, suppress.
3. window expired (``now - window_start > window``): reopen, admit.
4. otherwise count the occurrence and admit while ``count <= max``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .counter import LimiterConfig, WindowCounter


@dataclass(slots=True, frozen=True)
class Decision:
    """Result of :func:`decide`."""

    admit: bool
    counter: WindowCounter


def decide(existing: WindowCounter | None, config: LimiterConfig, now: float, *, signature: str) -> Decision:
    """Apply the admission policy for one occurrence at ``now`` (ms).

    ``existing`` is never mutated. A ``now`` earlier than the stored
    ``last_seen`` is treated as ``last_seen``.

    Examples
    --------
    >>> cfg = LimiterConfig(max_occurrences=1, window_ms=1000, cooldown_ms=5000)
    >>> first = decide(None, cfg, 0, signature='sig')
    >>> first.admit, first.counter.count
    (True, 1)
    >>> second = decide(first.counter, cfg, 10, signature='sig')
    >>> second.admit, second.counter.count, second.counter.last_seen
    (False, 1, 10)
    >>> decide(second.counter, cfg, 5010, signature='sig').admit
    True
    """

    if existing is None:
        return Decision(admit=True, counter=WindowCounter.open(signature, now))

    now = max(now, existing.last_seen)

    if now - existing.last_seen < config.cooldown_ms and existing.is_saturated(config):
        return Decision(admit=False, counter=replace(existing, last_seen=now))

    if now - existing.window_start > config.window_ms:
        return Decision(admit=True, counter=WindowCounter.open(existing.signature, now))

    count = existing.count + 1
    return Decision(admit=count <= config.max_occurrences, counter=replace(existing, count=count, last_seen=now))


__all__ = ["Decision", "decide"]
