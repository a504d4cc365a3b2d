"""Grouping keys ("signatures") for error occurrences.

Purpose
-------
Map an occurrence plus a small allow-listed slice of its context onto a short,
stable key so repeated firings of the same fault share rate-limit state.

Contents
--------
* :data:`CONTEXT_FIELDS` – context keys that participate in grouping.
* :func:`derive_signature` – public deriver used by every limiter.
* :func:`string_hash` – 32-bit polynomial hash rendered in base-36.

System Role
-----------
Pure domain function: no state, no I/O, no exceptions. The hash is fast and
non-cryptographic; collisions only merge two groups, which makes suppression
slightly more aggressive and never corrupts counters.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from .occurrence import normalise_error, safe_str

CONTEXT_FIELDS: tuple[str, ...] = ("component", "action", "url")
"""Context keys included in the signature; everything else is ignored."""

STACK_LINES = 3

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
_UINT32_MASK = 0xFFFFFFFF


def derive_signature(error: Any, context: Mapping[str, Any] | None = None) -> str:
    """Return the grouping signature for ``error`` within ``context``.

    Examples
    --------
    >>> derive_signature("boom") == derive_signature("boom")
    True
    >>> derive_signature("boom", {"component": "a"}) == derive_signature("boom", {"component": "b"})
    False
    >>> derive_signature("boom", {"user_id": 1}) == derive_signature("boom", {"user_id": 2})
    True
    """

    occurrence = normalise_error(error)
    hash_input = f"{occurrence.name}:{occurrence.message}:{occurrence.stack_head(STACK_LINES)}:{_context_key(context)}"
    return string_hash(hash_input)


def _context_key(context: Mapping[str, Any] | None) -> str:
    if not isinstance(context, Mapping):
        return ""
    selected = {field: context[field] for field in CONTEXT_FIELDS if context.get(field) is not None}
    try:
        return json.dumps(selected, separators=(",", ":"), ensure_ascii=False, default=str)
    except Exception:  # noqa: BLE001 - hostile context values must not break admission
        return json.dumps({field: safe_str(value) for field, value in selected.items()}, separators=(",", ":"), ensure_ascii=False)


def string_hash(text: str) -> str:
    """Hash ``text`` over its UTF-16 code units into a base-36 string.

    Each step computes ``h * 31 + unit`` folded to a signed 32-bit integer;
    the absolute value of the final integer is rendered in base-36.

    Examples
    --------
    >>> string_hash("")
    '0'
    >>> string_hash("a")
    '2p'
    >>> string_hash("polygenelubricants")
    'zik0zk'
    """

    encoded = text.encode("utf-16-le", errors="surrogatepass")
    value = 0
    for index in range(0, len(encoded), 2):
        unit = encoded[index] | (encoded[index + 1] << 8)
        value = (value * 31 + unit) & _UINT32_MASK
    if value & 0x80000000:
        value -= 0x100000000
    return _to_base36(abs(value))


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits: list[str] = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


__all__ = ["CONTEXT_FIELDS", "STACK_LINES", "derive_signature", "string_hash"]
