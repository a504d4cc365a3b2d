"""Normalised view of an error occurrence.

Purpose
-------
Collapse the many shapes an "error" can take (plain strings, raised
exceptions, error-like mappings or objects) into a single immutable value the
signature deriver can hash without special cases.

Contents
--------
* :class:`ErrorOccurrence` – frozen dataclass holding name, message, and stack.
* :func:`normalise_error` – best-effort conversion that never raises.

System Role
-----------
Domain entry point for every admission decision. Malformed inputs degrade to a
default occurrence instead of failing so callers on an error path never see a
second error from the gate itself.
"""

from __future__ import annotations

import traceback
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

DEFAULT_ERROR_NAME = "Error"


@dataclass(slots=True, frozen=True)
class ErrorOccurrence:
    """Identity of a single error occurrence.

    Attributes
    ----------
    name:
        Error kind (exception class name, or ``"Error"`` for plain messages).
    message:
        Human-readable message.
    stack:
        Optional stack text, one frame per line, innermost frame first.
    """

    name: str
    message: str
    stack: str | None = None

    def stack_head(self, lines: int = 3) -> str:
        """Return at most ``lines`` leading lines of :attr:`stack`.

        Examples
        --------
        >>> ErrorOccurrence('E', 'm', 'a\\nb\\nc\\nd').stack_head()
        'a\\nb\\nc'
        >>> ErrorOccurrence('E', 'm').stack_head()
        ''
        """

        if not self.stack:
            return ""
        return "\n".join(self.stack.split("\n")[:lines])

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ErrorOccurrence":
        """Build an occurrence from an exception, innermost frame first."""

        stack: str | None = None
        if exc.__traceback__ is not None:
            frames = traceback.extract_tb(exc.__traceback__)
            stack = "\n".join(f'  File "{frame.filename}", line {frame.lineno}, in {frame.name}' for frame in reversed(frames))
        return cls(name=type(exc).__name__, message=safe_str(exc), stack=stack)


def normalise_error(error: Any) -> ErrorOccurrence:
    """Return an :class:`ErrorOccurrence` for any error-like ``error``.

    Examples
    --------
    >>> normalise_error("boom")
    ErrorOccurrence(name='Error', message='boom', stack=None)
    >>> normalise_error({"name": "TypeError", "message": "bad"}).name
    'TypeError'
    >>> normalise_error(None).message
    ''
    """

    if isinstance(error, ErrorOccurrence):
        return error
    if isinstance(error, str):
        return ErrorOccurrence(name=DEFAULT_ERROR_NAME, message=error)
    if isinstance(error, BaseException):
        return ErrorOccurrence.from_exception(error)
    if isinstance(error, Mapping):
        return _from_fields(error.get("name"), error.get("message"), error.get("stack"))
    if error is None:
        return ErrorOccurrence(name=DEFAULT_ERROR_NAME, message="")
    name, message, stack = (_safe_getattr(error, field) for field in ("name", "message", "stack"))
    if message is not None or name is not None:
        return _from_fields(name, message, stack)
    return ErrorOccurrence(name=DEFAULT_ERROR_NAME, message=safe_str(error))


def _safe_getattr(value: Any, field: str) -> Any:
    try:
        return getattr(value, field, None)
    except Exception:  # noqa: BLE001 - hostile properties must not break admission
        return None


def _from_fields(name: Any, message: Any, stack: Any) -> ErrorOccurrence:
    return ErrorOccurrence(
        name=(safe_str(name) if name is not None else "") or DEFAULT_ERROR_NAME,
        message=safe_str(message) if message is not None else "",
        stack=(safe_str(stack) if stack is not None else "") or None,
    )


def safe_str(value: Any) -> str:
    try:
        return str(value)
    except Exception:  # noqa: BLE001 - hostile __str__ must not break admission
        return f"<{type(value).__name__}>"


__all__ = ["DEFAULT_ERROR_NAME", "ErrorOccurrence", "normalise_error", "safe_str"]