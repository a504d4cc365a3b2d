"""Pseudonymised user context for telemetry events.

Identifiers are replaced by the same base-36 string hash used for error
signatures, so one user maps to one stable token without the raw id or email
leaving the process. The hash is not cryptographic; it only keeps casual
readers of the telemetry backend from seeing personal data.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .signature import string_hash

INVALID_EMAIL = "invalid_email"
_PRIVATE_USER_KEYS = frozenset({"id", "email", "password", "token"})


def hash_user_id(user_id: str) -> str:
    """Return ``user_<hash>`` for ``user_id``.

    Examples
    --------
    >>> hash_user_id("a")
    'user_2p'
    """

    return f"user_{string_hash(str(user_id))}"


def hash_email(email: str) -> str:
    """Hash the local part of ``email`` and keep the domain.

    Examples
    --------
    >>> hash_email("a@example.org")
    'user_2p@example.org'
    >>> hash_email("nobody")
    'invalid_email'
    """

    parts = str(email).split("@")
    if len(parts) < 2 or not parts[1]:
        return INVALID_EMAIL
    return f"{hash_user_id(parts[0])}@{parts[1]}"


def anonymise_user(user: Mapping[str, Any]) -> dict[str, Any]:
    """Build the user context attached to captured events.

    ``id`` and ``email`` are hashed; ``password`` and ``token`` are dropped;
    every other key is copied into ``data``.
    """

    anonymised: dict[str, Any] = {
        "id": hash_user_id(user["id"]) if user.get("id") else None,
        "email": hash_email(user["email"]) if user.get("email") else None,
        "username": user.get("username"),
    }
    data = {key: value for key, value in user.items() if key not in _PRIVATE_USER_KEYS}
    if data:
        anonymised["data"] = data
    return anonymised


__all__ = ["INVALID_EMAIL", "anonymise_user", "hash_email", "hash_user_id"]
