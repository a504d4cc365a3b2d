"""Key-based payload scrubber.

Purpose
-------
Mask credentials in telemetry payloads (request/response bodies, extras) and
in URL query strings before they are handed to the transport.

Contents
--------
* :data:`DEFAULT_SENSITIVE_KEYS` / :data:`DEFAULT_SENSITIVE_PARAMS`.
* :class:`SensitiveDataScrubber` – concrete :class:`ScrubberPort`.

System Role
-----------
Used by the capture use case for API errors so admitted events never carry
secrets to the backend.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence, Set as AbstractSet
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from lib_error_gate.application.ports.scrubber import ScrubberPort

DEFAULT_SENSITIVE_KEYS: tuple[str, ...] = (
    "password",
    "token",
    "key",
    "secret",
    "auth",
    "authorization",
    "cookie",
    "session",
    "csrf",
    "api_key",
    "access_token",
    "refresh_token",
)
"""Substrings marking a mapping key as sensitive (case-insensitive)."""

DEFAULT_SENSITIVE_PARAMS: tuple[str, ...] = ("password", "token", "key", "secret", "auth")
"""Exact query parameter names masked in URLs."""


class SensitiveDataScrubber(ScrubberPort):
    """Redact sensitive keys and query parameters.

    Parameters
    ----------
    sensitive_keys:
        Substrings that mark a mapping key as sensitive.
    sensitive_params:
        Query parameter names whose values are masked.
    replacement:
        Token replacing masked values (defaults to ``"***"``).

    Examples
    --------
    >>> scrubber = SensitiveDataScrubber()
    >>> scrubber.scrub_data({'user': 'ann', 'Api_Key': 'k', 'nested': {'password': 'p'}})
    {'user': 'ann', 'Api_Key': '***', 'nested': {'password': '***'}}
    >>> scrubber.scrub_url('https://example.com/a?token=abc&page=2')
    'https://example.com/a?token=***&page=2'
    """

    def __init__(
        self,
        *,
        sensitive_keys: Iterable[str] = DEFAULT_SENSITIVE_KEYS,
        sensitive_params: Iterable[str] = DEFAULT_SENSITIVE_PARAMS,
        replacement: str = "***",
    ) -> None:
        self._sensitive_keys = tuple(key.lower() for key in sensitive_keys)
        self._sensitive_params = frozenset(param.lower() for param in sensitive_params)
        self._replacement = replacement
        params = "|".join(re.escape(param) for param in sorted(self._sensitive_params))
        self._param_pattern = re.compile(rf"([?&])({params})=[^&#]*", re.IGNORECASE) if params else None

    def scrub_data(self, data: Any) -> Any:
        """Return ``data`` with sensitive mapping keys masked recursively."""

        if isinstance(data, Mapping):
            return {key: self._scrub_entry(key, value) for key, value in data.items()}
        if isinstance(data, AbstractSet):
            return type(data)(self.scrub_data(item) for item in data)
        if isinstance(data, Sequence) and not isinstance(data, (str, bytes, bytearray)):
            converted = [self.scrub_data(item) for item in data]
            if isinstance(data, tuple):
                return tuple(converted)
            return converted
        return data

    def scrub_url(self, url: str) -> str:
        """Return ``url`` with sensitive query parameter values masked."""

        if not url:
            return url
        try:
            parts = urlsplit(url)
            if not parts.query:
                return url
            pairs = parse_qsl(parts.query, keep_blank_values=True)
        except ValueError:
            return self._scrub_url_fallback(url)
        scrubbed = [(name, self._replacement if name.lower() in self._sensitive_params else value) for name, value in pairs]
        return urlunsplit(parts._replace(query=urlencode(scrubbed, safe="*")))

    def is_sensitive(self, key: Any) -> bool:
        lowered = str(key).lower()
        return any(marker in lowered for marker in self._sensitive_keys)

    def _scrub_entry(self, key: Any, value: Any) -> Any:
        if self.is_sensitive(key):
            return self._replacement
        return self.scrub_data(value)

    def _scrub_url_fallback(self, url: str) -> str:
        if self._param_pattern is None:
            return url
        return self._param_pattern.sub(lambda match: f"{match.group(1)}{match.group(2)}={self._replacement}", url)


__all__ = ["DEFAULT_SENSITIVE_KEYS", "DEFAULT_SENSITIVE_PARAMS", "SensitiveDataScrubber"]
