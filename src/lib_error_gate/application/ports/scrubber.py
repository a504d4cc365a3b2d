"""Port for redacting sensitive values from telemetry payloads."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ScrubberPort(Protocol):
    """Scrub sensitive values before they leave the process."""

    def scrub_data(self, data: Any) -> Any:
        """Return a (possibly) redacted copy of ``data``."""

    def scrub_url(self, url: str) -> str:
        """Return ``url`` with sensitive query parameters masked."""


__all__ = ["ScrubberPort"]
