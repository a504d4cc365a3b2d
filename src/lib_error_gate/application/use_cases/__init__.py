"""Application use cases."""

from __future__ import annotations

from .capture import CaptureResult, ErrorCapture, create_error_capture
from .shutdown import create_shutdown

__all__ = ["CaptureResult", "ErrorCapture", "create_error_capture", "create_shutdown"]
