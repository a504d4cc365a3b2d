"""Console adapters."""

from __future__ import annotations

from .rich_console import RichReportConsole

__all__ = ["RichReportConsole"]
