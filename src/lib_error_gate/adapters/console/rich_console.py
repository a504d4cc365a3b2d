"""Rich-powered console rendering of gate reports.

Purpose
-------
Present limiter configuration, per-occurrence decisions, and aggregate
statistics to operators running the CLI.

Contents
--------
* :data:`_DECISION_STYLES` - default styles for admitted/suppressed lines.
* :class:`RichReportConsole` - renderer used by :mod:`lib_error_gate.cli`.
"""

from __future__ import annotations

from typing import Mapping

from rich.console import Console
from rich.table import Table

from lib_error_gate.domain.counter import LimiterConfig
from lib_error_gate.domain.reports import LimiterStats, RateLimitStatus


_DECISION_STYLES: Mapping[bool, str] = {
    True: "green",
    False: "bold red",
}


class RichReportConsole:
    """Render gate reports using Rich tables and styled lines."""

    def __init__(
        self,
        *,
        console: Console | None = None,
        force_color: bool = False,
        no_color: bool = False,
    ) -> None:
        """Configure the renderer with optional colour overrides."""
        if console is not None:
            self._console = console
        else:
            self._console = Console(force_terminal=force_color or None, no_color=no_color)
        self._no_color = no_color

    @property
    def console(self) -> Console:
        return self._console

    def print_limits(self, limits: Mapping[str, LimiterConfig], *, default_category: str | None = None) -> None:
        """Print one row per category with its tuning.

        Examples
        --------
        >>> from io import StringIO
        >>> console = Console(file=StringIO(), record=True, width=120)
        >>> RichReportConsole(console=console).print_limits({'general': LimiterConfig(5, 60000, 300000)})
        >>> 'general' in console.export_text()
        True
        """
        table = Table(title="Error categories")
        table.add_column("category")
        table.add_column("max", justify="right")
        table.add_column("window (ms)", justify="right")
        table.add_column("cooldown (ms)", justify="right")
        for name, config in limits.items():
            label = f"{name} (default)" if name == default_category else name
            table.add_row(label, str(config.max_occurrences), _fmt(config.window_ms), _fmt(config.cooldown_ms))
        self._console.print(table)

    def print_decision(self, index: int, at_ms: float, admitted: bool, status: RateLimitStatus) -> None:
        """Print a single decision line of a simulated storm."""
        verdict = "admitted" if admitted else "suppressed"
        style = "" if self._no_color else _DECISION_STYLES[admitted]
        line = (
            f"#{index:<4} t={_fmt(at_ms):>10}ms {verdict:<10} count={status.count} "
            f"reset_in={_fmt(status.time_until_reset)}ms cooldown_in={_fmt(status.time_until_cooldown_end)}ms"
        )
        self._console.print(line, style=style, highlight=False)

    def print_stats(self, stats: Mapping[str, LimiterStats]) -> None:
        """Print aggregate statistics keyed by category."""
        table = Table(title="Limiter statistics")
        table.add_column("category")
        table.add_column("signatures", justify="right")
        table.add_column("active", justify="right")
        table.add_column("rate limited", justify="right")
        table.add_column("occurrences", justify="right")
        for name, item in stats.items():
            table.add_row(
                name,
                str(item.total_unique_signatures),
                str(item.active_signatures),
                str(item.rate_limited_signatures),
                str(item.total_occurrences),
            )
        self._console.print(table)


def _fmt(value: float) -> str:
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else f"{value:.1f}"
    return str(value)


__all__ = ["RichReportConsole"]
