"""Rich-click command line interface for the error admission gate.

Purpose
-------
Give operators a quick way to inspect the resolved category limits, compute
the signature an error would be grouped under, and replay a synthetic error
storm to see which occurrences a given tuning admits.

Contents
--------
* :func:`cli` - root group with ``--traceback`` and ``--use-dotenv`` switches.
* ``info`` / ``limits`` / ``signature`` / ``simulate`` sub-commands.
* :func:`main` - entry point delegating to :func:`lib_cli_exit_tools.run_cli`.
"""

from __future__ import annotations

import json
import os
from typing import Any, Sequence

import lib_cli_exit_tools
import rich_click as click
from click.core import ParameterSource

from . import __init__conf__
from . import config as config_module
from .adapters import LimiterRegistry, ManualClock, RichReportConsole
from .domain import ErrorOccurrence, derive_signature
from .domain.occurrence import DEFAULT_ERROR_NAME
from .runtime import summary_info
from .runtime._settings import RuntimeSettings, build_runtime_settings

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(
    help=__init__conf__.title,
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=True,
)
@click.version_option(
    version=__init__conf__.version,
    prog_name=__init__conf__.shell_command,
    message=f"{__init__conf__.shell_command} version {__init__conf__.version}",
)
@click.option(
    "--traceback/--no-traceback",
    default=False,
    help="Show full Python tracebacks on errors.",
)
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=False,
    help=f"Load ERROR_GATE_* overrides from the nearest .env (overrides {config_module.DOTENV_ENV_VAR}).",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool, use_dotenv: bool) -> None:
    """Root command; prints the metadata banner when no sub-command is given."""

    if ctx.get_parameter_source("traceback") is not ParameterSource.DEFAULT:
        lib_cli_exit_tools.config.traceback = traceback
        lib_cli_exit_tools.config.traceback_force_color = traceback

    explicit: bool | None = None
    if ctx.get_parameter_source("use_dotenv") is not ParameterSource.DEFAULT:
        explicit = use_dotenv
    if config_module.should_use_dotenv(explicit=explicit, env_value=os.getenv(config_module.DOTENV_ENV_VAR)):
        config_module.enable_dotenv()

    if ctx.invoked_subcommand is None:
        click.echo(summary_info(), nl=False)


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print package metadata."""

    click.echo(summary_info(), nl=False)


@cli.command("limits", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--no-color", is_flag=True, default=False, help="Disable colour output.")
def cli_limits(no_color: bool) -> None:
    """Show the category limits after applying ERROR_GATE_* overrides."""

    settings = _resolve_settings()
    RichReportConsole(no_color=no_color).print_limits(settings.limits, default_category=settings.default_category)


@cli.command("signature", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("message")
@click.option("--name", default=DEFAULT_ERROR_NAME, show_default=True, help="Error type name.")
@click.option("--component", default=None, help="Component the error originated from.")
@click.option("--action", default=None, help="Action being performed.")
@click.option("--url", default=None, help="Request URL involved.")
def cli_signature(message: str, name: str, component: str | None, action: str | None, url: str | None) -> None:
    """Print the signature MESSAGE would be grouped under."""

    fields = {"component": component, "action": action, "url": url}
    context = fields if any(value is not None for value in fields.values()) else None
    click.echo(derive_signature(ErrorOccurrence(name=name, message=message), context))


@cli.command("simulate", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--category", default=None, help="Category to replay against (default category when omitted).")
@click.option("--occurrences", type=click.IntRange(min=1), default=10, show_default=True, help="Number of occurrences.")
@click.option(
    "--interval-ms",
    type=click.FloatRange(min=0.0),
    default=1000.0,
    show_default=True,
    help="Simulated milliseconds between occurrences.",
)
@click.option("--message", default="simulated failure", show_default=True, help="Error message to repeat.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    show_default=True,
    help="Output format.",
)
@click.option("--no-color", is_flag=True, default=False, help="Disable colour output.")
def cli_simulate(
    category: str | None,
    occurrences: int,
    interval_ms: float,
    message: str,
    output_format: str,
    no_color: bool,
) -> None:
    """Replay a storm of identical errors against a simulated clock."""

    settings = _resolve_settings()
    clock = ManualClock()
    registry = LimiterRegistry(settings.limits, clock=clock, default_category=settings.default_category)
    limiter = registry.limiter(category)
    error = ErrorOccurrence(name=DEFAULT_ERROR_NAME, message=message)

    decisions: list[dict[str, Any]] = []
    console = None if output_format.lower() == "json" else RichReportConsole(no_color=no_color)
    for index in range(1, occurrences + 1):
        at_ms = clock.now_ms()
        admitted = limiter.should_log(error)
        status = limiter.get_status(error)
        if console is not None:
            console.print_decision(index, at_ms, admitted, status)
        decisions.append({"index": index, "at_ms": at_ms, "admitted": admitted, "status": status.to_dict()})
        clock.advance(interval_ms)

    stats = {limiter.name: limiter.get_stats()}
    if console is None:
        payload = {
            "category": limiter.name,
            "decisions": decisions,
            "admitted": sum(1 for item in decisions if item["admitted"]),
            "stats": {name: item.to_dict() for name, item in stats.items()},
        }
        click.echo(json.dumps(payload, indent=2))
        return
    console.print_stats(stats)


def _resolve_settings() -> RuntimeSettings:
    try:
        return build_runtime_settings(enable_sweeper=False)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI through :func:`lib_cli_exit_tools.run_cli`.

    Traceback preferences changed by ``--traceback`` are restored afterwards
    so embedding hosts and test suites keep their own settings.
    """

    previous_traceback = lib_cli_exit_tools.config.traceback
    previous_force_color = lib_cli_exit_tools.config.traceback_force_color
    try:
        return lib_cli_exit_tools.run_cli(
            cli,
            argv=list(argv) if argv is not None else None,
            prog_name=__init__conf__.shell_command,
        )
    finally:
        lib_cli_exit_tools.config.traceback = previous_traceback
        lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":
    raise SystemExit(main())
