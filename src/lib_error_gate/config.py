"""Optional ``.env`` loading for hosts and the CLI.

Purpose
-------
Let operators keep ``ERROR_GATE_*`` overrides in a ``.env`` file next to the
application. Loading is opt-in: the CLI ``--use-dotenv`` flag wins over the
:data:`DOTENV_ENV_VAR` toggle, and real environment variables always win over
file entries.
"""

from __future__ import annotations

import threading
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

DOTENV_ENV_VAR = "ERROR_GATE_USE_DOTENV"
"""Environment toggle enabling ``.env`` loading when no CLI flag is given."""

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}

_DOTENV_LOCK = threading.Lock()
_LOADED_PATH: Path | None = None


def should_use_dotenv(*, explicit: bool | None = None, env_value: str | None = None) -> bool:
    """Return whether ``.env`` loading is requested.

    Examples
    --------
    >>> should_use_dotenv(explicit=False, env_value="1")
    False
    >>> should_use_dotenv(env_value="yes")
    True
    >>> should_use_dotenv()
    False
    """

    if explicit is not None:
        return explicit
    if env_value is None:
        return False
    return env_value.strip().lower() in _TRUTHY


def parse_bool(name: str, raw: str) -> bool:
    """Parse a boolean environment value or raise :class:`ValueError`."""

    lowered = raw.strip().lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean (1/0, true/false, yes/no, on/off), got {raw!r}")


def enable_dotenv(*, search_from: Path | None = None) -> Path | None:
    """Load the nearest ``.env`` without overriding existing variables.

    The search walks upward from ``search_from`` (default: the current
    working directory). Returns the resolved path that was loaded, or
    ``None`` when no file exists.
    """

    global _LOADED_PATH
    with _DOTENV_LOCK:
        if search_from is None:
            found = find_dotenv(usecwd=True)
        else:
            found = _search_upwards(search_from)
        if not found:
            return None
        path = Path(found).resolve()
        if _LOADED_PATH != path:
            load_dotenv(path, override=False)
            _LOADED_PATH = path
        return path


def _search_upwards(start: Path) -> str:
    for directory in (start.resolve(), *start.resolve().parents):
        candidate = directory / ".env"
        if candidate.is_file():
            return str(candidate)
    return ""


def _reset_dotenv_state_for_testing() -> None:
    global _LOADED_PATH
    with _DOTENV_LOCK:
        _LOADED_PATH = None


__all__ = ["DOTENV_ENV_VAR", "enable_dotenv", "parse_bool", "should_use_dotenv"]
