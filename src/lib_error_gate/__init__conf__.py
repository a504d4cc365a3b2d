"""Static package metadata surfaced by the CLI and ``summary_info``.

Keep these values in sync with ``pyproject.toml``.
"""

from __future__ import annotations

import sys
from typing import Callable

name = "lib_error_gate"
title = "Signature-grouped error admission gate with sliding windows and cooldowns"
version = "0.1.0"
homepage = "https://github.com/bitranox/lib_error_gate"
author = "bitranox"
author_email = "bitranox@gmail.com"
shell_command = "lib_error_gate"


def print_info(writer: Callable[[str], object] | None = None) -> None:
    """Emit the metadata banner, one line per call to ``writer``.

    Examples
    --------
    >>> lines = []
    >>> print_info(writer=lines.append)
    >>> lines[0]
    'Info for lib_error_gate:\\n'
    """

    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("homepage", homepage),
        ("author", author),
        ("author_email", author_email),
        ("shell_command", shell_command),
    ]
    emit = writer if writer is not None else sys.stdout.write
    pad = max(len(label) for label, _ in fields)
    emit(f"Info for {name}:\n")
    emit("\n")
    for label, value in fields:
        emit(f"    {label.ljust(pad)} = {value}\n")
