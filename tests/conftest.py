from __future__ import annotations

from io import StringIO
from typing import Iterator

import pytest
from rich.console import Console

import lib_error_gate


@pytest.fixture
def record_console() -> Console:
    """Rich console capturing output for assertions."""

    return Console(file=StringIO(), record=True, width=120, color_system=None)


@pytest.fixture
def clean_runtime() -> Iterator[None]:
    """Guarantee no runtime leaks between tests that call ``init``."""

    try:
        yield
    finally:
        if lib_error_gate.is_initialised():
            lib_error_gate.shutdown()
