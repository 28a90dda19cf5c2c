"""Logging helpers for the db2crud CLI.

The ``print_*`` functions write colored lines to the terminal. Core code
never calls them directly: it receives a :class:`Reporter` and the CLI hands
it a :class:`ConsoleReporter`, so resolution and loading can run headless.
"""

from __future__ import annotations

import os
import sys
from typing import Protocol


class Colors:
    """ANSI color codes for terminal output."""
    HEADER = '\033[95m'
    OKCYAN = '\033[96m'
    CYAN = '\033[96m'  # Alias for OKCYAN
    OKGREEN = '\033[92m'
    GREEN = '\033[92m'  # Alias for OKGREEN
    WARNING = '\033[93m'
    YELLOW = '\033[93m'  # Alias for WARNING
    FAIL = '\033[91m'
    RED = '\033[91m'  # Alias for FAIL
    ENDC = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'


_color_enabled = os.environ.get("NO_COLOR") is None


def set_color_enabled(enabled: bool) -> None:
    """Turn ANSI colors on or off for all print helpers."""
    global _color_enabled
    _color_enabled = enabled


def _paint(codes: str, msg: str) -> str:
    if not _color_enabled:
        return msg
    return f"{codes}{msg}{Colors.ENDC}"


def print_header(msg: str) -> None:
    """Print a header message."""
    print(_paint(Colors.HEADER + Colors.BOLD, msg))


def print_info(msg: str) -> None:
    """Print an info message."""
    print(_paint(Colors.OKCYAN, msg))


def print_detail(msg: str) -> None:
    """Print a dimmed detail line."""
    print(_paint(Colors.DIM, msg))


def print_success(msg: str) -> None:
    """Print a success message."""
    print(_paint(Colors.OKGREEN, f"✓ {msg}"))


def print_warning(msg: str) -> None:
    """Print a warning message."""
    print(_paint(Colors.YELLOW, f"⚠️  {msg}"))


def print_error(msg: str) -> None:
    """Print an error message to stderr."""
    print(_paint(Colors.RED, f"❌ {msg}"), file=sys.stderr)


# ---------------------------------------------------------------------------
# Reporter abstraction
# ---------------------------------------------------------------------------


class Reporter(Protocol):
    """Severity-aware sink for progress and diagnostic messages."""

    def info(self, msg: str) -> None: ...

    def success(self, msg: str) -> None: ...

    def warning(self, msg: str) -> None: ...

    def error(self, msg: str) -> None: ...

    def detail(self, msg: str) -> None: ...


class ConsoleReporter:
    """Reporter that prints through the colored helpers above.

    Args:
        verbose: When False, ``detail`` messages are dropped.
    """

    def __init__(self, verbose: bool = False) -> None:
        self.verbose = verbose

    def info(self, msg: str) -> None:
        print_info(msg)

    def success(self, msg: str) -> None:
        print_success(msg)

    def warning(self, msg: str) -> None:
        print_warning(msg)

    def error(self, msg: str) -> None:
        print_error(msg)

    def detail(self, msg: str) -> None:
        if self.verbose:
            print_detail(msg)
