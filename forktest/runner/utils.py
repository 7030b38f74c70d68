from __future__ import annotations

import os
import signal
import sys
from typing import Callable, Mapping, Optional, TextIO


class Color:
    """ANSI color codes for terminal output"""

    GREEN = '\033[92m'
    RED = '\033[91m'
    YELLOW = '\033[93m'
    BLUE = '\033[94m'
    RESET = '\033[0m'
    BOLD = '\033[1m'


class NoColor:
    GREEN = ''
    RED = ''
    YELLOW = ''
    BLUE = ''
    RESET = ''
    BOLD = ''


PrintFn = Callable[[str], None]


def stderr_print(message: str) -> None:
    """Diagnostics go to stderr so stdout carries only the report."""

    print(message, file=sys.stderr, flush=True)


def format_duration(seconds: float) -> str:
    """Format duration in human-readable format."""

    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    return f"{seconds:.2f}s"


def env_flag(name: str, environ: Optional[Mapping[str, str]] = None) -> bool:
    """Return True if the specified environment variable is truthy."""

    source = os.environ if environ is None else environ
    value = source.get(name)
    if value is None:
        return False

    normalized = value.strip().lower()
    if not normalized:
        return False

    return normalized not in {"0", "false", "no", "off"}


def stream_supports_color(stream: TextIO) -> bool:
    """Return True when ``stream`` is attached to a terminal."""

    isatty = getattr(stream, "isatty", None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except ValueError:
        # Closed stream.
        return False


def describe_signal(signum: int) -> str:
    """Return the symbolic description of ``signum``, e.g. "Segmentation fault"."""

    try:
        description = signal.strsignal(signum)
    except ValueError:
        description = None
    if description:
        return description

    try:
        return signal.Signals(signum).name
    except ValueError:
        return f"Unknown signal {signum}"
