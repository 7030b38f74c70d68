"""Checks used inside test bodies.

Each failed check prints a short report to the (captured) standard output
and raises ``TestFailure``, which the child process turns into exit code 1.
"""

from __future__ import annotations

import linecache
import sys
from typing import Any, NoReturn, Optional, Tuple

from .errors import StopTest, TestFailure


def _caller_context(depth: int = 2) -> Tuple[int, str]:
    """Return ``(lineno, source line)`` of the frame ``depth`` levels up."""

    frame = sys._getframe(depth)
    lineno = frame.f_lineno
    source = linecache.getline(frame.f_code.co_filename, lineno).strip()
    return lineno, source or "<unknown>"


def _format(message: str, args: Tuple[Any, ...]) -> str:
    return message % args if args else message


def _report(lineno: int, expression: str, got: str, expected: str,
            message: str, args: Tuple[Any, ...]) -> NoReturn:
    print(f"error at line {lineno}: value of: {expression}")
    print(f"     Got: {got}")
    print(f"Expected: {expected}")
    if message:
        print(_format(message, args))
    raise TestFailure(f"check failed at line {lineno}: {expression}")


def fail(message: Optional[str] = None, *args: Any) -> NoReturn:
    """End the current test as failed."""

    if not message:
        raise TestFailure("test failed")
    text = _format(message, args)
    print(text)
    raise TestFailure(text)


def succeed() -> NoReturn:
    """End the current test as passed."""

    raise StopTest()


def check(value: Any, message: str = "", *args: Any) -> None:
    if value:
        return
    lineno, source = _caller_context()
    _report(lineno, source, "False", "True", message, args)


def check_eq(got: Any, expected: Any, message: str = "", *args: Any) -> None:
    if got == expected:
        return
    lineno, source = _caller_context()
    _report(lineno, source, repr(got), repr(expected), message, args)


def check_streq(got: str, expected: str, message: str = "", *args: Any) -> None:
    """Compare two strings and print both verbatim on mismatch."""

    if got == expected:
        return
    lineno, source = _caller_context()
    _report(lineno, source, got, expected, message, args)
