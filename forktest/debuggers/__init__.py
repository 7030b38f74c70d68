from __future__ import annotations

import os
from typing import Callable, Optional

from .base import CrashDiagnostics, NullCrashDiagnostics


def get_crash_diagnostics(
    verbose: bool = False,
    *,
    print_fn: Optional[Callable[[str], None]] = None,
) -> CrashDiagnostics:
    """Return the crash diagnostics strategy appropriate for the current platform."""

    if os.name == "posix":
        from .unix import UnixCrashDiagnostics

        return UnixCrashDiagnostics(verbose, print_fn=print_fn)

    return NullCrashDiagnostics(verbose, print_fn=print_fn)


__all__ = ["CrashDiagnostics", "NullCrashDiagnostics", "get_crash_diagnostics"]
