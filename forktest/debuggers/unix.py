from __future__ import annotations

import faulthandler
import signal
from typing import TextIO, Tuple

from .base import CrashDiagnostics


def _existing_signals(*names: str) -> Tuple[int, ...]:
    numbers = []
    for name in names:
        value = getattr(signal, name, None)
        if value is not None:
            numbers.append(int(value))
    return tuple(numbers)


# Handled by faulthandler.enable(): dump, then re-raise with the default action.
FAULT_SIGNALS = _existing_signals("SIGSEGV", "SIGFPE", "SIGABRT", "SIGBUS", "SIGILL")

# Termination requests. The default action already ends the process, so the
# handler dumps and then chains to it.
TERMINATION_SIGNALS = _existing_signals("SIGHUP", "SIGINT", "SIGQUIT", "SIGTERM")


class UnixCrashDiagnostics(CrashDiagnostics):
    """Print the Python traceback of every thread when a fatal signal arrives.

    The dump is done by ``faulthandler`` at C level, which is safe to run
    from a signal handler. The child then dies by the same signal so the
    parent can report it.
    """

    @property
    def signals(self) -> Tuple[int, ...]:
        return FAULT_SIGNALS + TERMINATION_SIGNALS

    def install(self, stream: TextIO) -> None:
        faulthandler.enable(file=stream, all_threads=True)

        for signum in TERMINATION_SIGNALS:
            # Forget handlers inherited from the runner (SIGINT raises
            # KeyboardInterrupt by default) so chaining ends the process.
            signal.signal(signum, signal.SIG_DFL)
            faulthandler.register(signum, file=stream, all_threads=True, chain=True)
