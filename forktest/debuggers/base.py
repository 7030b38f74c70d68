from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Optional, TextIO, Tuple


class CrashDiagnostics(ABC):
    """Strategy that makes a dying test child print where it died.

    ``install`` runs inside the forked child only, after its standard
    streams have been redirected into the capture pipe.
    """

    def __init__(
        self,
        verbose: bool = False,
        *,
        print_fn: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.verbose = verbose
        self._print = print_fn

    @property
    @abstractmethod
    def signals(self) -> Tuple[int, ...]:
        """Signal numbers that produce a backtrace before termination."""

    @abstractmethod
    def install(self, stream: TextIO) -> None:
        """Arrange for a backtrace on ``stream`` when a fatal signal arrives."""

    def _log(self, message: str) -> None:
        if self._print is not None:
            self._print(message)


class NullCrashDiagnostics(CrashDiagnostics):
    """Fallback used when the platform lacks POSIX signals."""

    @property
    def signals(self) -> Tuple[int, ...]:
        return ()

    def install(self, stream: TextIO) -> None:
        self._log("crash diagnostics unavailable on this platform")
