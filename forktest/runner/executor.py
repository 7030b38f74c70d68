from __future__ import annotations

import contextlib
import os
import signal
import sys
import time
import traceback
from dataclasses import dataclass
from typing import Any, List, Optional, TextIO, Tuple

from ..debuggers import CrashDiagnostics, get_crash_diagnostics
from ..errors import HarnessError, StopTest, TestFailure
from ..registry import TestDescriptor, TestOutcome
from .platform import PlatformSupport, get_platform_support
from .utils import NoColor, PrintFn, describe_signal, format_duration, stderr_print

READ_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class ExecutionRecord:
    """What the runner learned from one finished test child."""

    descriptor: TestDescriptor
    output: bytes
    pid: int
    exit_code: Optional[int] = None
    signal: Optional[int] = None
    duration: float = 0.0

    @property
    def failed(self) -> bool:
        return self.signal is not None or self.exit_code != 0

    @property
    def log(self) -> str:
        """Captured output decoded for display."""

        return self.output.decode("utf-8", errors="replace")

    def describe_termination(self) -> str:
        if self.signal is not None:
            return f"signal {self.signal} ({describe_signal(self.signal)})"
        return f"exit code {self.exit_code}"


def decode_wait_status(status: int) -> Tuple[Optional[int], Optional[int]]:
    """Return ``(exit_code, signal)`` for a ``waitpid`` status."""

    if os.WIFEXITED(status):
        return os.WEXITSTATUS(status), None
    if os.WIFSIGNALED(status):
        return None, os.WTERMSIG(status)
    raise HarnessError(f"test child exited with unknown status {status:#x}")


def _flush_standard_streams() -> None:
    for stream in (sys.stdout, sys.stderr):
        if stream is None:
            continue
        try:
            stream.flush()
        except (OSError, ValueError):
            # Closed or broken stream; nothing buffered can be saved.
            pass


def _reopen_stream(fd: int) -> TextIO:
    return open(fd, "w", buffering=1, encoding="utf-8",
                errors="backslashreplace", closefd=False)


def _close(fd: int, step: str) -> None:
    try:
        os.close(fd)
    except OSError as exc:
        raise HarnessError(step, exc) from exc


def run_entry_point(descriptor: TestDescriptor) -> int:
    """Call the test body and return the child's exit code.

    Runs inside the child. Failures are reported on the (captured) standard
    streams and collapse to exit code 1.
    """

    try:
        outcome = descriptor.entry_point()
    except StopTest:
        return 0
    except TestFailure:
        # The check already printed its report.
        return 1
    except SystemExit as exc:
        if exc.code is None or exc.code == 0:
            return 0
        if not isinstance(exc.code, int):
            print(exc.code, file=sys.stderr)
        return 1
    except Exception:
        traceback.print_exc()
        return 1

    if outcome is None:
        return 0
    if isinstance(outcome, TestOutcome):
        return outcome.exit_code
    print(f"test body returned {outcome!r}, expected None or a TestOutcome", file=sys.stderr)
    return 1


class IsolatedExecutor:
    """Runs one test descriptor in a forked child and collects the result."""

    def __init__(
        self,
        *,
        verbose: bool = False,
        platform: Optional[PlatformSupport] = None,
        diagnostics: Optional[CrashDiagnostics] = None,
        print_fn: Optional[PrintFn] = None,
        color: Any = None,
    ) -> None:
        self.verbose = verbose
        self._print = print_fn if print_fn is not None else stderr_print
        self._color = color if color is not None else NoColor
        self._platform = platform if platform is not None else get_platform_support(verbose=verbose)
        self._diagnostics = (
            diagnostics if diagnostics is not None else get_crash_diagnostics(verbose)
        )

    def run(self, descriptor: TestDescriptor) -> ExecutionRecord:
        if not self._platform.supports_fork:
            raise HarnessError("could not fork test child: fork() is unavailable on this platform")

        try:
            read_fd, write_fd = os.pipe()
        except OSError as exc:
            raise HarnessError("could not create test fork pipe", exc) from exc

        # Buffered output would otherwise be written once by each process.
        _flush_standard_streams()

        start_time = time.monotonic()
        try:
            pid = os.fork()
        except OSError as exc:
            for fd in (read_fd, write_fd):
                with contextlib.suppress(OSError):
                    os.close(fd)
            raise HarnessError("could not fork test child", exc) from exc

        if pid == 0:
            self._child(read_fd, write_fd, descriptor)

        try:
            # The read loop only sees end-of-stream once every copy of the
            # write end is closed, including this one.
            _close(write_fd, "could not close pipe writing end")
            output = self._drain(read_fd)
            exit_code, signum = self._wait(pid)
        except BaseException:
            self._abandon(pid, read_fd)
            raise

        _close(read_fd, "could not close pipe reading end")
        duration = time.monotonic() - start_time

        record = ExecutionRecord(
            descriptor=descriptor,
            output=output,
            pid=pid,
            exit_code=exit_code,
            signal=signum,
            duration=duration,
        )
        if self.verbose:
            self._print(
                f"{descriptor.qualified_name}: pid={pid} "
                f"{record.describe_termination()} after {format_duration(duration)}"
            )
        self._kill_lingering(descriptor, pid)
        return record

    def _child(self, read_fd: int, write_fd: int, descriptor: TestDescriptor) -> None:
        """Body of the forked child. Never returns."""

        exit_code = 1
        try:
            os.close(read_fd)
            os.dup2(write_fd, 1)
            os.dup2(write_fd, 2)
            os.close(write_fd)
            sys.stdout = _reopen_stream(1)
            sys.stderr = _reopen_stream(2)

            self._platform.detach_child()
            self._diagnostics.install(sys.stderr)
            exit_code = run_entry_point(descriptor)
        except BaseException:
            traceback.print_exc()
        finally:
            _flush_standard_streams()
            # Skip atexit handlers and the runner's own stack.
            os._exit(exit_code)

    def _drain(self, read_fd: int) -> bytes:
        chunks: List[bytes] = []
        while True:
            try:
                chunk = os.read(read_fd, READ_CHUNK_SIZE)
            except OSError as exc:
                raise HarnessError("could not read from pipe", exc) from exc
            if not chunk:
                break
            chunks.append(chunk)
        return b"".join(chunks)

    def _wait(self, pid: int) -> Tuple[Optional[int], Optional[int]]:
        try:
            _, status = os.waitpid(pid, 0)
        except OSError as exc:
            raise HarnessError("could not wait for test child process", exc) from exc
        return decode_wait_status(status)

    def _abandon(self, pid: int, read_fd: int) -> None:
        """Kill and reap a child whose run was interrupted."""

        self._platform.kill_process_group(pid)
        with contextlib.suppress(OSError):
            os.kill(pid, signal.SIGKILL)
        with contextlib.suppress(OSError):
            os.waitpid(pid, 0)
        with contextlib.suppress(OSError):
            os.close(read_fd)

    def _kill_lingering(self, descriptor: TestDescriptor, pid: int) -> None:
        """Kill processes the test left behind in its process group."""

        if not self._platform.process_group_exists(pid):
            return
        lingering = self._platform.collect_process_group_pids(pid)
        if not lingering:
            return

        details = self._platform.describe_processes(lingering)
        description = "; ".join(f"{p}: {details.get(p, 'details unavailable')}" for p in lingering)
        self._print(
            f"{self._color.YELLOW}Warning: {descriptor.qualified_name} left processes "
            f"running, killing them: {description}{self._color.RESET}"
        )
        self._platform.kill_process_group(pid)
