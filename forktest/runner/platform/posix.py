from __future__ import annotations

import os
import signal
import time
from typing import Dict, List, Sequence

import psutil

from .base import PlatformSupport


class PosixPlatformSupport(PlatformSupport):
    """Platform helpers for Unix-like systems."""

    @property
    def supports_fork(self) -> bool:
        return hasattr(os, "fork")

    def detach_child(self) -> None:
        # The test and everything it spawns share one process group named
        # after the child's pid, so leftovers can be killed in one call.
        try:
            os.setsid()
        except OSError:
            pass

    def process_group_exists(self, pgid: int) -> bool:
        try:
            os.killpg(pgid, 0)
        except ProcessLookupError:
            return False
        except PermissionError:
            return True
        return True

    def collect_process_group_pids(self, pgid: int) -> List[int]:
        pids: List[int] = []
        for pid in psutil.pids():
            try:
                if os.getpgid(pid) == pgid:
                    pids.append(pid)
            except (ProcessLookupError, PermissionError):
                continue
        return pids

    def kill_process_group(self, pgid: int) -> None:
        try:
            os.killpg(pgid, signal.SIGKILL)
        except ProcessLookupError:
            pass

    def describe_processes(self, pids: Sequence[int]) -> Dict[int, str]:
        unique_pids = sorted({pid for pid in pids if isinstance(pid, int) and pid > 0})
        details: Dict[int, str] = {}
        now = time.time()

        for pid in unique_pids:
            try:
                proc = psutil.Process(pid)
                with proc.oneshot():
                    parts = [
                        f"ppid={proc.ppid()}",
                        f"status={proc.status()}",
                    ]
                    uptime = now - proc.create_time()
                    if uptime >= 0:
                        parts.append(f"uptime={uptime:.1f}s")
                    cmdline = proc.cmdline() or [proc.name()]
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                details[pid] = "details unavailable"
                continue
            if cmdline:
                parts.append(f"cmd={' '.join(cmdline)}")
            details[pid] = " ".join(parts)

        return details
