from __future__ import annotations

from typing import Dict, List, Sequence


class PlatformSupport:
    """Abstract base class describing platform specific behaviour."""

    def __init__(self, *, verbose: bool = False) -> None:
        self.verbose = verbose

    @property
    def supports_fork(self) -> bool:
        """Return True when tests can run in forked children."""

        return False

    def detach_child(self) -> None:
        """Called in the child right after fork to isolate its process tree."""

    def process_group_exists(self, pgid: int) -> bool:
        """Return True while any process still belongs to ``pgid``."""

        return False

    def collect_process_group_pids(self, pgid: int) -> List[int]:
        """Return all process IDs belonging to ``pgid``."""

        return []

    def kill_process_group(self, pgid: int) -> None:
        """Terminate every process in ``pgid``."""

        # Nothing to do where there are no process groups.

    def describe_processes(self, pids: Sequence[int]) -> Dict[int, str]:
        """Return a mapping of process IDs to human readable descriptions."""

        return {}
