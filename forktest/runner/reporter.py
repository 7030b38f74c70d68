from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Sequence, TextIO

from ..ordering import order_descriptors
from ..registry import TestDescriptor
from .configuration import DEFAULT_HEADER_WIDTH
from .executor import ExecutionRecord, IsolatedExecutor
from .utils import NoColor, describe_signal


@dataclass
class Report:
    """Outcome of a whole run: every descriptor plus the failing records."""

    descriptors: Sequence[TestDescriptor] = ()
    failures: List[ExecutionRecord] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.descriptors)

    @property
    def failed_count(self) -> int:
        return len(self.failures)


def format_header(text: str, width: int = DEFAULT_HEADER_WIDTH, pad: str = "=") -> str:
    """Centre ``text`` in a line of ``pad`` characters ``width`` wide.

    One space separates the text from the padding on each side. When the
    text does not fit, the padding shrinks to nothing rather than going
    negative; the right side gets the extra character for odd remainders.
    """

    available = max(width - 2 - len(text), 0)
    left = available // 2
    right = available - left
    return f"{pad * left} {text} {pad * right}"


class Reporter:
    """Drives the executor over the ordered tests and prints the report."""

    def __init__(
        self,
        executor: IsolatedExecutor,
        *,
        stream: Optional[TextIO] = None,
        header_width: int = DEFAULT_HEADER_WIDTH,
        color: Any = None,
    ) -> None:
        self._executor = executor
        self._stream = stream
        self.header_width = header_width
        self._color = color if color is not None else NoColor

    @property
    def stream(self) -> TextIO:
        # Resolved late so a redirected sys.stdout is honoured.
        return self._stream if self._stream is not None else sys.stdout

    def _write(self, text: str) -> None:
        self.stream.write(text)

    def _progress(self, record: ExecutionRecord) -> None:
        if record.failed:
            self._write(f"{self._color.RED}F{self._color.RESET}")
        else:
            self._write(f"{self._color.GREEN}.{self._color.RESET}")
        self.stream.flush()

    def run_all(self, ordered: Iterable[TestDescriptor]) -> Report:
        """Run every descriptor in order, keeping only the failing records."""

        descriptors = list(ordered)
        report = Report(descriptors=descriptors)
        for descriptor in descriptors:
            record = self._executor.run(descriptor)
            self._progress(record)
            if record.failed:
                report.failures.append(record)
        return report

    def print_results(self, report: Report) -> None:
        self._write(format_header("FAILURES", self.header_width, "=") + "\n")

        for record in report.failures:
            self._write(format_header(record.descriptor.qualified_name, self.header_width, "_") + "\n")
            self._write(record.log + "\n")
            if record.signal is not None:
                self._write(
                    f"Terminated because of signal {record.signal}: "
                    f"{describe_signal(record.signal)}\n"
                )
            self._write("\n\n")

        self._write(f">> {report.failed_count} tests failed, {report.total} total.\n")
        self.stream.flush()

    def run(self, descriptors: Iterable[TestDescriptor]) -> Report:
        """Order, run and report ``descriptors``."""

        report = self.run_all(order_descriptors(descriptors))
        self._write("\n")
        self.print_results(report)
        return report
