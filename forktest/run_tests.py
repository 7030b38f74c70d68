"""
forktest entry point

Imports the test modules named on the command line, seals the registry and
runs every registered test in its own forked child process.

Usage:
    forktest [options] [MODULE ...]
    python -m forktest [options] [MODULE ...]

Options:
    --verbose       Print pid, exit status and duration of every test to stderr
    --strict-exit   Exit with status 1 when a test failed (default: always 0)
    --color         Always colour the progress line
    --no-color      Never colour the progress line

A script can also register tests itself and finish with
``sys.exit(forktest.main())``.
"""

from __future__ import annotations

import sys
import time
from typing import Mapping, Optional, Sequence, TextIO

from .discovery import import_test_modules
from .errors import DiscoveryError, HarnessError, RegistryError
from .registry import Registry, active_registry, registering_into
from .runner.configuration import RunnerConfig, parse_config
from .runner.executor import IsolatedExecutor
from .runner.reporter import Reporter
from .runner.utils import Color, NoColor, PrintFn, format_duration, stderr_print, stream_supports_color

EXIT_OK = 0
EXIT_TESTS_FAILED = 1
EXIT_HARNESS_ERROR = 2


def run_registry(
    registry: Registry,
    config: RunnerConfig,
    *,
    stream: Optional[TextIO] = None,
    print_fn: PrintFn = stderr_print,
) -> int:
    """Run every test in ``registry`` and return the process exit code."""

    output = stream if stream is not None else sys.stdout
    if config.color is None:
        progress_color = Color if stream_supports_color(output) else NoColor
        warning_color = Color if stream_supports_color(sys.stderr) else NoColor
    else:
        progress_color = warning_color = Color if config.color else NoColor

    registry.seal()
    executor = IsolatedExecutor(verbose=config.verbose, print_fn=print_fn, color=warning_color)
    reporter = Reporter(
        executor,
        stream=output,
        header_width=config.header_width,
        color=progress_color,
    )

    start_time = time.monotonic()
    try:
        report = reporter.run(registry.snapshot())
    except HarnessError as exc:
        output.flush()
        print_fn(f"\n{warning_color.RED}Error: {exc}{warning_color.RESET}")
        return EXIT_HARNESS_ERROR

    if config.verbose:
        print_fn(f"Total duration: {format_duration(time.monotonic() - start_time)}")

    if config.strict_exit and report.failed_count:
        return EXIT_TESTS_FAILED
    return EXIT_OK


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    registry: Optional[Registry] = None,
    environ: Optional[Mapping[str, str]] = None,
    stream: Optional[TextIO] = None,
    print_fn: PrintFn = stderr_print,
) -> int:
    config, modules = parse_config(argv, environ)
    target = active_registry() if registry is None else registry

    try:
        # Decorators in the imported modules register into ``target``.
        with registering_into(target):
            import_test_modules(modules)
    except (DiscoveryError, RegistryError) as exc:
        color = Color if stream_supports_color(sys.stderr) else NoColor
        print_fn(f"{color.RED}Error: {exc}{color.RESET}")
        return EXIT_HARNESS_ERROR

    return run_registry(target, config, stream=stream, print_fn=print_fn)


if __name__ == '__main__':
    sys.exit(main())
