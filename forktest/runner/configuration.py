from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence, Tuple

from .utils import env_flag

VERBOSE_ENV = "FORKTEST_VERBOSE"
STRICT_EXIT_ENV = "FORKTEST_STRICT_EXIT"
COLOR_ENV = "FORKTEST_COLOR"
NO_COLOR_ENV = "NO_COLOR"

DEFAULT_HEADER_WIDTH = 50


@dataclass(frozen=True)
class RunnerConfig:
    """Settings for one run. The defaults reproduce the classic output."""

    header_width: int = DEFAULT_HEADER_WIDTH
    verbose: bool = False
    # Return 1 from main() when a test failed. Off by default: the runner
    # historically exits 0 whatever the results.
    strict_exit: bool = False
    # None means: colour the progress line only when it goes to a terminal.
    color: Optional[bool] = None


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="forktest",
        description="Run registered tests, each in its own forked process.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Environment: FORKTEST_VERBOSE, FORKTEST_STRICT_EXIT and "
            "FORKTEST_COLOR enable the matching options; NO_COLOR disables colour."
        ),
    )
    parser.add_argument('modules', nargs='*', metavar='MODULE',
                        help='Test modules to import before running (dotted name or .py path)')
    parser.add_argument('--verbose', action='store_true', default=None,
                        help='Print pid, exit status and duration of every test to stderr')
    parser.add_argument('--strict-exit', action='store_true', default=None,
                        help='Exit with status 1 when any test failed (default: always 0)')
    color_group = parser.add_mutually_exclusive_group()
    color_group.add_argument('--color', dest='color', action='store_true', default=None,
                             help='Always colour the progress line')
    color_group.add_argument('--no-color', dest='color', action='store_false',
                             help='Never colour the progress line')
    return parser


def _resolve_color(
    flag: Optional[bool],
    environ: Optional[Mapping[str, str]],
) -> Optional[bool]:
    if flag is not None:
        return flag
    if env_flag(NO_COLOR_ENV, environ):
        return False
    if env_flag(COLOR_ENV, environ):
        return True
    return None


def build_config(
    args: argparse.Namespace,
    environ: Optional[Mapping[str, str]] = None,
) -> RunnerConfig:
    """Combine parsed arguments with environment fallbacks."""

    verbose = args.verbose if args.verbose is not None else env_flag(VERBOSE_ENV, environ)
    strict_exit = (
        args.strict_exit
        if args.strict_exit is not None
        else env_flag(STRICT_EXIT_ENV, environ)
    )
    return RunnerConfig(
        verbose=verbose,
        strict_exit=strict_exit,
        color=_resolve_color(args.color, environ),
    )


def parse_config(
    argv: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Tuple[RunnerConfig, List[str]]:
    """Parse ``argv`` and return the config plus the test modules to import."""

    args = build_argument_parser().parse_args(argv)
    return build_config(args, environ), list(args.modules)
