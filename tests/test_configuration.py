"""Tests for command-line and environment configuration, plus shared helpers."""

from __future__ import annotations

import io
import signal

import pytest

from forktest.runner.configuration import (
    DEFAULT_HEADER_WIDTH,
    RunnerConfig,
    build_argument_parser,
    parse_config,
)
from forktest.runner.utils import describe_signal, env_flag, format_duration, stream_supports_color


def test_defaults() -> None:
    """Without flags or environment the classic behaviour applies."""
    config, modules = parse_config([], {})

    assert config == RunnerConfig()
    assert config.header_width == DEFAULT_HEADER_WIDTH == 50
    assert not config.verbose
    assert not config.strict_exit
    assert config.color is None
    assert modules == []


def test_flags_and_modules() -> None:
    """Flags switch options on and positional arguments name modules."""
    config, modules = parse_config(
        ["--verbose", "--strict-exit", "--color", "tests.sample", "other.py"], {}
    )

    assert config.verbose
    assert config.strict_exit
    assert config.color is True
    assert modules == ["tests.sample", "other.py"]


def test_environment_fallbacks() -> None:
    """Environment variables apply when no flag is given."""
    config, _ = parse_config([], {
        "FORKTEST_VERBOSE": "1",
        "FORKTEST_STRICT_EXIT": "yes",
        "FORKTEST_COLOR": "true",
    })

    assert config.verbose
    assert config.strict_exit
    assert config.color is True


def test_no_color_beats_color_environment() -> None:
    """NO_COLOR wins over FORKTEST_COLOR."""
    config, _ = parse_config([], {"NO_COLOR": "1", "FORKTEST_COLOR": "1"})

    assert config.color is False


def test_flag_beats_environment() -> None:
    """An explicit --color overrides NO_COLOR."""
    config, _ = parse_config(["--color"], {"NO_COLOR": "1"})

    assert config.color is True

    config, _ = parse_config(["--no-color"], {"FORKTEST_COLOR": "1"})
    assert config.color is False


def test_color_flags_are_exclusive(capsys: pytest.CaptureFixture[str]) -> None:
    """--color and --no-color cannot be combined."""
    with pytest.raises(SystemExit):
        build_argument_parser().parse_args(["--color", "--no-color"])

    assert "not allowed with argument" in capsys.readouterr().err


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, False),
        ("", False),
        ("  ", False),
        ("0", False),
        ("false", False),
        ("No", False),
        ("OFF", False),
        ("1", True),
        ("true", True),
        ("anything", True),
    ],
)
def test_env_flag(value, expected: bool) -> None:
    """Unset, empty and the usual negatives are false; everything else is true."""
    environ = {} if value is None else {"FLAG": value}

    assert env_flag("FLAG", environ) is expected


def test_env_flag_reads_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Without an explicit mapping os.environ is consulted."""
    monkeypatch.setenv("FORKTEST_SOME_FLAG", "1")

    assert env_flag("FORKTEST_SOME_FLAG")


def test_format_duration() -> None:
    """Short durations are shown in milliseconds, longer ones in seconds."""
    assert format_duration(0.0123) == "12ms"
    assert format_duration(1.5) == "1.50s"
    assert format_duration(75) == "75.00s"


def test_describe_signal() -> None:
    """Known signals get their system description, unknown ones a fallback."""
    assert describe_signal(signal.SIGSEGV) == signal.strsignal(signal.SIGSEGV)
    assert describe_signal(9999) == "Unknown signal 9999"


def test_stream_supports_color() -> None:
    """In-memory streams are never coloured."""
    assert not stream_supports_color(io.StringIO())

    closed = io.StringIO()
    closed.close()
    assert not stream_supports_color(closed)
    assert not stream_supports_color(object())
