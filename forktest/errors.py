from __future__ import annotations

from typing import Optional


class ForktestError(Exception):
    """Base class for errors raised by the runner itself."""


class HarnessError(ForktestError):
    """The runner's own process machinery failed.

    These are never attributable to a single test and abort the whole run.
    """

    def __init__(self, step: str, error: Optional[OSError] = None) -> None:
        self.step = step
        self.error = error
        if error is not None and error.errno is not None:
            message = f"{step}: {error.strerror} (errno = {error.errno})"
        elif error is not None:
            message = f"{step}: {error}"
        else:
            message = step
        super().__init__(message)


class RegistryError(ForktestError):
    """Registration was attempted after the registry was sealed."""


class DiscoveryError(ForktestError):
    """A test module could not be imported."""


class TestFailure(AssertionError):
    """Raised inside a test body to report a failed check."""

    __test__ = False


class StopTest(Exception):
    """Raised by ``succeed()`` to end a test body early as passed."""
