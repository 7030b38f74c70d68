"""
forktest: a process-isolating test runner.

Every registered test runs in its own forked child so a crash, an abort or
corrupted global state cannot take down the runner or leak into the next
test. Output of each child is captured through a pipe and shown only for
failing tests.

    from forktest import test, check_eq

    @test("math")
    def addition():
        check_eq(1 + 1, 2)
"""

__version__ = "1.0.0"

from .assertions import check, check_eq, check_streq, fail, succeed
from .definition import test
from .errors import (
    DiscoveryError,
    ForktestError,
    HarnessError,
    RegistryError,
    StopTest,
    TestFailure,
)
from .ordering import order_descriptors, sort_key
from .registry import (
    REGISTRY,
    Registry,
    SourceLocation,
    TestDescriptor,
    TestOutcome,
    active_registry,
    register,
    registering_into,
    snapshot,
)
from .run_tests import main, run_registry

__all__ = [
    # Registration
    "REGISTRY",
    "Registry",
    "SourceLocation",
    "TestDescriptor",
    "TestOutcome",
    "active_registry",
    "register",
    "registering_into",
    "snapshot",
    "test",
    # Ordering
    "order_descriptors",
    "sort_key",
    # Checks
    "check",
    "check_eq",
    "check_streq",
    "fail",
    "succeed",
    # Errors
    "DiscoveryError",
    "ForktestError",
    "HarnessError",
    "RegistryError",
    "StopTest",
    "TestFailure",
    # Entry points
    "main",
    "run_registry",
]
