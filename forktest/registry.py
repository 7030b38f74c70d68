from __future__ import annotations

import contextlib
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Tuple

from .errors import RegistryError


@dataclass(frozen=True)
class SourceLocation:
    """Where a test was defined. Informational only."""

    filename: str
    lineno: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.lineno}"


@dataclass
class TestOutcome:
    """Result of a test body as seen inside the child process."""

    __test__ = False

    failed: bool = False

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0


EntryPoint = Callable[[], Optional[TestOutcome]]


@dataclass(frozen=True)
class TestDescriptor:
    """Static identity and entry point of one registered test."""

    __test__ = False

    suite: str
    name: str
    location: SourceLocation
    entry_point: EntryPoint

    @property
    def qualified_name(self) -> str:
        return f"{self.suite} :: {self.name}"


class Registry:
    """Append-only collection of test descriptors.

    Descriptors are registered while test modules are imported, before the
    runner starts. ``seal`` marks the end of that phase; from then on the
    registry is read-only.
    """

    def __init__(self) -> None:
        self._descriptors: List[TestDescriptor] = []
        self._sealed = False

    def register(self, descriptor: TestDescriptor) -> None:
        """Append ``descriptor``. Duplicate suite/name pairs are allowed."""

        if self._sealed:
            raise RegistryError(
                f"cannot register {descriptor.qualified_name}: "
                "registration closed before the run started"
            )
        self._descriptors.append(descriptor)

    def snapshot(self) -> Tuple[TestDescriptor, ...]:
        """Return every descriptor registered so far, in registration order."""

        return tuple(self._descriptors)

    def seal(self) -> None:
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def __len__(self) -> int:
        return len(self._descriptors)

    def __iter__(self) -> Iterator[TestDescriptor]:
        return iter(self.snapshot())


# Process-wide registry filled by the @test decorator.
REGISTRY = Registry()

# Set while test modules are imported on behalf of a specific registry.
_active: Optional[Registry] = None


def active_registry() -> Registry:
    """Return the registry that ``@test`` and ``register()`` currently fill."""

    return _active if _active is not None else REGISTRY


@contextlib.contextmanager
def registering_into(registry: Registry) -> Iterator[Registry]:
    """Route default registrations to ``registry`` inside the ``with`` block."""

    global _active
    previous = _active
    _active = registry
    try:
        yield registry
    finally:
        _active = previous


def register(descriptor: TestDescriptor) -> None:
    active_registry().register(descriptor)


def snapshot() -> Tuple[TestDescriptor, ...]:
    return active_registry().snapshot()
