"""Shared fixtures for the forktest test suite."""

from __future__ import annotations

from typing import Callable, List, Optional

import pytest

import forktest.registry
from forktest.registry import Registry, SourceLocation, TestDescriptor, TestOutcome
from forktest.runner.executor import IsolatedExecutor

DescriptorFactory = Callable[..., TestDescriptor]


def _passing_body() -> Optional[TestOutcome]:
    return None


@pytest.fixture
def make_descriptor() -> DescriptorFactory:
    """Build descriptors without touching any registry."""

    def factory(
        suite: str = "A",
        name: str = "t1",
        body: Callable[[], Optional[TestOutcome]] = _passing_body,
    ) -> TestDescriptor:
        return TestDescriptor(
            suite=suite,
            name=name,
            location=SourceLocation(__file__, 1),
            entry_point=body,
        )

    return factory


@pytest.fixture
def registry() -> Registry:
    """Fresh, unsealed registry."""
    return Registry()


@pytest.fixture
def global_registry(monkeypatch: pytest.MonkeyPatch) -> Registry:
    """Replace the process-wide registry for the duration of a test."""
    replacement = Registry()
    monkeypatch.setattr(forktest.registry, "REGISTRY", replacement)
    return replacement


@pytest.fixture
def messages() -> List[str]:
    """Collects diagnostics written through ``print_fn``."""
    return []


@pytest.fixture
def executor(messages: List[str]) -> IsolatedExecutor:
    """Executor whose diagnostics land in ``messages``."""
    return IsolatedExecutor(print_fn=messages.append)
