from __future__ import annotations

import inspect
from typing import Callable, Optional, TypeVar

from .registry import EntryPoint, Registry, SourceLocation, TestDescriptor, active_registry

F = TypeVar("F", bound=EntryPoint)


def _source_location(func: Callable[..., object]) -> SourceLocation:
    code = getattr(func, "__code__", None)
    if code is not None:
        return SourceLocation(code.co_filename, code.co_firstlineno)

    try:
        filename = inspect.getsourcefile(func) or "<unknown>"
        _, lineno = inspect.getsourcelines(func)
    except (OSError, TypeError):
        return SourceLocation("<unknown>", 0)
    return SourceLocation(filename, lineno)


def test(
    suite: str,
    name: Optional[str] = None,
    *,
    registry: Optional[Registry] = None,
) -> Callable[[F], F]:
    """Register the decorated function as test ``suite :: name``.

    ``name`` defaults to the function name. The function is returned
    unchanged so it can still be called directly.

    Example::

        @test("strings")
        def concat():
            check_streq("a" + "b", "ab")
    """

    target = active_registry() if registry is None else registry

    def decorator(func: F) -> F:
        descriptor = TestDescriptor(
            suite=suite,
            name=name if name is not None else func.__name__,
            location=_source_location(func),
            entry_point=func,
        )
        target.register(descriptor)
        return func

    return decorator


# Keep pytest from collecting the decorator when it is imported into test modules.
test.__test__ = False  # type: ignore[attr-defined]
