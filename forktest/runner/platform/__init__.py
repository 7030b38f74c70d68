from __future__ import annotations

import os

from .base import PlatformSupport


def get_platform_support(*, verbose: bool = False) -> PlatformSupport:
    """Return the platform adapter for the current host."""

    if os.name == "posix":
        from .posix import PosixPlatformSupport

        return PosixPlatformSupport(verbose=verbose)
    return PlatformSupport(verbose=verbose)


__all__ = [
    "PlatformSupport",
    "get_platform_support",
]
