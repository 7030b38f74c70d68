from __future__ import annotations

from typing import Iterable, List, Tuple

from .registry import TestDescriptor


def _as_bytes(text: str) -> bytes:
    # Lone surrogates encode to their own code points, keeping code point order.
    return text.encode("utf-8", errors="surrogatepass")


def sort_key(descriptor: TestDescriptor) -> Tuple[bytes, bytes]:
    """Return the ``(suite, name)`` key compared byte by byte."""

    return _as_bytes(descriptor.suite), _as_bytes(descriptor.name)


def order_descriptors(descriptors: Iterable[TestDescriptor]) -> List[TestDescriptor]:
    """Return ``descriptors`` ordered by suite, then by test name.

    The sort is stable, so exact duplicates keep their registration order.
    """

    return sorted(descriptors, key=sort_key)
