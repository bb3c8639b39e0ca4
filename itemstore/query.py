"""Linear-scan queries over a set of items.

There is no secondary index. Every query evaluates the projection on each
stored item, so a lookup costs O(n) and mutations stay O(1).
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from operator import attrgetter

from .items import T


def resolve_projection(extract: Callable[[T], object] | str) -> Callable[[T], object]:
    """Turn a field name (dotted paths allowed) into a projection callable."""
    if isinstance(extract, str):
        if not extract:
            raise ValueError("Field name must not be empty")
        return attrgetter(extract)
    if not callable(extract):
        raise TypeError(f"Projection must be callable or a field name, got {type(extract).__name__}")
    return extract


def query(
    items: Iterable[T],
    extract: Callable[[T], object] | str,
    target: object,
) -> T | None:
    """Return the first item whose projection equals ``target``, else ``None``.

    "First" follows the iteration order of ``items``. For a store that order is
    unspecified, so when several items project to the same value any one of
    them may be returned.
    """
    project = resolve_projection(extract)
    for item in items:
        if project(item) == target:
            return item
    return None


def query_all(
    items: Iterable[T],
    extract: Callable[[T], object] | str,
    target: object,
) -> list[T]:
    """Return every item whose projection equals ``target`` (unspecified order)."""
    project = resolve_projection(extract)
    return [item for item in items if project(item) == target]
