"""Helpers for matching and rearranging sequences."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TypeVar

T = TypeVar("T")


def matches(parts: Iterable[str], expected: Iterable[str]) -> int:
    """Count the items of ``parts`` that also appear in ``expected``."""
    wanted = set(expected)
    return sum(1 for part in parts if part in wanted)


def _find_subslice(haystack: Sequence[T], needle: Sequence[T]) -> int:
    size = len(needle)
    needle = list(needle)
    return next(
        (
            start
            for start in range(len(haystack) - size + 1)
            if list(haystack[start : start + size]) == needle
        ),
        -1,
    )


def replace_subslice(items: Sequence[T], old: Sequence[T], new: Sequence[T]) -> list[T]:
    """Replace the first run of ``old`` in ``items`` with ``new``."""
    start = _find_subslice(items, old)
    if start == -1:
        return list(items)
    return [*items[:start], *new, *items[start + len(old) :]]


def contains_subslice(haystack: Sequence[T], needle: Sequence[T]) -> bool:
    """Return True if ``needle`` appears as a contiguous run in ``haystack``.

    An empty ``needle`` never matches.
    """
    if not needle or len(needle) > len(haystack):
        return False
    return _find_subslice(haystack, needle) != -1


def move_entry(items: Sequence[T], entry: T, index: int) -> list[T]:
    """Return a copy of ``items`` with the first ``entry`` moved to ``index``.

    An index past the end appends; a missing entry leaves the items unchanged.
    """
    result = list(items)
    if entry not in result:
        return result
    if index < 0:
        raise IndexError(f"index out of range: {index}")

    result.remove(entry)
    if index >= len(result):
        result.append(entry)
    else:
        result.insert(index, entry)
    return result