# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Position arithmetic and lookups over the parallel key/value storage."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, NamedTuple

from collectionkit.ln import deep_equal, shallow_equal

__all__ = (
    "Entry",
    "find_last_position",
    "find_position",
    "normalize_index",
)


class Entry(NamedTuple):
    """Detailed view of one element: its position, key and value."""

    index: int
    key: str
    value: Any


def normalize_index(index: int, count: int) -> int:
    """Clamp ``index`` to a valid insertion position in ``[0, count]``.

    Negative values count from the end, the way list slicing does.

    Args:
        index: Requested position.
        count: Current number of elements.

    Returns:
        int: The clamped position.
    """
    if index < 0:
        index = count + index
        if index < 0:
            index = 0
    elif index > count:
        index = count
    return index


def _matches(deep: bool):
    return deep_equal if deep else shallow_equal


def find_position(
    candidate: Any, sequence: Sequence[Any], /, deep: bool = False
) -> int:
    """Position of the first element matching ``candidate``, or -1.

    Args:
        candidate: Key or value searched for.
        sequence: Storage to scan, in order.
        deep: Compare structurally instead of by reference.
    """
    match = _matches(deep)
    for i, item in enumerate(sequence):
        if match(item, candidate):
            return i
    return -1


def find_last_position(
    candidate: Any, sequence: Sequence[Any], /, deep: bool = False
) -> int:
    """Position of the last element matching ``candidate``, or -1."""
    match = _matches(deep)
    for i in range(len(sequence) - 1, -1, -1):
        if match(sequence[i], candidate):
            return i
    return -1
