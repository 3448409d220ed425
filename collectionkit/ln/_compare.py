# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Equality and copy helpers shared by the collection operations.

Two comparison modes exist:

``shallow_equal``
    Reference equality. Two values match when they are the same object, or
    when both are simple scalars (str, bytes, numbers, None, enum members)
    with equal values. Containers only match themselves.

``deep_equal``
    Structural equality, recursive over sequences, mappings, sets and nested
    collections, with value equality for dates, times and compiled patterns.
"""

from __future__ import annotations

import copy as _copy
import math
import re
from collections.abc import Mapping, Set
from datetime import date, time, timedelta
from enum import Enum
from typing import Any

__all__ = (
    "SIMPLE_TYPES",
    "deep_copy",
    "deep_equal",
    "shallow_equal",
)

SIMPLE_TYPES = (str, bytes, int, float, complex, type(None), Enum)


def shallow_equal(first: Any, second: Any, /) -> bool:
    if first is second:
        return True
    if not (
        isinstance(first, SIMPLE_TYPES) and isinstance(second, SIMPLE_TYPES)
    ):
        return False
    # True must not match 1
    if isinstance(first, bool) is not isinstance(second, bool):
        return False
    return bool(first == second)


def _is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


def deep_equal(first: Any, second: Any, /) -> bool:
    if shallow_equal(first, second):
        return True

    # nested collections compare through their own deep equality
    deep_eq = getattr(type(first), "__deep_eq__", None)
    if deep_eq is not None:
        return bool(deep_eq(first, second))

    if isinstance(first, (list, tuple)):
        if type(first) is not type(second) or len(first) != len(second):
            return False
        return all(deep_equal(a, b) for a, b in zip(first, second))

    if isinstance(first, Mapping):
        if not isinstance(second, Mapping):
            return False
        if set(first.keys()) != set(second.keys()):
            return False
        return all(deep_equal(first[k], second[k]) for k in first)

    if isinstance(first, Set):
        return isinstance(second, Set) and first == second

    if isinstance(first, (date, time, timedelta)):
        return type(first) is type(second) and first == second

    if isinstance(first, re.Pattern):
        return (
            isinstance(second, re.Pattern)
            and first.pattern == second.pattern
            and first.flags == second.flags
        )

    if _is_nan(first):
        return _is_nan(second)

    if isinstance(first, SIMPLE_TYPES):
        return False

    return bool(first == second)


def deep_copy(value: Any, memo: dict | None = None, /) -> Any:
    """Deep copy of ``value``; nested collections copy without listeners."""
    return _copy.deepcopy(value, memo)
