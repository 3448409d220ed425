# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

import inspect
import re
from collections.abc import Callable
from functools import lru_cache
from typing import Any

__all__ = (
    "call_adaptive",
    "is_coro_func",
    "numeric_key",
    "positional_arity",
    "to_key",
)

_NUMERIC_KEY = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)\s*$")


def to_key(obj: Any, /) -> str:
    """Coerce any key to the string form used for storage."""
    return obj if isinstance(obj, str) else str(obj)


def numeric_key(key: str, /) -> int | None:
    """Integer value of a numeric-looking key, truncated toward zero.

    Returns None for keys that do not look like a number.

    >>> numeric_key("12"), numeric_key(" 3.9 "), numeric_key("abc")
    (12, 3, None)
    """
    if not _NUMERIC_KEY.match(key):
        return None
    return int(float(key))


@lru_cache(maxsize=None)
def _is_coro_func(func: Callable[..., Any]) -> bool:
    if inspect.iscoroutinefunction(func):
        return True
    call = getattr(func, "__call__", None)
    return call is not None and inspect.iscoroutinefunction(call)


def is_coro_func(func: Callable[..., Any]) -> bool:
    """Check if a function is a coroutine function, with caching for performance."""
    try:
        return _is_coro_func(func)
    except TypeError:
        # unhashable callable objects skip the cache
        return _is_coro_func.__wrapped__(func)


def _compute_arity(func: Callable[..., Any]) -> int | None:
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return -1
    count = 0
    for param in sig.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return None
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            count += 1
    return count


@lru_cache(maxsize=1024)
def _cached_arity(func: Callable[..., Any]) -> int | None:
    return _compute_arity(func)


def positional_arity(func: Callable[..., Any]) -> int | None:
    """Number of positional arguments ``func`` accepts.

    Returns None when it takes ``*args`` and -1 when no signature can be
    inspected (some builtins).
    """
    try:
        return _cached_arity(func)
    except TypeError:
        return _compute_arity(func)


def call_adaptive(
    func: Callable[..., Any], /, *args: Any, fallback: int = 1
) -> Any:
    """Call ``func`` with as many leading ``args`` as its signature accepts.

    Callbacks may therefore ignore trailing context such as the key, the
    index or the owning collection. ``fallback`` is the number of arguments
    passed when the signature cannot be inspected.
    """
    arity = positional_arity(func)
    if arity is None:
        return func(*args)
    if arity < 0:
        arity = fallback
    return func(*args[:arity])
