# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Any, Final, Literal

__all__ = (
    "Undefined",
    "UndefinedType",
    "Unset",
    "UnsetType",
    "is_sentinel",
    "not_sentinel",
)


class _SingletonMeta(type):
    """Metaclass that guarantees exactly one instance per subclass."""

    _cache: dict[type, Any] = {}

    def __call__(cls, *a, **kw):
        if cls not in cls._cache:
            cls._cache[cls] = super().__call__(*a, **kw)
        return cls._cache[cls]


class _Sentinel(metaclass=_SingletonMeta):
    __slots__ = ()

    def __deepcopy__(self, memo):
        return self

    def __copy__(self):
        return self

    def __bool__(self) -> Literal[False]:
        return False


class UndefinedType(_Sentinel):
    """Result of a lookup that matched nothing.

    Collections may legitimately store ``None``, so getters report a miss
    with this falsy singleton instead.

    Example:
        >>> Collection(["a"]).get_at(5) is Undefined
        True
    """

    __slots__ = ()

    def __repr__(self) -> Literal["Undefined"]:
        return "Undefined"

    def __reduce__(self):
        return "Undefined"


class UnsetType(_Sentinel):
    """Marks an optional positional argument the caller did not pass."""

    __slots__ = ()

    def __repr__(self) -> Literal["Unset"]:
        return "Unset"

    def __reduce__(self):
        return "Unset"


Undefined: Final = UndefinedType()
Unset: Final = UnsetType()


def is_sentinel(value: Any) -> bool:
    return value is Undefined or value is Unset


def not_sentinel(value: Any) -> bool:
    return not is_sentinel(value)
