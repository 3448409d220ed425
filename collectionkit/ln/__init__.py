# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

from ._compare import SIMPLE_TYPES, deep_copy, deep_equal, shallow_equal
from ._sentinel import (
    Undefined,
    UndefinedType,
    Unset,
    UnsetType,
    is_sentinel,
    not_sentinel,
)
from ._utils import (
    call_adaptive,
    is_coro_func,
    numeric_key,
    positional_arity,
    to_key,
)

__all__ = (
    # comparison
    "SIMPLE_TYPES",
    "deep_copy",
    "deep_equal",
    "shallow_equal",
    # sentinels
    "Undefined",
    "UndefinedType",
    "Unset",
    "UnsetType",
    "is_sentinel",
    "not_sentinel",
    # callables and keys
    "call_adaptive",
    "is_coro_func",
    "numeric_key",
    "positional_arity",
    "to_key",
)
