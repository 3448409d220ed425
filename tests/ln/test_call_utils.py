# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

import pytest

from collectionkit.ln import (
    call_adaptive,
    is_coro_func,
    numeric_key,
    positional_arity,
    to_key,
)


class TestKeys:
    def test_to_key(self):
        assert to_key("a") == "a"
        assert to_key(3) == "3"
        assert to_key(None) == "None"

    @pytest.mark.parametrize(
        "key, expected",
        [
            ("0", 0),
            ("12", 12),
            (" 7 ", 7),
            ("3.9", 3),
            (".5", 0),
            ("-2", -2),
            ("abc", None),
            ("1e3", None),
            ("", None),
            ("4x", None),
        ],
    )
    def test_numeric_key(self, key, expected):
        assert numeric_key(key) == expected


class TestArity:
    def test_plain_functions(self):
        assert positional_arity(lambda: None) == 0
        assert positional_arity(lambda a, b: None) == 2
        assert positional_arity(lambda a, b=1: None) == 2

    def test_var_positional(self):
        assert positional_arity(lambda *args: None) is None
        assert positional_arity(lambda a, *rest: None) is None

    def test_keyword_only_not_counted(self):
        assert positional_arity(lambda a, *, b=1: None) == 1

    def test_bound_method(self):
        class Holder:
            def method(self, a):
                return a

        assert positional_arity(Holder().method) == 1

    def test_unhashable_callable(self):
        class Callable_:
            __hash__ = None

            def __call__(self, a, b):
                return a + b

        assert positional_arity(Callable_()) == 2


class TestCallAdaptive:
    def test_trims_arguments(self):
        assert call_adaptive(lambda v: v, 1, 2, 3) == 1
        assert call_adaptive(lambda v, k: (v, k), 1, 2, 3) == (1, 2)

    def test_var_positional_gets_everything(self):
        assert call_adaptive(lambda *a: a, 1, 2, 3) == (1, 2, 3)

    def test_zero_arguments(self):
        assert call_adaptive(lambda: "ok", 1, 2) == "ok"


class TestIsCoroFunc:
    def test_detects_coroutines(self):
        async def coro():
            return 1

        def plain():
            return 1

        assert is_coro_func(coro)
        assert not is_coro_func(plain)

    def test_async_callable_object(self):
        class Handler:
            async def __call__(self):
                return 1

        assert is_coro_func(Handler())
