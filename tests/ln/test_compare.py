# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

import math
import re
from datetime import date, timedelta
from enum import Enum

import pytest

from collectionkit.ln import deep_copy, deep_equal, shallow_equal


class Color(Enum):
    RED = 1
    BLUE = 2


class TestShallowEqual:
    @pytest.mark.parametrize(
        "a, b",
        [
            ("a", "a"),
            (1, 1),
            (1.5, 1.5),
            (None, None),
            (b"x", b"x"),
            (Color.RED, Color.RED),
        ],
    )
    def test_equal_scalars(self, a, b):
        assert shallow_equal(a, b)

    def test_bool_does_not_match_int(self):
        assert not shallow_equal(True, 1)
        assert not shallow_equal(0, False)

    def test_containers_match_by_identity(self):
        data = [1, 2]
        assert shallow_equal(data, data)
        assert not shallow_equal([1, 2], [1, 2])
        assert not shallow_equal({"a": 1}, {"a": 1})

    def test_different_scalars(self):
        assert not shallow_equal("a", "b")
        assert not shallow_equal(None, 0)


class TestDeepEqual:
    def test_nested_structures(self):
        assert deep_equal([1, {"a": [2, 3]}], [1, {"a": [2, 3]}])
        assert not deep_equal([1, {"a": [2, 3]}], [1, {"a": [2, 4]}])

    def test_sequence_types_must_match(self):
        assert not deep_equal((1, 2), [1, 2])
        assert not deep_equal([1, 2], [1, 2, 3])

    def test_mapping_keys_must_match(self):
        assert not deep_equal({"a": 1}, {"a": 1, "b": 2})
        assert not deep_equal({"a": 1}, [("a", 1)])

    def test_sets(self):
        assert deep_equal({1, 2}, {2, 1})
        assert not deep_equal({1}, {2})

    def test_dates(self):
        assert deep_equal(date(2024, 1, 1), date(2024, 1, 1))
        assert deep_equal(timedelta(seconds=5), timedelta(seconds=5))
        assert not deep_equal(date(2024, 1, 1), date(2024, 1, 2))

    def test_patterns(self):
        assert deep_equal(re.compile("a+"), re.compile("a+"))
        assert not deep_equal(re.compile("a+"), re.compile("a+", re.I))

    def test_nan(self):
        assert deep_equal(math.nan, math.nan)
        assert not deep_equal(math.nan, 1.0)

    def test_bool_int_still_distinct(self):
        assert not deep_equal([True], [1])

    def test_custom_objects_use_eq(self):
        class Point:
            def __init__(self, x):
                self.x = x

            def __eq__(self, other):
                return isinstance(other, Point) and other.x == self.x

        assert deep_equal(Point(1), Point(1))
        assert not deep_equal(Point(1), Point(2))


class TestDeepCopy:
    def test_copies_nested(self):
        data = {"a": [1, 2]}
        copied = deep_copy(data)
        assert copied == data
        assert copied["a"] is not data["a"]

    def test_memo_is_shared(self):
        inner = [1]
        memo = {}
        first = deep_copy(inner, memo)
        assert deep_copy(inner, memo) is first
