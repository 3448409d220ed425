# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

import math

import pytest

from collectionkit._errors import ComparatorRequiredError, EmptyReduceError
from collectionkit.ln import Undefined
from collectionkit.protocols.generic.collection import Collection
from collectionkit.protocols.generic.index import Entry


@pytest.fixture
def numbers():
    return Collection([3, 1, 4, 1, 5])


class TestIteration:
    def test_each_receives_context(self, abc):
        seen = []
        abc.each(lambda v, k, i, c: seen.append((v, k, i, c is abc)))
        assert seen == [
            ("a", "0", 0, True),
            ("b", "1", 1, True),
            ("c", "2", 2, True),
        ]

    def test_each_stops_on_false(self, abc):
        seen = []

        def visit(value):
            seen.append(value)
            return value != "b"

        assert abc.each(visit) is None
        assert seen == ["a", "b"]

    def test_each_none_does_not_stop(self, abc):
        seen = []
        abc.for_each(lambda v: seen.append(v))
        assert seen == ["a", "b", "c"]

    def test_each_tolerates_shrinking(self, abc):
        seen = []

        def visit(value, key, index, c):
            seen.append(value)
            c.pop()

        abc.each(visit)
        assert seen == ["a", "b"]

    def test_map_keeps_keys(self):
        c = Collection({"a": 1, "b": 2})
        mapped = c.map(lambda v: v * 10)
        assert isinstance(mapped, Collection)
        assert mapped.to_dict() == {"a": 10, "b": 20}
        assert c.to_dict() == {"a": 1, "b": 2}

    def test_map_identity_round_trip(self, words):
        assert words.map(lambda v: v).equals(words)

    def test_filter(self, numbers):
        odd = numbers.filter(lambda v: v % 2)
        assert odd.items() == [("0", 3), ("1", 1), ("3", 1), ("4", 5)]

    def test_find(self, numbers):
        assert numbers.find(lambda v: v > 3) == 4
        assert numbers.find(lambda v: v > 3, detail=True) == Entry(2, "2", 4)
        assert numbers.find(lambda v: v > 10) is Undefined

    def test_find_index(self, numbers):
        assert numbers.find_index(lambda v: v == 1) == 1
        assert numbers.find_index(lambda v: v == 9) == -1

    def test_every(self, numbers):
        assert numbers.every(lambda v: v > 0)
        assert not numbers.every(lambda v: v > 1)
        assert numbers.all(lambda v: None)

    def test_some(self, numbers):
        assert numbers.some(lambda v: v == 5)
        assert not numbers.any(lambda v: v == 9)

    def test_every_on_empty(self):
        assert Collection().every(lambda v: False)
        assert not Collection().some(lambda v: True)


class TestReduce:
    def test_reduce(self, numbers):
        assert numbers.reduce(lambda acc, v: acc + v) == 14
        assert numbers.reduce(lambda acc, v: acc + v, 100) == 114

    def test_reduce_right(self, abc):
        assert abc.reduce_right(lambda acc, v: acc + v) == "cba"
        assert abc.reduce_right(lambda acc, v: acc + v, ">") == ">cba"

    def test_reduce_context(self, abc):
        keys = abc.reduce(lambda acc, v, k: acc + [k], [])
        assert keys == ["0", "1", "2"]

    def test_empty_without_start(self):
        with pytest.raises(EmptyReduceError):
            Collection().reduce(lambda acc, v: acc)
        with pytest.raises(TypeError):
            Collection().reduce_right(lambda acc, v: acc)

    def test_empty_with_start(self):
        assert Collection().reduce(lambda acc, v: acc, "seed") == "seed"


class TestAggregates:
    def test_join(self):
        assert Collection(["a", None, 1]).join("-") == "a--1"
        assert Collection(["a", "b"]).join() == "a,b"
        assert Collection().join() == ""

    def test_max_and_min(self, numbers):
        assert numbers.max() == 5
        assert numbers.min() == 1
        assert numbers.min(detail=True) == Entry(1, "1", 1)

    def test_ties_keep_first(self):
        c = Collection(["bb", "aa", "c"])
        assert c.max(lambda v: len(v), detail=True) == Entry(0, "0", "bb")

    def test_strings(self):
        assert Collection(["pear", "apple"]).min() == "apple"

    def test_with_function(self):
        c = Collection([{"n": 2}, {"n": 7}])
        assert c.max(lambda v: v["n"]) == {"n": 7}

    def test_requires_comparator(self):
        with pytest.raises(ComparatorRequiredError):
            Collection([{"n": 1}]).max()
        with pytest.raises(ComparatorRequiredError):
            Collection([True]).min()

    def test_empty(self):
        assert Collection().max() is Undefined
        assert Collection().min() is Undefined

    def test_avg(self, numbers):
        assert numbers.avg() == pytest.approx(2.8)
        assert Collection(["ab", "abcd"]).avg() == 3
        assert Collection([{"n": 2}, {"n": 4}]).avg(lambda v: v["n"]) == 3
        assert math.isnan(Collection().avg())

    def test_avg_requires_comparator(self):
        with pytest.raises(ComparatorRequiredError):
            Collection([{"n": 1}, {"n": 2}]).avg()
        with pytest.raises(ComparatorRequiredError):
            Collection([True, False]).avg()
        with pytest.raises(ComparatorRequiredError):
            Collection([1, 2]).avg(lambda v: {"n": v})


class TestSort:
    def test_sort_fires_only_sort_events(self, recorder):
        c = Collection([3, 1, 2])
        rec = recorder(c)
        assert c.sort() is True
        assert c.values() == [1, 2, 3]
        assert rec.names == ["beforesort", "sort"]

    def test_keys_travel(self):
        c = Collection([3, 1, 2])
        c.sort()
        assert c.keys() == ["1", "2", "0"]

    def test_sort_key_and_reverse(self):
        c = Collection(["bbb", "a", "cc"])
        c.sort(key=len, reverse=True)
        assert c.values() == ["bbb", "cc", "a"]

    def test_sort_is_stable(self):
        c = Collection([(1, "x"), (0, "y"), (1, "z")])
        c.sort(key=lambda v: v[0])
        assert c.values() == [(0, "y"), (1, "x"), (1, "z")]

    def test_sort_by_number_comparator(self):
        c = Collection([3, 1, 2])
        assert c.sort_by(lambda a, b: a.value - b.value)
        assert c.values() == [1, 2, 3]

    def test_sort_by_boolean_comparator(self):
        c = Collection([1, 3, 2])
        c.sort_by(lambda a, b: a.value < b.value)
        assert c.values() == [3, 2, 1]

    def test_sort_by_sees_entries(self):
        c = Collection({"b": 1, "a": 2})
        c.sort_by(lambda left, right: left.key > right.key)
        assert c.items() == [("a", 2), ("b", 1)]

    def test_veto(self):
        c = Collection([3, 1, 2])
        c.on("beforesort", lambda coll: False)
        assert c.sort() is False
        assert c.sort_by(lambda a, b: a.value - b.value) is False
        assert c.values() == [3, 1, 2]

    def test_listening_restored(self):
        c = Collection([2, 1])
        c.sort()
        assert c.listening is True

    def test_listening_restored_after_failure(self):
        c = Collection([1, "a"])
        with pytest.raises(TypeError):
            c.sort()
        assert c.listening is True
        assert c.values() == [1, "a"]

    def test_incomparable_values_fire_no_sort(self, recorder):
        c = Collection([3, None, 1])
        rec = recorder(c)
        with pytest.raises(TypeError):
            c.sort()
        assert rec.names == ["beforesort"]
        assert c.values() == [3, None, 1]

    def test_sort_keeps_synthetic_keys(self):
        c = Collection([2, 1])
        c.sort()
        c.push(3)
        assert c.keys() == ["1", "0", "2"]


class TestSplice:
    def test_remove_and_insert(self, abc):
        removed = abc.splice(1, 1, "z")
        assert removed.items() == [("1", "b")]
        assert abc.values() == ["a", "z", "c"]
        assert abc.keys() == ["0", "3", "2"]

    def test_insert_only(self):
        c = Collection(["a", "d"])
        removed = c.splice(1, 0, "b", "c")
        assert removed.count == 0
        assert c.values() == ["a", "b", "c", "d"]

    def test_remove_to_end(self, letters):
        removed = letters.splice(2)
        assert removed.values() == ["c", "d", "e"]
        assert letters.values() == ["a", "b"]

    def test_negative_start(self, letters):
        letters.splice(-2, 1, "x")
        assert letters.values() == ["a", "b", "c", "x", "e"]

    def test_count_clamped(self, abc):
        removed = abc.splice(1, 10)
        assert removed.values() == ["b", "c"]

    def test_vetoed_removal_skipped(self, letters):
        letters.on("beforeremove", lambda v: v != "b")
        removed = letters.splice(1, 2)
        assert removed.values() == ["c"]
        assert letters.values() == ["a", "b", "d", "e"]

    def test_listener_shrinking_collection(self, letters):
        def drop_tail(value):
            if value == "a":
                letters.pop()

        letters.on("remove", drop_tail)
        removed = letters.splice(0, 5)
        assert removed.values() == ["a", "b", "c", "d"]
        assert letters.count == 0

    def test_fires_element_events(self, abc, recorder):
        rec = recorder(abc)
        abc.splice(0, 1, "z")
        assert rec.names == ["beforeremove", "remove", "beforeadd", "add"]


class TestSlice:
    def test_slice(self, letters):
        part = letters.slice(1, 3)
        assert part.items() == [("1", "b"), ("2", "c")]
        assert letters.count == 5

    def test_negative_and_open(self, letters):
        assert letters.slice(-2).values() == ["d", "e"]
        assert letters.slice().values() == letters.values()
        assert letters.slice(3, 1).count == 0

    def test_aliases(self, letters):
        assert letters.range(0, 2).values() == ["a", "b"]
        assert letters.get_range(4, 9).values() == ["e"]
