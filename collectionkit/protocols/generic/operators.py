# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Functional helpers shared by every collection: iteration, folding,
aggregates, sorting and splicing.

The mixin only relies on the public surface of the collection (``count``,
``get_at``, ``insert``, ``remove_at``, ``batch``, ``trigger``) plus the
``_keys``, ``_values`` and ``_reset`` storage primitives.
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Awaitable, Callable
from functools import cmp_to_key
from numbers import Real
from typing import TYPE_CHECKING, Any

import anyio

from collectionkit._errors import ComparatorRequiredError, EmptyReduceError
from collectionkit.config import settings
from collectionkit.ln import Undefined, Unset, call_adaptive, is_coro_func

from .event import EventName
from .index import Entry, normalize_index

if TYPE_CHECKING:
    from .collection import Collection

__all__ = ("CollectionOperators",)

logger = logging.getLogger(__name__)


def _comparable(value: Any) -> bool:
    return isinstance(value, (Real, str)) and not isinstance(value, bool)


def _measure(value: Any) -> float:
    if isinstance(value, (str, list, tuple)):
        return len(value)
    if isinstance(value, Real) and not isinstance(value, bool):
        return value
    raise ComparatorRequiredError()


def _compare_result(result: Any) -> int:
    if result is True:
        return 1
    if result is False:
        return -1
    if result is None:
        return 0
    if result > 0:
        return 1
    if result < 0:
        return -1
    return 0


class CollectionOperators:
    """Iteration and transformation operators for :class:`Collection`.

    Callbacks receive ``(value, key, index, collection)`` and may declare
    fewer parameters; only the leading arguments they accept are passed.
    Each pass reads the live element count, so callbacks that shrink the
    collection end the pass early instead of reading past the end.
    """

    def _walk(self, reverse: bool = False):
        if not reverse:
            i = 0
            while i < self.count:
                yield i, self._keys[i], self._values[i]
                i += 1
            return
        i = self.count - 1
        while i >= 0:
            if i < self.count:
                yield i, self._keys[i], self._values[i]
            i -= 1

    def _apply(self, fn: Callable[..., Any], value, key, index) -> Any:
        return call_adaptive(fn, value, key, index, self, fallback=4)

    # ------------------------------------------------------------------
    # iteration
    # ------------------------------------------------------------------

    def each(self, fn: Callable[..., Any]) -> None:
        """Call ``fn`` on every element; returning ``False`` stops the loop."""
        for i, key, value in self._walk():
            if self._apply(fn, value, key, i) is False:
                break

    for_each = each

    def map(self, fn: Callable[..., Any]) -> Collection:
        """New collection of ``fn`` results, under the same keys."""
        result = self.__class__()
        for i, key, value in self._walk():
            result.add(key, self._apply(fn, value, key, i))
        return result

    def filter(self, fn: Callable[..., Any]) -> Collection:
        """New collection of the elements for which ``fn`` is truthy."""
        result = self.__class__()
        for i, key, value in self._walk():
            if self._apply(fn, value, key, i):
                result.add(key, value)
        return result

    def find(self, fn: Callable[..., Any], detail: bool = False) -> Any:
        """First value (or Entry) for which ``fn`` is truthy, else Undefined."""
        for i, key, value in self._walk():
            if self._apply(fn, value, key, i):
                return Entry(i, key, value) if detail else value
        return Undefined

    def find_index(self, fn: Callable[..., Any]) -> int:
        for i, key, value in self._walk():
            if self._apply(fn, value, key, i):
                return i
        return -1

    def every(self, fn: Callable[..., Any]) -> bool:
        """False as soon as ``fn`` returns exactly ``False``."""
        for i, key, value in self._walk():
            if self._apply(fn, value, key, i) is False:
                return False
        return True

    def some(self, fn: Callable[..., Any]) -> bool:
        for i, key, value in self._walk():
            if self._apply(fn, value, key, i):
                return True
        return False

    all = every
    any = some

    def _fold(self, fn, start, reverse: bool) -> Any:
        walk = self._walk(reverse)
        if start is Unset:
            first = next(walk, None)
            if first is None:
                raise EmptyReduceError()
            acc = first[2]
        else:
            acc = start
        for i, key, value in walk:
            acc = call_adaptive(fn, acc, value, key, i, self, fallback=2)
        return acc

    def reduce(self, fn: Callable[..., Any], start: Any = Unset) -> Any:
        """Fold left to right with ``fn(acc, value, key, index, collection)``.

        Without ``start`` the first value seeds the fold.

        Raises:
            EmptyReduceError: If the collection is empty and no start value
                was given.
        """
        return self._fold(fn, start, reverse=False)

    def reduce_right(self, fn: Callable[..., Any], start: Any = Unset) -> Any:
        """Like :meth:`reduce`, from the last element to the first."""
        return self._fold(fn, start, reverse=True)

    # ------------------------------------------------------------------
    # aggregates
    # ------------------------------------------------------------------

    def join(self, glue: str = ",") -> str:
        return glue.join("" if v is None else str(v) for v in self._values)

    def _extreme(self, fn, detail: bool, better: Callable[[Any, Any], bool]):
        best = None
        for i, key, value in self._walk():
            if fn is None:
                if not _comparable(value):
                    raise ComparatorRequiredError()
                score = value
            else:
                score = self._apply(fn, value, key, i)
            if best is None or better(score, best[0]):
                best = (score, Entry(i, key, value))
        if best is None:
            return Undefined
        return best[1] if detail else best[1].value

    def max(self, fn: Callable[..., Any] | None = None, detail: bool = False):
        """Largest value, or the value with the largest ``fn`` score.

        Ties keep the earliest element. Returns Undefined when empty.

        Raises:
            ComparatorRequiredError: If ``fn`` is omitted and a value is
                neither a number nor a string.
        """
        return self._extreme(fn, detail, lambda a, b: a > b)

    def min(self, fn: Callable[..., Any] | None = None, detail: bool = False):
        """Smallest value, or the value with the smallest ``fn`` score."""
        return self._extreme(fn, detail, lambda a, b: a < b)

    def avg(self, fn: Callable[..., Any] | None = None) -> float:
        """Mean of the values (strings and sequences count by length).

        Returns ``nan`` for an empty collection.

        Raises:
            ComparatorRequiredError: If a value, or the ``fn`` result for it,
                is neither a number, a string, a list nor a tuple.
        """
        if not self.count:
            return math.nan
        total = 0
        for i, key, value in self._walk():
            total += _measure(value if fn is None else self._apply(fn, value, key, i))
        return total / self.count

    # ------------------------------------------------------------------
    # sorting
    # ------------------------------------------------------------------

    def sort_by(self, fn: Callable[..., Any]) -> bool:
        """Reorder in place with a comparator ``fn(a, b)`` over two Entries.

        The comparator sees ``Entry(index, key, value)`` pairs taken before
        the sort. ``True`` or a positive number puts ``a`` after ``b``;
        ``False`` or a negative number puts it before; ``None`` or zero keeps
        their order.
        Keys travel with their values. No per-element events are fired.

        Returns:
            bool: False if a ``beforesort`` listener vetoed.
        """
        if not self.trigger(EventName.BEFORE_SORT, self):
            logger.debug("Sort vetoed")
            return False
        with self.batch():
            entries = [
                Entry(i, k, v)
                for i, (k, v) in enumerate(zip(self._keys, self._values))
            ]
            entries.sort(key=cmp_to_key(lambda a, b: _compare_result(fn(a, b))))
            self._reset([e.key for e in entries], [e.value for e in entries])
        self.trigger(EventName.SORT, self)
        return True

    def sort(
        self, key: Callable[[Any], Any] | None = None, reverse: bool = False
    ) -> bool:
        """Stable in-place sort by ``key``, the way :meth:`list.sort` does.

        Values (or their ``key`` results) must be mutually comparable. The
        ``TypeError`` from a failed comparison propagates after
        ``beforesort`` has fired; storage is left untouched and no ``sort``
        event follows.
        """
        if not self.trigger(EventName.BEFORE_SORT, self):
            logger.debug("Sort vetoed")
            return False
        with self.batch():
            entries = list(zip(self._keys, self._values))
            if key is None:
                entries.sort(key=lambda e: e[1], reverse=reverse)
            else:
                entries.sort(key=lambda e: key(e[1]), reverse=reverse)
            self._reset([k for k, _ in entries], [v for _, v in entries])
        self.trigger(EventName.SORT, self)
        return True

    async def sort_async(
        self,
        fn: Callable[..., Any] | None = None,
        *,
        key: Callable[[Any], Any] | None = None,
        reverse: bool = False,
        callback: Callable[..., Any] | None = None,
        delay: float | None = None,
    ) -> Collection:
        """Sort after yielding to the event loop for ``delay`` seconds.

        Args:
            fn: Comparator, as for :meth:`sort_by`. Takes precedence over
                ``key``.
            key: Key function, as for :meth:`sort`.
            reverse: Reverse the key order.
            callback: Called with the collection once sorted; awaited when
                it is a coroutine function.
            delay: Seconds to wait first; defaults to
                ``settings.SORT_DELAY``.

        Returns:
            The collection itself.
        """
        delay = settings.SORT_DELAY if delay is None else delay
        logger.debug("Deferred sort scheduled in %ss", delay)
        await anyio.sleep(delay)
        if fn is not None:
            self.sort_by(fn)
        else:
            self.sort(key=key, reverse=reverse)
        if callback is not None:
            if is_coro_func(callback):
                await callback(self)
            else:
                result = callback(self)
                if isinstance(result, Awaitable):
                    await result
        return self

    def sort_later(
        self,
        fn: Callable[..., Any] | None = None,
        *,
        key: Callable[[Any], Any] | None = None,
        reverse: bool = False,
        callback: Callable[..., Any] | None = None,
        delay: float | None = None,
    ) -> asyncio.Task:
        """Schedule :meth:`sort_async` on the running loop and return the task.

        Raises:
            RuntimeError: If no event loop is running.
        """
        loop = asyncio.get_running_loop()
        return loop.create_task(
            self.sort_async(
                fn, key=key, reverse=reverse, callback=callback, delay=delay
            )
        )

    # ------------------------------------------------------------------
    # splicing and slicing
    # ------------------------------------------------------------------

    def splice(self, start: int, count: int | None = None, /, *items: Any):
        """Remove ``count`` elements from ``start`` and insert ``items`` there.

        Vetoed removals are skipped over, the way :meth:`remove_count` does.

        Returns:
            Collection: The removed elements, with their keys.
        """
        start = normalize_index(start, self.count)
        if count is None:
            count = self.count - start
        count = min(count, self.count - start)

        removed = self.__class__()
        i = start
        while count > 0 and i < self.count:
            key, value = self._keys[i], self._values[i]
            if self.remove_at(i):
                removed.add(key, value)
            else:
                i += 1
            count -= 1

        for item in reversed(items):
            self.insert(start, self.find_insertion_key(), item)
        return removed

    def slice(self, start: int = 0, end: int | None = None):
        """New collection with the elements between ``start`` and ``end``.

        Negative bounds count from the end; keys are kept.
        """
        start = normalize_index(start, self.count)
        end = self.count if end is None else normalize_index(end, self.count)
        result = self.__class__()
        for i in range(start, end):
            result.add(self._keys[i], self._values[i])
        return result

    range = slice
    get_range = slice
