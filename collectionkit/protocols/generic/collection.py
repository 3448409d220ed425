# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from collectionkit._errors import ItemNotFoundError, NotIterableError
from collectionkit.config import settings
from collectionkit.ln import (
    Undefined,
    Unset,
    call_adaptive,
    deep_copy,
    deep_equal,
    numeric_key,
    shallow_equal,
    to_key,
)

from .._concepts import Observable, PairSource
from .cursor import Cursor
from .event import EventDispatcher, EventName, EventOutcome
from .index import Entry, find_last_position, find_position, normalize_index
from .operators import CollectionOperators

__all__ = ("Collection",)

logger = logging.getLogger(__name__)

_SCALAR_SOURCES = (str, bytes, bytearray)


def _is_source(obj: Any) -> bool:
    if isinstance(obj, _SCALAR_SOURCES):
        return False
    return isinstance(obj, (Collection, Mapping, PairSource, Iterable))


def _on_event(event: EventName) -> Callable[..., Any]:
    def register(self, callback=None, scope=None):
        return self.on(event, callback, scope)

    register.__name__ = f"on_{event.value}"
    register.__doc__ = f"Shortcut for ``on('{event.value}', callback, scope)``."
    return register


class Collection(CollectionOperators, BaseModel, Observable):
    """An ordered, key-addressable container with cancellable events.

    Elements live in two index-aligned lists, one of string keys and one of
    values. Positions follow insertion order; keys are unique and stay
    attached to their value when elements are moved or sorted.

    Every structural mutation fires a ``before*`` event first (a listener
    returning ``False`` vetoes it and leaves the collection untouched) and
    the matching plain event after it commits. Mutators report whether
    they committed with a boolean; they never raise for vetoes or missing
    keys and positions.

    Attributes:
        override (bool): When True, inserting an existing key overwrites
            that element and repositions it; when False the insert is
            ignored.
        listening (bool): When False, events are not fired at all and
            every veto check passes.
        validator (Callable | None): Predicate ``(value, key, index)``;
            returning exactly ``False`` rejects an insert or replace and
            fires ``invalid`` instead.

    Example::

        >>> c = Collection(["This", "Is", "A", "Test"])
        >>> c.keys()
        ['0', '1', '2', '3']
        >>> c.get_at(2, detail=True)
        Entry(index=2, key='2', value='A')
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        validate_assignment=True,
        extra="forbid",
    )

    override: bool = Field(
        default_factory=lambda: settings.DEFAULT_OVERRIDE,
        description="Overwrite and reposition on duplicate keys.",
    )
    listening: bool = Field(
        default_factory=lambda: settings.DEFAULT_LISTENING,
        description="Whether events are fired.",
    )
    validator: Callable[..., Any] | None = Field(
        None,
        description="Predicate (value, key, index) guarding inserts and replaces.",
    )

    _keys: list[str] = PrivateAttr(default_factory=list)
    _values: list[Any] = PrivateAttr(default_factory=list)
    _members: set[str] = PrivateAttr(default_factory=set)
    _next_key: int = PrivateAttr(default=0)
    _dispatcher: EventDispatcher = PrivateAttr(default_factory=EventDispatcher)
    _cursor: Cursor | None = PrivateAttr(default=None)

    def __init__(self, *sources: Any, **data: Any) -> None:
        """Create a collection from zero or more iterable sources.

        Args:
            *sources: Lists and other iterables (keys ``"0"``, ``"1"``, ...),
                mappings or other collections (keys kept).
            **data: Model fields: ``override``, ``listening``, ``validator``.

        Raises:
            NotIterableError: If a source is not iterable, or is a string.
        """
        for source in sources:
            if not _is_source(source):
                raise NotIterableError.from_value(source)
        super().__init__(**data)
        if sources:
            self.merge(*sources)

    def model_post_init(self, __context: Any) -> None:
        super().model_post_init(__context)
        self._cursor = Cursor(self)

    # ------------------------------------------------------------------
    # storage primitives
    # ------------------------------------------------------------------

    @property
    def count(self) -> int:
        """Number of elements."""
        return len(self._keys)

    def _track_key(self, key: str) -> None:
        n = numeric_key(key)
        if n is not None and n + 1 > self._next_key:
            self._next_key = n + 1

    def _commit_insert(self, index: int, key: str, value: Any) -> None:
        self._keys.insert(index, key)
        self._values.insert(index, value)
        self._members.add(key)
        self._track_key(key)

    def _rescan_keys(self) -> None:
        self._next_key = 0
        for key in self._keys:
            self._track_key(key)

    def _commit_remove(self, index: int) -> tuple[str, Any]:
        key = self._keys.pop(index)
        value = self._values.pop(index)
        self._members.discard(key)
        n = numeric_key(key)
        if n is not None and n + 1 == self._next_key:
            self._rescan_keys()
        return key, value

    def _reset(self, keys: list[str], values: list[Any]) -> None:
        """Replace the whole storage without firing events."""
        self._keys = keys
        self._values = values
        self._members = set(keys)
        self._rescan_keys()

    def _fire(self, event: EventName, *args: Any) -> bool:
        return bool(self.trigger(event, *args))

    def _validate(self, value: Any, key: str, index: int) -> bool:
        if self.validator is None:
            return True
        if call_adaptive(self.validator, value, key, index) is False:
            logger.debug("Validator rejected value for key %r", key)
            self._fire(EventName.INVALID, value, key, index)
            return False
        return True

    # ------------------------------------------------------------------
    # events
    # ------------------------------------------------------------------

    def on(
        self,
        event: str | EventName | Iterable[str] | Mapping[str, Any],
        callback: Callable[..., Any] | None = None,
        scope: Any = None,
    ) -> Any:
        """Register a listener; usable as a decorator when ``callback`` is omitted.

        Example::

            @collection.on("beforeadd")
            def only_ints(value, key, index):
                return isinstance(value, int)

        Raises:
            UnknownEventError: If an event name is outside the vocabulary.
        """
        if callback is None and not isinstance(event, Mapping):
            names = EventName.parse_many(event)

            def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
                self._dispatcher.on(names, fn, scope)
                return fn

            return decorator
        self._dispatcher.on(event, callback, scope)
        return None

    on_add = _on_event(EventName.ADD)
    on_sort = _on_event(EventName.SORT)
    on_move = _on_event(EventName.MOVE)
    on_clear = _on_event(EventName.CLEAR)
    on_remove = _on_event(EventName.REMOVE)
    on_reverse = _on_event(EventName.REVERSE)
    on_replace = _on_event(EventName.REPLACE)
    on_invalid = _on_event(EventName.INVALID)
    on_beforeadd = _on_event(EventName.BEFORE_ADD)
    on_beforesort = _on_event(EventName.BEFORE_SORT)
    on_beforemove = _on_event(EventName.BEFORE_MOVE)
    on_beforeclear = _on_event(EventName.BEFORE_CLEAR)
    on_beforeremove = _on_event(EventName.BEFORE_REMOVE)
    on_beforereplace = _on_event(EventName.BEFORE_REPLACE)
    on_beforereverse = _on_event(EventName.BEFORE_REVERSE)

    def off(
        self,
        event: str | EventName | Iterable[str] | None = None,
        callback: Callable[..., Any] | None = None,
        scope: Any = None,
    ) -> int:
        """Unregister listeners; with no arguments, remove all of them."""
        return self._dispatcher.off(event, callback, scope)

    def trigger(self, event: str | EventName, *args: Any) -> EventOutcome:
        """Fire ``event`` unless the collection is not listening.

        Raises:
            UnknownEventError: If ``event`` is outside the vocabulary.
        """
        name = EventName.parse(event)
        if not self.listening:
            return EventOutcome.PROCEED
        return self._dispatcher.trigger(name, *args)

    def listener_count(self, event: str | EventName | None = None) -> int:
        return self._dispatcher.count(event)

    def stop_listening(self) -> None:
        self.listening = False

    def start_listening(self) -> None:
        self.listening = True

    @contextmanager
    def batch(self) -> Iterator[Collection]:
        """Suppress events inside the block; restores the previous state on exit."""
        previous = self.listening
        self.listening = False
        try:
            yield self
        finally:
            self.listening = previous

    # ------------------------------------------------------------------
    # cursor
    # ------------------------------------------------------------------

    @property
    def cursor(self) -> Cursor:
        """The collection's default cursor."""
        return self._cursor

    def new_cursor(self) -> Cursor:
        """A fresh, independent cursor over this collection."""
        return Cursor(self)

    def next(self, detail: bool = False) -> Any:
        return self._cursor.next(detail)

    def previous(self, detail: bool = False) -> Any:
        return self._cursor.previous(detail)

    def has_next(self) -> bool:
        return self._cursor.has_next()

    def restart(self) -> None:
        self._cursor.restart()

    def current_key(self) -> str | Any:
        return self._cursor.key

    def current_value(self) -> Any:
        return self._cursor.value

    def current_index(self) -> int | Any:
        return self._cursor.position

    # ------------------------------------------------------------------
    # insertion
    # ------------------------------------------------------------------

    def find_insertion_key(self) -> str:
        """Next synthetic key: the largest numeric-looking key plus one."""
        return str(self._next_key)

    def insert(self, index: int, key: Any, value: Any = Unset, /) -> bool:
        """Insert an element at ``index``.

        Called as ``insert(index, value)`` the key is synthetic; called as
        ``insert(index, key, value)`` the key is coerced to ``str``.

        An existing key is handled by the ``override`` policy: without
        override the insert is ignored, with it the existing element gets
        the new value and is then moved to ``index``.

        Returns:
            bool: True if the collection changed.
        """
        index = normalize_index(index, self.count)
        if value is Unset:
            key, value = self.find_insertion_key(), key
        else:
            key = to_key(key)
            if key in self._members:
                if not self.override:
                    logger.debug("Duplicate key %r ignored", key)
                    return False
                if not self.replace(key, value):
                    return False
                self.move_by_key(key, index)
                return True

        if not self._validate(value, key, index):
            return False
        if not self._fire(EventName.BEFORE_ADD, value, key, index):
            return False
        self._commit_insert(index, key, value)
        self._fire(EventName.ADD, value, key, index)
        return True

    def add(self, key: Any, value: Any = Unset, /) -> bool:
        """Append an element: ``add(value)`` or ``add(key, value)``."""
        return self.insert(self.count, key, value)

    def push(self, *values: Any) -> int:
        """Append each value with a synthetic key; returns the new count."""
        for value in values:
            self.insert(self.count, self.find_insertion_key(), value)
        return self.count

    def unshift(self, *values: Any) -> int:
        """Prepend the values, keeping their order; returns the new count."""
        for value in reversed(values):
            self.insert(0, self.find_insertion_key(), value)
        return self.count

    def replace(self, key: Any, value: Any) -> bool:
        """Overwrite the value stored under ``key`` in place.

        Returns:
            bool: True if replaced; False if the key is missing, the value
            is invalid, or a ``beforereplace`` listener vetoed.
        """
        key = to_key(key)
        if key not in self._members:
            return False
        i = self._keys.index(key)
        last = self._values[i]
        if not self._validate(value, key, i):
            return False
        if not self._fire(EventName.BEFORE_REPLACE, key, last, value, i):
            return False
        self._values[i] = value
        self._fire(EventName.REPLACE, key, last, value, i)
        return True

    def merge(self, *sources: Any) -> Collection:
        """Add the content of every source to this collection, in place.

        Lists and other iterables push their values with synthetic keys;
        mappings add their pairs; collections add their pairs, and a key
        already present is replaced (with ``override``) or pushed under a
        new synthetic key. Any other object is pushed as a single value.
        """
        for source in sources:
            if isinstance(source, Collection):
                for key, value in source.items():
                    if key in self._members:
                        if self.override:
                            self.replace(key, value)
                        else:
                            self.push(value)
                    else:
                        self.add(key, value)
            elif isinstance(source, _SCALAR_SOURCES):
                self.push(source)
            elif isinstance(source, (Mapping, PairSource)):
                for key, value in source.items():
                    self.add(key, value)
            elif isinstance(source, Iterable):
                self.push(*source)
            else:
                self.push(source)
        return self

    def concat(self, *sources: Any) -> Collection:
        """A shallow clone with ``sources`` merged into it."""
        return self.clone().merge(*sources)

    # ------------------------------------------------------------------
    # getters
    # ------------------------------------------------------------------

    def get(self, key_or_index: Any, detail: bool = False) -> Any:
        """Position lookup for ints, key lookup for anything else."""
        if isinstance(key_or_index, int) and not isinstance(key_or_index, bool):
            return self.get_at(key_or_index, detail)
        return self.get_by_key(key_or_index, detail)

    item = get

    def get_at(self, index: int, detail: bool = False) -> Any:
        """Value (or Entry) at ``index``; negatives count from the end."""
        if index < 0:
            index += self.count
        if not 0 <= index < self.count:
            return Undefined
        value = self._values[index]
        return Entry(index, self._keys[index], value) if detail else value

    def get_by_key(self, key: Any, detail: bool = False) -> Any:
        """Value (or Entry) stored under ``key``."""
        i = self.index_of_key(key)
        if i < 0:
            return Undefined
        return Entry(i, self._keys[i], self._values[i]) if detail else self._values[i]

    def first(self, detail: bool = False) -> Any:
        return self.get_at(0, detail) if self.count else Undefined

    def last(self, detail: bool = False) -> Any:
        return self.get_at(self.count - 1, detail) if self.count else Undefined

    head = first
    tail = last

    def keys(self) -> list[str]:
        return list(self._keys)

    def values(self) -> list[Any]:
        return list(self._values)

    def items(self) -> list[tuple[str, Any]]:
        return list(zip(self._keys, self._values))

    def to_dict(self) -> dict[str, Any]:
        return dict(zip(self._keys, self._values))

    def to_list(self) -> list[Any]:
        return self.values()

    # ------------------------------------------------------------------
    # search
    # ------------------------------------------------------------------

    def index_of(self, value: Any, deep: bool = False) -> int:
        return find_position(value, self._values, deep=deep)

    def last_index_of(self, value: Any, deep: bool = False) -> int:
        return find_last_position(value, self._values, deep=deep)

    def index_of_key(self, key: Any) -> int:
        key = to_key(key)
        if key not in self._members:
            return -1
        return self._keys.index(key)

    def last_index_of_key(self, key: Any) -> int:
        return find_last_position(to_key(key), self._keys)

    def contains(self, value: Any, deep: bool = False) -> bool:
        return self.index_of(value, deep) != -1

    includes = contains

    def contains_key(self, key: Any) -> bool:
        return to_key(key) in self._members

    # ------------------------------------------------------------------
    # removal
    # ------------------------------------------------------------------

    def clear(self) -> bool:
        """Remove every element; fires ``clear`` but no ``remove`` events."""
        if not self._fire(EventName.BEFORE_CLEAR, self):
            return False
        self._reset([], [])
        self._fire(EventName.CLEAR, self)
        return True

    remove_all = clear

    def remove_at(self, index: int) -> bool:
        """Remove the element at ``index``; False if out of range or vetoed."""
        if not 0 <= index < self.count:
            return False
        key, value = self._keys[index], self._values[index]
        if not self._fire(EventName.BEFORE_REMOVE, value, key, index):
            return False
        if self.count == 1 and not self._fire(EventName.BEFORE_CLEAR, self):
            return False
        self._commit_remove(index)
        self._fire(EventName.REMOVE, value, key, index)
        if not self.count:
            self._fire(EventName.CLEAR, self)
        return True

    def remove(self, value: Any, deep: bool = False) -> bool:
        """Remove the first element holding ``value``."""
        i = self.index_of(value, deep)
        return self.remove_at(i) if i != -1 else False

    def remove_by_key(self, key: Any) -> bool:
        i = self.index_of_key(key)
        return self.remove_at(i) if i != -1 else False

    def remove_count(self, start: int, count: int | None = None) -> int:
        """Remove up to ``count`` elements from ``start``.

        A vetoed removal skips over that element without counting it.

        Returns:
            int: Number of elements actually removed.
        """
        start = normalize_index(start, self.count)
        if count is None:
            count = self.count
        count = min(count, self.count - start)
        removed = 0
        while count > 0:
            if self.remove_at(start):
                removed += 1
            else:
                start += 1
            count -= 1
        return removed

    def remove_range(self, start: int, end: int) -> int:
        """Remove the elements between ``start`` and ``end`` (exclusive)."""
        start = normalize_index(start, self.count)
        end = normalize_index(end, self.count)
        if end <= start:
            return 0
        return self.remove_count(start, end - start)

    def pop(self, detail: bool = False) -> Any:
        """Remove and return the last value (or Entry); Undefined if none."""
        entry = self.last(detail=True)
        if entry is Undefined or not self.remove_at(entry.index):
            return Undefined
        return entry if detail else entry.value

    def shift(self, detail: bool = False) -> Any:
        """Remove and return the first value (or Entry); Undefined if none."""
        entry = self.first(detail=True)
        if entry is Undefined or not self.remove_at(0):
            return Undefined
        return entry if detail else entry.value

    # ------------------------------------------------------------------
    # reordering
    # ------------------------------------------------------------------

    def move_index(self, old_index: int, new_index: int) -> bool:
        """Move the element at ``old_index`` so it ends at ``new_index``.

        Both indices are normalized; an index equal to ``count`` means the
        last slot. Moving back with the indices swapped restores the
        original order.

        Returns:
            bool: False if there is nothing to reorder or a listener vetoed.
        """
        count = self.count
        if count <= 1:
            return False
        old_index = min(normalize_index(old_index, count), count - 1)
        new_index = min(normalize_index(new_index, count), count - 1)
        key, value = self._keys[old_index], self._values[old_index]
        if not self._fire(EventName.BEFORE_MOVE, value, key, old_index, new_index):
            return False
        self._keys.insert(new_index, self._keys.pop(old_index))
        self._values.insert(new_index, self._values.pop(old_index))
        self._fire(EventName.MOVE, value, key, new_index, old_index)
        return True

    def move(self, value: Any, new_index: int, deep: bool = False) -> bool:
        """Move the first element holding ``value`` to ``new_index``."""
        old = self.index_of(value, deep)
        return self.move_index(old, new_index) if old != -1 else False

    def move_by_key(self, key: Any, new_index: int) -> bool:
        """Move the element stored under ``key`` to ``new_index``."""
        old = self.index_of_key(key)
        return self.move_index(old, new_index) if old != -1 else False

    def swap(self, first: int, second: int) -> bool:
        """Exchange the elements at two positions using two moves.

        Both legs always run, so two ``move`` events fire even for adjacent
        positions. If the second move fails the first one stays applied.
        """
        count = self.count
        if count <= 1:
            return False
        lo = min(normalize_index(first, count), count - 1)
        hi = min(normalize_index(second, count), count - 1)
        if lo == hi:
            return True
        if lo > hi:
            lo, hi = hi, lo
        if not self.move_index(lo, hi):
            return False
        return self.move_index(hi - 1, lo)

    def reverse(self) -> bool:
        """Reverse the order in place."""
        if not self._fire(EventName.BEFORE_REVERSE, self):
            return False
        self._keys.reverse()
        self._values.reverse()
        self._fire(EventName.REVERSE, self)
        return True

    # ------------------------------------------------------------------
    # copies and comparison
    # ------------------------------------------------------------------

    def _clone(self, deep: bool, memo: dict | None = None) -> Collection:
        copy = self.__class__(override=self.override, validator=self.validator)
        if deep:
            values = [deep_copy(v, memo) for v in self._values]
        else:
            values = list(self._values)
        copy._reset(list(self._keys), values)
        return copy

    def clone(self, deep: bool = False) -> Collection:
        """Copy keys, values and policy; listeners are not copied.

        Args:
            deep: Also deep-copy every value.
        """
        return self._clone(deep)

    def equals(self, other: Any, deep: bool = False) -> bool:
        """Positional comparison of keys and values with another collection."""
        if not isinstance(other, Collection):
            return False
        if self.count != other.count:
            return False
        compare = deep_equal if deep else shallow_equal
        for i in range(self.count):
            if self._keys[i] != other._keys[i]:
                return False
            if not compare(self._values[i], other._values[i]):
                return False
        return True

    def __deep_eq__(self, other: Any) -> bool:
        return self.equals(other, deep=True)

    def __copy__(self) -> Collection:
        return self._clone(False)

    def __deepcopy__(self, memo: dict | None = None) -> Collection:
        return self._clone(True, memo)

    # ------------------------------------------------------------------
    # python protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return self.count

    def __iter__(self) -> Iterator[Any]:
        """Iterates over the values, in order."""
        return iter(list(self._values))

    def __reversed__(self) -> Iterator[Any]:
        return iter(self._values[::-1])

    def __contains__(self, value: Any) -> bool:
        """Structural membership test over the values."""
        return self.contains(value, deep=True)

    def __getitem__(self, key: int | str | slice) -> Any:
        """Value by position or key, or a new collection for a slice.

        Raises:
            ItemNotFoundError: If no element matches.
        """
        if isinstance(key, slice):
            result = self.__class__()
            for i in range(self.count)[key]:
                result.add(self._keys[i], self._values[i])
            return result
        found = self.get(key)
        if found is Undefined:
            raise ItemNotFoundError(item=key)
        return found

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Collection):
            return NotImplemented
        return self.equals(other)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.to_dict()!r})"
