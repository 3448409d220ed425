# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

from collectionkit.ln import Undefined

from .index import Entry

if TYPE_CHECKING:
    from .collection import Collection

__all__ = (
    "Cursor",
    "CursorState",
)


class CursorState(str, Enum):
    """Traversal states of a :class:`Cursor`.

    Attributes:
        NOT_STARTED: Neither ``next`` nor ``previous`` has been called
            since creation or the last ``restart``.
        ACTIVE: Positioned on an element.
        EXHAUSTED: Moved past either end of the collection.
    """

    NOT_STARTED = "not_started"
    ACTIVE = "active"
    EXHAUSTED = "exhausted"


class Cursor:
    """Explicit bidirectional iteration over a collection.

    The cursor only stores a position and refers to its collection by
    identity, so several independent cursors may walk the same collection.
    Positions are checked against the live element count on every read;
    a collection that shrinks under an active cursor leaves it exhausted.

    Example::

        cursor = collection.new_cursor()
        while cursor.has_next():
            print(cursor.next())
    """

    __slots__ = ("_collection", "_position")

    def __init__(self, collection: Collection) -> None:
        self._collection = collection
        self._position: int | None = None

    @property
    def collection(self) -> Collection:
        return self._collection

    @property
    def state(self) -> CursorState:
        if self._position is None:
            return CursorState.NOT_STARTED
        if 0 <= self._position < len(self._collection):
            return CursorState.ACTIVE
        return CursorState.EXHAUSTED

    def _read(self, detail: bool) -> Any:
        if self.state is not CursorState.ACTIVE:
            return Undefined
        p = self._position
        key = self._collection._keys[p]
        value = self._collection._values[p]
        return Entry(p, key, value) if detail else value

    def next(self, detail: bool = False) -> Any:
        """Advance forwards and return the value (or Entry) reached.

        Returns ``Undefined`` once the end has been passed.
        """
        if self._position is None:
            self._position = 0
        elif self._position >= len(self._collection):
            return Undefined
        else:
            self._position += 1
        return self._read(detail)

    def previous(self, detail: bool = False) -> Any:
        """Step backwards and return the value (or Entry) reached.

        Starts from the last element; returns ``Undefined`` once the
        beginning has been passed.
        """
        if self._position is None:
            self._position = len(self._collection) - 1
        elif self._position < 0:
            return Undefined
        else:
            self._position -= 1
        return self._read(detail)

    def has_next(self) -> bool:
        """Whether ``next()`` would land on an element."""
        count = len(self._collection)
        if self._position is None:
            return count > 0
        return self._position < count and self._position + 1 < count

    def has_previous(self) -> bool:
        """Whether ``previous()`` would land on an element."""
        count = len(self._collection)
        if self._position is None:
            return count > 0
        return 0 <= self._position - 1 < count

    def restart(self) -> None:
        self._position = None

    @property
    def position(self) -> int | Any:
        """Current position, ``Undefined`` unless active."""
        if self.state is not CursorState.ACTIVE:
            return Undefined
        return self._position

    @property
    def key(self) -> str | Any:
        entry = self._read(True)
        return entry.key if entry is not Undefined else Undefined

    @property
    def value(self) -> Any:
        return self._read(False)

    @property
    def entry(self) -> Entry | Any:
        return self._read(True)

    def __iter__(self) -> Cursor:
        return self

    def __next__(self) -> Any:
        if not self.has_next():
            raise StopIteration
        return self.next()

    def __repr__(self) -> str:
        return f"Cursor(state={self.state.value}, position={self._position})"
