# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

from collectionkit._errors import (
    CollectionError,
    ComparatorRequiredError,
    EmptyReduceError,
    ItemNotFoundError,
    NotIterableError,
    UnknownEventError,
)

from ._concepts import Observable, PairSource
from .generic.collection import Collection
from .generic.cursor import Cursor, CursorState
from .generic.event import EventDispatcher, EventName, EventOutcome, Listener
from .generic.index import Entry, normalize_index
from .generic.operators import CollectionOperators

__all__ = (
    "Collection",
    "CollectionError",
    "CollectionOperators",
    "ComparatorRequiredError",
    "Cursor",
    "CursorState",
    "EmptyReduceError",
    "Entry",
    "EventDispatcher",
    "EventName",
    "EventOutcome",
    "ItemNotFoundError",
    "Listener",
    "NotIterableError",
    "Observable",
    "PairSource",
    "UnknownEventError",
    "normalize_index",
)
