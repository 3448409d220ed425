# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

import pytest

from collectionkit.protocols.generic.collection import Collection
from collectionkit.protocols.generic.event import EventName


class EventRecorder:
    """Listens to every event of a collection and keeps the calls in order."""

    def __init__(self, collection: Collection):
        self.calls: list[tuple[str, tuple]] = []
        for name in EventName:
            collection.on(name, self._make(name.value))

    def _make(self, name: str):
        def record(*args):
            self.calls.append((name, args))

        return record

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def args(self, name: str) -> list[tuple]:
        return [args for n, args in self.calls if n == name]

    def reset(self) -> None:
        self.calls.clear()


@pytest.fixture
def words():
    return Collection(["This", "Is", "A", "Test"])


@pytest.fixture
def abc():
    return Collection(["a", "b", "c"])


@pytest.fixture
def letters():
    return Collection(["a", "b", "c", "d", "e"])


@pytest.fixture
def recorder():
    """Factory attaching an :class:`EventRecorder` to a collection."""
    return EventRecorder
