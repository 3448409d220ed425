# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any, Protocol, runtime_checkable

__all__ = (
    "Observable",
    "PairSource",
)


@runtime_checkable
class PairSource(Protocol):
    """Anything that can hand out its key/value pairs in order."""

    def items(self) -> Iterable[tuple[Any, Any]]: ...


class Observable(ABC):
    """Observable entities must expose listener registration and firing."""

    @abstractmethod
    def on(self, event, callback=None, scope=None):
        pass

    @abstractmethod
    def off(self, event=None, callback=None, scope=None):
        pass

    @abstractmethod
    def trigger(self, event, *args):
        pass
