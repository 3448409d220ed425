# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from collectionkit._errors import UnknownEventError
from collectionkit.ln import call_adaptive

__all__ = (
    "EventDispatcher",
    "EventName",
    "EventOutcome",
    "Listener",
)

logger = logging.getLogger(__name__)

_SPLITTER = re.compile(r"\s+")


class EventName(str, Enum):
    """The closed vocabulary of collection lifecycle events.

    Every mutation has a ``before*`` event, fired ahead of the change and
    able to veto it, and a plain event fired once the change is committed.
    ``invalid`` has no pair: it reports a value the validator rejected.
    """

    ADD = "add"
    SORT = "sort"
    MOVE = "move"
    CLEAR = "clear"
    REMOVE = "remove"
    REVERSE = "reverse"
    REPLACE = "replace"
    INVALID = "invalid"
    BEFORE_ADD = "beforeadd"
    BEFORE_SORT = "beforesort"
    BEFORE_MOVE = "beforemove"
    BEFORE_CLEAR = "beforeclear"
    BEFORE_REMOVE = "beforeremove"
    BEFORE_REPLACE = "beforereplace"
    BEFORE_REVERSE = "beforereverse"

    @classmethod
    def allowed(cls) -> tuple[str, ...]:
        """Return tuple of all event names."""
        return tuple(e.value for e in cls)

    @property
    def is_before(self) -> bool:
        return self.value.startswith("before")

    @classmethod
    def parse(cls, name: Any) -> EventName:
        """Resolve one event name, case-insensitively.

        Raises:
            UnknownEventError: If ``name`` is not in the vocabulary.
        """
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError as e:
            raise UnknownEventError.from_name(name) from e

    @classmethod
    def parse_many(cls, names: Any) -> list[EventName]:
        """Resolve a whitespace-separated string or an iterable of names."""
        if isinstance(names, cls):
            return [names]
        if isinstance(names, str):
            parts = [n for n in _SPLITTER.split(names.strip()) if n]
            if not parts:
                raise UnknownEventError.from_name(names)
            return [cls.parse(n) for n in parts]
        if isinstance(names, Iterable):
            return [cls.parse(n) for n in names]
        return [cls.parse(names)]


class EventOutcome(str, Enum):
    """Result of firing an event: carry on, or abort the mutation."""

    PROCEED = "proceed"
    ABORT = "abort"

    def __bool__(self) -> bool:
        return self is EventOutcome.PROCEED

    @classmethod
    def from_result(cls, result: Any) -> EventOutcome:
        """Only an explicit ``False`` (or ``ABORT``) vetoes."""
        if result is False or result is cls.ABORT:
            return cls.ABORT
        return cls.PROCEED


@dataclass(slots=True, frozen=True)
class Listener:
    """A registered callback plus the scope it was registered under."""

    callback: Callable[..., Any]
    scope: Any = None

    def matches(self, callback: Any = None, scope: Any = None) -> bool:
        if callback is not None and self.callback != callback:
            return False
        if scope is not None and self.scope != scope:
            return False
        return True


class EventDispatcher:
    """Ordered, cancellable listener registry over :class:`EventName`.

    Listeners run synchronously in registration order. A listener that
    returns exactly ``False`` stops the firing and the dispatcher reports
    :attr:`EventOutcome.ABORT`; any other return value lets the next
    listener run. Exceptions raised by listeners propagate to the caller.

    Example::

        dispatcher = EventDispatcher()
        dispatcher.on("beforeadd", lambda value: value is not None)
        dispatcher.trigger("beforeadd", None)  # EventOutcome.ABORT
    """

    __slots__ = ("_listeners",)

    def __init__(self) -> None:
        self._listeners: dict[EventName, list[Listener]] = {
            name: [] for name in EventName
        }

    def on(
        self,
        event: str | EventName | Iterable[str] | Mapping[str, Any],
        callback: Callable[..., Any] | None = None,
        scope: Any = None,
    ) -> None:
        """Register ``callback`` for one or more events.

        Args:
            event: A name, several whitespace-separated names, an iterable
                of names, or a mapping of name to callback (or to a
                ``(callback, scope)`` pair).
            callback: Callable receiving the event arguments.
            scope: Optional tag; ``off(scope=...)`` removes every listener
                registered with it.

        Raises:
            UnknownEventError: If any name is outside the vocabulary.
            TypeError: If the callback is not callable.
        """
        if isinstance(event, Mapping):
            for name, spec in event.items():
                if isinstance(spec, tuple):
                    self.on(name, *spec)
                else:
                    self.on(name, spec, scope)
            return

        names = EventName.parse_many(event)
        if not callable(callback):
            raise TypeError(f"Listener must be callable, not {callback!r}")
        for name in names:
            self._listeners[name].append(Listener(callback, scope))
            logger.debug("Registered listener %r for %s", callback, name.value)

    def off(
        self,
        event: str | EventName | Iterable[str] | None = None,
        callback: Callable[..., Any] | None = None,
        scope: Any = None,
    ) -> int:
        """Unregister listeners matching ``callback`` and ``scope``.

        Args:
            event: Names to clean up; None means every event.
            callback: Only remove this callback (None matches any).
            scope: Only remove listeners registered with this scope.

        Returns:
            int: Number of listeners removed.
        """
        names = list(EventName) if event is None else EventName.parse_many(event)
        removed = 0
        for name in names:
            kept = [
                lst
                for lst in self._listeners[name]
                if not lst.matches(callback, scope)
            ]
            removed += len(self._listeners[name]) - len(kept)
            self._listeners[name] = kept
        return removed

    def trigger(self, event: str | EventName, *args: Any) -> EventOutcome:
        """Fire ``event``, passing ``args`` to each listener in order.

        Returns:
            EventOutcome: ABORT if a listener vetoed, PROCEED otherwise.
        """
        name = EventName.parse(event)
        # snapshot so listeners may unregister themselves while firing
        for lst in tuple(self._listeners[name]):
            result = call_adaptive(lst.callback, *args, fallback=len(args))
            if EventOutcome.from_result(result) is EventOutcome.ABORT:
                logger.debug("Listener %r vetoed %s", lst.callback, name.value)
                return EventOutcome.ABORT
        return EventOutcome.PROCEED

    def listeners(self, event: str | EventName) -> tuple[Listener, ...]:
        return tuple(self._listeners[EventName.parse(event)])

    def count(self, event: str | EventName | None = None) -> int:
        """Number of listeners for ``event``, or for all events."""
        if event is None:
            return sum(len(v) for v in self._listeners.values())
        return len(self._listeners[EventName.parse(event)])

    def clear(self) -> None:
        for name in self._listeners:
            self._listeners[name] = []
