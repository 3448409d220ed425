# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

from typing import Any, ClassVar

__all__ = (
    "CollectionError",
    "ComparatorRequiredError",
    "EmptyReduceError",
    "ItemNotFoundError",
    "NotIterableError",
    "UnknownEventError",
)


class CollectionError(Exception):
    """Base class for the fatal errors raised by collectionkit."""

    default_message: ClassVar[str] = "Collection error"

    def __init__(
        self,
        message: str | None = None,
        *,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message or self.default_message)
        if cause:
            self.__cause__ = cause  # preserves traceback
        self.message = message or self.default_message
        self.details = details or {}

    def to_dict(self, *, include_cause: bool = False) -> dict[str, Any]:
        data = {
            "error": self.__class__.__name__,
            "message": self.message,
            **({"details": self.details} if self.details else {}),
        }
        if include_cause and (cause := self.get_cause()):
            data["cause"] = repr(cause)
        return data

    def get_cause(self) -> Exception | None:
        """Get the cause of this error, if any."""
        return self.__cause__


class UnknownEventError(CollectionError, ValueError):
    """Raised when an event name is outside the fixed vocabulary."""

    default_message = "Event is not defined"

    @classmethod
    def from_name(cls, name: Any) -> "UnknownEventError":
        return cls(f'The event "{name}" is not defined.', details={"event": name})


class NotIterableError(CollectionError, TypeError):
    """Raised when a collection is built from a non-iterable source."""

    default_message = "Object is not iterable"

    @classmethod
    def from_value(cls, value: Any) -> "NotIterableError":
        text = str(value)
        if len(text) > 50:
            text = f"{text[:50]}..."
        return cls(
            f'The object "{text}" is not iterable.',
            details={"type": type(value).__name__},
        )


class EmptyReduceError(CollectionError, TypeError):
    """Raised by reduce/reduce_right on an empty collection without a seed."""

    default_message = "Reduce of empty Collection with no initial value."


class ItemNotFoundError(CollectionError, LookupError):
    """Raised by ``collection[...]`` when no element matches."""

    default_message = "Item not found in collection"

    def __init__(self, message: str | None = None, *, item: Any = None, **kw: Any):
        if item is not None:
            text = str(item)
            if len(text) > 50:
                text = f"{text[:50]}..."
            message = f"{message or self.default_message} (item: {text})"
        super().__init__(message, **kw)


class ComparatorRequiredError(CollectionError, TypeError):
    """Raised by max/avg when values cannot be compared without a function."""

    default_message = "You must provide a comparator."
