# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

import importlib
import logging
from typing import TYPE_CHECKING

from . import ln as ln
from .config import settings
from .ln import Undefined, Unset
from .version import __version__

if TYPE_CHECKING:
    from .protocols.generic.collection import Collection
    from .protocols.generic.cursor import Cursor, CursorState
    from .protocols.generic.event import (
        EventDispatcher,
        EventName,
        EventOutcome,
    )
    from .protocols.generic.index import Entry

logger = logging.getLogger(__name__)
logger.setLevel(settings.LOG_LEVEL)

_lazy_imports = {}


def _get_obj(name: str, module: str):
    global _lazy_imports
    mod = importlib.import_module(f"collectionkit.{module}")
    obj_ = getattr(mod, name)

    _lazy_imports[name] = obj_
    return obj_


def __getattr__(name: str):
    global _lazy_imports
    if name in _lazy_imports:
        return _lazy_imports[name]

    match name:
        case "Collection":
            return _get_obj("Collection", "protocols.generic.collection")
        case "Cursor":
            return _get_obj("Cursor", "protocols.generic.cursor")
        case "CursorState":
            return _get_obj("CursorState", "protocols.generic.cursor")
        case "Entry":
            return _get_obj("Entry", "protocols.generic.index")
        case "EventDispatcher":
            return _get_obj("EventDispatcher", "protocols.generic.event")
        case "EventName":
            return _get_obj("EventName", "protocols.generic.event")
        case "EventOutcome":
            return _get_obj("EventOutcome", "protocols.generic.event")
        case "types":
            from .protocols import types

            _lazy_imports["types"] = types
            return types
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


__all__ = (
    "__version__",
    "Collection",
    "Cursor",
    "CursorState",
    "Entry",
    "EventDispatcher",
    "EventName",
    "EventOutcome",
    "Undefined",
    "Unset",
    "ln",
    "logger",
    "settings",
    "types",
)
