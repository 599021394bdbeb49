"""action-history — undo/redo for named actions with deferred context.

Zero infrastructure dependencies. Pydantic for configuration and log views.
"""

from __future__ import annotations

from .config import DEFAULT_LIMIT, HistoryConfig
from .emitter import EventEmitter
from .exceptions import (
    ActionHistoryError,
    HandlerError,
    HistoryConfigurationError,
    UnknownActionError,
)
from .history import (
    REDO_ACTION,
    UNDO_ACTION,
    ActionHandler,
    ActionHistory,
    HistoryEntry,
    HistoryLog,
)
from .instrumentation import (
    REDO_OPERATION,
    UNDO_OPERATION,
    HookRegistration,
    HookRegistry,
    InstrumentationHook,
    exec_operation,
)
from .ports import ActionImplementation, IActionHistory, IRegistry, UndoCallback
from .registry import DeferredRegistry

__all__: list[str] = [
    # Core
    "ActionHistory",
    "DeferredRegistry",
    "EventEmitter",
    # Records
    "ActionHandler",
    "HistoryEntry",
    "HistoryLog",
    "REDO_ACTION",
    "UNDO_ACTION",
    # Config
    "DEFAULT_LIMIT",
    "HistoryConfig",
    # Errors
    "ActionHistoryError",
    "HandlerError",
    "HistoryConfigurationError",
    "UnknownActionError",
    # Instrumentation
    "HookRegistration",
    "HookRegistry",
    "InstrumentationHook",
    "REDO_OPERATION",
    "UNDO_OPERATION",
    "exec_operation",
    # Ports
    "ActionImplementation",
    "IActionHistory",
    "IRegistry",
    "UndoCallback",
]
