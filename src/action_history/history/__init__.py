"""Undo/Redo history — named actions with deferred context."""

from .entry import ActionHandler, HistoryEntry, HistoryLog
from .service import REDO_ACTION, UNDO_ACTION, ActionHistory

__all__ = [
    "ActionHandler",
    "ActionHistory",
    "HistoryEntry",
    "HistoryLog",
    "REDO_ACTION",
    "UNDO_ACTION",
]
