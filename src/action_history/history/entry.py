"""History records: registered handlers, log entries and their read-only views."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from ..ports import ActionImplementation, UndoCallback


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ActionHandler:
    """An action implementation and the context keys it must have resolved."""

    implementation: ActionImplementation
    required: tuple[str, ...] = ()


@dataclass(eq=False)
class HistoryEntry:
    """One executed action as kept in the done/undone logs.

    Entries compare by identity. ``context`` is the snapshot resolved for the
    execution, not a live view of the context registry.
    """

    name: str
    parameters: dict[str, Any]
    context: dict[str, Any]
    action: ActionImplementation
    time: datetime = field(default_factory=utcnow)
    undo: UndoCallback | None = None

    def to_log(self) -> HistoryLog:
        return HistoryLog(
            name=self.name,
            parameters={
                key: _detached(value) for key, value in self.parameters.items()
            },
            context=dict(self.context),
            time=self.time,
        )


def _detached(value: Any) -> Any:
    """Deep copy of *value*, or *value* itself when it cannot be copied."""
    try:
        return copy.deepcopy(value)
    except (TypeError, copy.Error):
        return value


class HistoryLog(BaseModel):
    """Read-only view of a history entry.

    ``parameters`` holds deep copies of the recorded values, except values
    that cannot be copied (locks, connections), which are shared. ``context``
    is a fresh mapping referencing the same context values the action saw.
    Keys and values are kept as recorded, never validated.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    parameters: dict[Any, Any] = Field(default_factory=dict)
    context: dict[Any, Any] = Field(default_factory=dict)
    time: datetime
