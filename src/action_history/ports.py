"""Protocols and callable shapes shared by the registry and the history."""

from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    Any,
    Protocol,
    TypeAlias,
    runtime_checkable,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable, Mapping

    from .history.entry import HistoryLog

UndoCallback: TypeAlias = "Callable[[], Awaitable[None] | None]"
"""Zero-argument step reversing the effect of one action."""

ActionImplementation: TypeAlias = (
    "Callable[[dict[str, Any], dict[str, Any]], "
    "Awaitable[UndoCallback | None] | UndoCallback | None]"
)
"""Host callable invoked as ``implementation(parameters, context)``.

Returning an :data:`UndoCallback` makes the action reversible; returning
``None`` marks it irreversible.
"""


@runtime_checkable
class IRegistry(Protocol):
    """Port for a deferred key/value store."""

    def has(self, name: str) -> bool:
        """Return *True* if *name* currently holds a value."""
        ...

    async def get(self, name: str) -> Any:
        """Return the value of *name*, waiting for it if unset."""
        ...

    def set(self, name: str, value: Any = None) -> None:
        """Store *value*; ``None`` unsets the slot."""
        ...

    def unset(self, name: str) -> None:
        """Remove the value of *name*."""
        ...

    def patch(self, members: Mapping[str, Any]) -> None:
        """Set every member whose value is not ``None``."""
        ...

    async def all(
        self, names: Iterable[str], include_extra: bool = False
    ) -> dict[str, Any]:
        """Wait for every slot in *names*."""
        ...


@runtime_checkable
class IActionHistory(Protocol):
    """Port for an undo/redo log of named actions."""

    def action(
        self,
        name: str,
        implementation: ActionImplementation,
        required: Iterable[str] = (),
    ) -> None:
        """Register (or replace) the handler for *name*."""
        ...

    def context(self, name: str, value: Any) -> None:
        """Provide (or clear, with ``None``) a context value."""
        ...

    async def exec(
        self, name: str, parameters: Mapping[str, Any] | None = None
    ) -> None:
        """Run the action registered under *name*."""
        ...

    async def undo(self, steps: int = 1) -> int:
        """Revert up to *steps* actions; return how many were reverted."""
        ...

    async def redo(self, steps: int = 1) -> int:
        """Replay up to *steps* undone actions; return how many were replayed."""
        ...

    def last(self, steps: int) -> list[HistoryLog]:
        """Return up to *steps* most recent done entries."""
        ...

    def last_undone(self, steps: int) -> list[HistoryLog]:
        """Return up to *steps* most recent undone entries."""
        ...


__all__ = [
    "ActionImplementation",
    "IActionHistory",
    "IRegistry",
    "UndoCallback",
]
