"""Instrumentation hooks around history operations.

Every ``exec``, ``undo`` and ``redo`` of an :class:`ActionHistory` runs through
the history's :class:`HookRegistry`. Hooks see the operation name and a small
attribute mapping, and decide when to call the next step.

Operation names:

* ``history.exec.<action name>``, attributes ``action.name``, ``action.required``
* ``history.undo``, attribute ``history.steps``
* ``history.redo``, attribute ``history.steps``
"""

from __future__ import annotations

import fnmatch
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger("action_history.instrumentation")

EXEC_OPERATION_PREFIX = "history.exec."
UNDO_OPERATION = "history.undo"
REDO_OPERATION = "history.redo"


def exec_operation(action_name: str) -> str:
    """Operation name reported for ``exec`` of *action_name*."""
    return f"{EXEC_OPERATION_PREFIX}{action_name}"


@runtime_checkable
class InstrumentationHook(Protocol):
    """Wraps one history operation; must await ``next_step`` to let it run."""

    async def __call__(
        self,
        operation: str,
        attributes: dict[str, Any],
        next_step: Callable[[], Awaitable[Any]],
    ) -> Any: ...


@dataclass(frozen=True, eq=False)
class HookRegistration:
    """A hook plus the operation patterns it applies to.

    ``operations`` holds glob patterns such as ``"history.exec.*"``; an empty
    tuple applies the hook to every operation.
    """

    hook: InstrumentationHook
    operations: tuple[str, ...] = ()
    priority: int = 0

    def applies_to(self, operation: str) -> bool:
        return not self.operations or any(
            fnmatch.fnmatchcase(operation, pattern) for pattern in self.operations
        )


class HookRegistry:
    """Ordered hooks of one history. Lower priorities wrap higher ones."""

    def __init__(self) -> None:
        self._registrations: list[HookRegistration] = []

    def register(
        self,
        hook: InstrumentationHook,
        *,
        operations: list[str] | None = None,
        priority: int = 0,
    ) -> HookRegistration:
        registration = HookRegistration(hook, tuple(operations or ()), priority)
        self._registrations.append(registration)
        # Stable sort keeps registration order among equal priorities.
        self._registrations.sort(key=lambda r: r.priority)
        logger.debug(
            "Registered hook %s for %s",
            type(hook).__name__,
            list(registration.operations) or "all operations",
        )
        return registration

    def unregister(self, registration: HookRegistration) -> None:
        if registration in self._registrations:
            self._registrations.remove(registration)

    def clear(self) -> None:
        self._registrations.clear()

    async def run(
        self,
        operation: str,
        attributes: dict[str, Any],
        call: Callable[[], Awaitable[Any]],
    ) -> Any:
        """Run *call* inside every hook that applies to *operation*."""
        step = call
        for registration in reversed(self._registrations):
            if registration.applies_to(operation):
                step = _bind(registration.hook, operation, attributes, step)
        return await step()


def _bind(
    hook: InstrumentationHook,
    operation: str,
    attributes: dict[str, Any],
    next_step: Callable[[], Awaitable[Any]],
) -> Callable[[], Awaitable[Any]]:
    async def step() -> Any:
        return await hook(operation, attributes, next_step)

    return step


__all__ = [
    "EXEC_OPERATION_PREFIX",
    "REDO_OPERATION",
    "UNDO_OPERATION",
    "HookRegistration",
    "HookRegistry",
    "InstrumentationHook",
    "exec_operation",
]
