"""ActionHistory — executes named actions and keeps the undo/redo log."""

from __future__ import annotations

import logging
from collections import deque
from inspect import isawaitable
from itertools import islice
from typing import TYPE_CHECKING, Any

from ..config import DEFAULT_LIMIT, HistoryConfig
from ..exceptions import UnknownActionError
from ..instrumentation import (
    REDO_OPERATION,
    UNDO_OPERATION,
    HookRegistry,
    exec_operation,
)
from ..registry import DeferredRegistry
from .entry import ActionHandler, HistoryEntry, HistoryLog, utcnow

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable, Mapping

    from ..ports import ActionImplementation, UndoCallback

logger = logging.getLogger("action_history.history")

UNDO_ACTION = "history:undo"
REDO_ACTION = "history:redo"


class ActionHistory:
    """Bounded undo/redo log over named, context-dependent actions.

    Handlers are registered by name together with the context keys they
    need. ``exec`` waits until those keys are available, runs the handler and,
    if the handler returned an undo callback, records the execution at the
    head of the done log.

    Both logs are most-recent-first. The done log holds at most ``limit``
    entries; executing a new reversible action discards the undone log,
    replaying one through ``redo`` does not.

    Usage::

        history = ActionHistory(limit=500)

        async def rename(params, context):
            doc = context["document"]
            previous, doc.title = doc.title, params["title"]

            def revert() -> None:
                doc.title = previous

            return revert

        history.action("rename", rename, ["document"])
        history.context("document", active_document)

        await history.exec("rename", {"title": "Draft"})
        await history.undo()
        await history.redo()

    ``history:undo`` and ``history:redo`` are pre-registered, irreversible
    actions taking ``{"steps": n}``, so undo/redo can be dispatched like any
    other action.
    """

    def __init__(
        self,
        limit: int = DEFAULT_LIMIT,
        *,
        hooks: HookRegistry | None = None,
    ) -> None:
        self._config = HistoryConfig.build(limit=limit)
        self._hooks = hooks if hooks is not None else HookRegistry()
        self._actions = DeferredRegistry()
        self._context = DeferredRegistry()
        self._done: deque[HistoryEntry] = deque(maxlen=self._config.limit)
        self._undone: deque[HistoryEntry] = deque()

        self.action(UNDO_ACTION, self._undo_action)
        self.action(REDO_ACTION, self._redo_action)

    @property
    def config(self) -> HistoryConfig:
        return self._config

    @property
    def limit(self) -> int:
        return self._config.limit

    @property
    def hooks(self) -> HookRegistry:
        """Instrumentation hooks wrapping exec, undo and redo."""
        return self._hooks

    # ── Registration ─────────────────────────────────────────────

    def action(
        self,
        name: str,
        implementation: ActionImplementation,
        required: Iterable[str] = (),
    ) -> None:
        """Register (or replace) the handler for *name*.

        *required* lists the context keys resolved before every execution.
        """
        handler = ActionHandler(implementation, tuple(required))
        self._actions.set(name, handler)
        logger.debug(
            "Registered action %r (requires %s)", name, list(handler.required)
        )

    def has_action(self, name: str) -> bool:
        return self._actions.has(name)

    def context(self, name: str, value: Any) -> None:
        """Provide a context value, waking executions waiting on it.

        ``None`` clears the value.
        """
        self._context.set(name, value)
        logger.debug("Context %r %s", name, "cleared" if value is None else "set")

    # ── Execution ────────────────────────────────────────────────

    async def exec(
        self,
        name: str,
        parameters: Mapping[str, Any] | None = None,
    ) -> None:
        """Run the action registered under *name*.

        Raises:
            UnknownActionError: If no handler is registered for *name*.

        Errors raised by the handler propagate unchanged and leave both logs
        as they were.
        """
        if not self._actions.has(name):
            logger.warning("Attempted to execute unknown action %r", name)
            raise UnknownActionError(name)

        handler: ActionHandler = await self._actions.get(name)
        params = dict(parameters or {})

        async def _exec() -> None:
            context = await self._context.all(handler.required)
            entry = HistoryEntry(
                name=name,
                parameters=params,
                context=context,
                action=handler.implementation,
            )
            await self._run(entry, reset_undone=True)

        await self._instrument(
            exec_operation(name),
            {"action.name": name, "action.required": list(handler.required)},
            _exec,
        )

    async def undo(self, steps: int = 1) -> int:
        """Revert up to *steps* actions, most recent first.

        Stops early once the done log is empty. Returns the number of
        actions reverted.
        """

        async def _undo() -> int:
            performed = 0
            while performed < steps and self._done:
                entry = self._done[0]
                await _call(entry.undo)
                entry.time = utcnow()
                if entry in self._done:
                    self._done.remove(entry)
                self._undone.appendleft(entry)
                performed += 1
                logger.info("Undid action %r", entry.name)
            return performed

        result: int = await self._instrument(
            UNDO_OPERATION, {"history.steps": steps}, _undo
        )
        return result

    async def redo(self, steps: int = 1) -> int:
        """Replay up to *steps* undone actions, most recently undone first.

        Each replay runs the recorded implementation again with the recorded
        parameters and context. Returns the number of actions replayed.
        """

        async def _redo() -> int:
            performed = 0
            while performed < steps and self._undone:
                entry = self._undone[0]
                await self._run(entry, reset_undone=False)
                if entry in self._undone:
                    self._undone.remove(entry)
                performed += 1
                logger.info("Redid action %r", entry.name)
            return performed

        result: int = await self._instrument(
            REDO_OPERATION, {"history.steps": steps}, _redo
        )
        return result

    # ── Log queries ──────────────────────────────────────────────

    def last(self, steps: int) -> list[HistoryLog]:
        """Return up to *steps* most recently done entries."""
        return [entry.to_log() for entry in islice(self._done, max(steps, 0))]

    def last_undone(self, steps: int) -> list[HistoryLog]:
        """Return up to *steps* most recently undone entries."""
        return [entry.to_log() for entry in islice(self._undone, max(steps, 0))]

    # ── Internals ────────────────────────────────────────────────

    async def _run(self, entry: HistoryEntry, *, reset_undone: bool) -> None:
        try:
            result = entry.action(entry.parameters, entry.context)
            if isawaitable(result):
                result = await result
        except Exception:
            logger.exception("Action %r failed", entry.name)
            raise

        if result is not None and not callable(result):
            raise TypeError(
                f"Action {entry.name!r} must return an undo callable or None, "
                f"got {type(result).__name__}"
            )

        entry.time = utcnow()
        if result is None:
            entry.undo = None
            logger.info("Executed irreversible action %r", entry.name)
            return

        entry.undo = result
        if reset_undone:
            self._undone.clear()
        # deque(maxlen=limit) drops the oldest entry from the right end.
        self._done.appendleft(entry)
        logger.info("Executed action %r", entry.name)

    async def _instrument(
        self,
        operation: str,
        attributes: dict[str, Any],
        call: Callable[[], Awaitable[Any]],
    ) -> Any:
        return await self._hooks.run(operation, attributes, call)

    async def _undo_action(
        self, parameters: dict[str, Any], _context: dict[str, Any]
    ) -> None:
        await self.undo(parameters.get("steps", 1))

    async def _redo_action(
        self, parameters: dict[str, Any], _context: dict[str, Any]
    ) -> None:
        await self.redo(parameters.get("steps", 1))


async def _call(callback: UndoCallback | None) -> None:
    if callback is None:
        return
    result = callback()
    if isawaitable(result):
        await result


__all__ = ["REDO_ACTION", "UNDO_ACTION", "ActionHistory"]
