from __future__ import annotations

from typing import Any

import pytest

from action_history import ActionHistory
from action_history.instrumentation import (
    REDO_OPERATION,
    UNDO_OPERATION,
    HookRegistry,
    InstrumentationHook,
    exec_operation,
)


class RecordingHook:
    def __init__(self, name: str, order: list[str]) -> None:
        self._name = name
        self._order = order
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def __call__(
        self,
        operation: str,
        attributes: dict[str, Any],
        next_step: Any,
    ) -> Any:
        self.calls.append((operation, dict(attributes)))
        self._order.append(f"before:{self._name}")
        result = await next_step()
        self._order.append(f"after:{self._name}")
        return result


def test_recording_hook_satisfies_protocol() -> None:
    assert isinstance(RecordingHook("x", []), InstrumentationHook)


def test_exec_operation_names() -> None:
    assert exec_operation("save") == "history.exec.save"
    assert UNDO_OPERATION == "history.undo"
    assert REDO_OPERATION == "history.redo"


@pytest.mark.asyncio
async def test_hooks_run_in_priority_order() -> None:
    order: list[str] = []
    registry = HookRegistry()
    registry.register(RecordingHook("inner", order), priority=0)
    registry.register(RecordingHook("outer", order), priority=-10)

    async def _call() -> str:
        order.append("call")
        return "ok"

    assert await registry.run(UNDO_OPERATION, {}, _call) == "ok"
    assert order == [
        "before:outer",
        "before:inner",
        "call",
        "after:inner",
        "after:outer",
    ]


@pytest.mark.asyncio
async def test_hooks_filter_by_operation_pattern() -> None:
    order: list[str] = []
    registry = HookRegistry()
    registration = registry.register(
        RecordingHook("exec", order), operations=["history.exec.*"]
    )

    async def _call() -> None:
        order.append("call")

    await registry.run(exec_operation("save"), {"action.name": "save"}, _call)
    assert order == ["before:exec", "call", "after:exec"]

    order.clear()
    await registry.run(UNDO_OPERATION, {}, _call)
    assert order == ["call"]

    registry.unregister(registration)
    order.clear()
    await registry.run(exec_operation("save"), {}, _call)
    assert order == ["call"]


@pytest.mark.asyncio
async def test_history_operations_are_instrumented() -> None:
    hook = RecordingHook("trace", [])
    history = ActionHistory()
    history.hooks.register(hook, operations=["history.*"])
    history.action("save", lambda _p, _c: lambda: None, ["user"])
    history.context("user", "alice")

    await history.exec("save")
    await history.undo(2)
    await history.redo()

    assert [operation for operation, _ in hook.calls] == [
        "history.exec.save",
        "history.undo",
        "history.redo",
    ]
    assert hook.calls[0][1] == {"action.name": "save", "action.required": ["user"]}
    assert hook.calls[1][1] == {"history.steps": 2}


@pytest.mark.asyncio
async def test_hook_registry_can_be_shared_between_histories() -> None:
    hook = RecordingHook("shared", [])
    registry = HookRegistry()
    registry.register(hook)
    first = ActionHistory(hooks=registry)
    second = ActionHistory(hooks=registry)

    await first.undo()
    await second.redo()

    assert first.hooks is second.hooks is registry
    assert [operation for operation, _ in hook.calls] == [
        UNDO_OPERATION,
        REDO_OPERATION,
    ]
    # Histories built without a registry get their own.
    assert ActionHistory().hooks is not ActionHistory().hooks


@pytest.mark.asyncio
async def test_hook_errors_propagate() -> None:
    async def failing(_op: str, _attrs: dict[str, Any], _next: Any) -> None:
        raise RuntimeError("hook failed")

    history = ActionHistory()
    history.hooks.register(failing)

    with pytest.raises(RuntimeError, match="hook failed"):
        await history.undo()

    history.hooks.clear()
    assert await history.undo() == 0
