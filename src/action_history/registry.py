"""DeferredRegistry — named slots whose reads wait until the slot is set."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

logger = logging.getLogger("action_history.registry")


@dataclass
class _PendingRead:
    """Shared wait on one unset slot and the number of readers still on it."""

    future: asyncio.Future[Any]
    readers: int = 0


class DeferredRegistry:
    """Store of named values where producers and consumers may race.

    A slot is either unset or holds exactly one value. ``None`` is the
    *absent* marker: setting a slot to ``None`` unsets it.

    Reading an unset slot waits for the next ``set`` of that slot. All
    concurrent readers of the same slot share a single pending future and
    are resolved together; the future is discarded in the same ``set`` call,
    so a later read of an unset slot starts a fresh one.

    Usage::

        registry = DeferredRegistry({"locale": "en"})

        async def consumer() -> None:
            user = await registry.get("user")  # waits
            ...

        registry.set("user", current_user)  # wakes every waiting consumer
    """

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = {}
        self._pending: dict[str, _PendingRead] = {}
        if initial:
            self.patch(initial)

    # ── Queries ──────────────────────────────────────────────────

    def has(self, name: str) -> bool:
        """Return True if *name* currently holds a value."""
        return name in self._values

    def __contains__(self, name: object) -> bool:
        return name in self._values

    async def get(self, name: str) -> Any:
        """Return the value of *name*, waiting until it is set if needed."""
        if name in self._values:
            return self._values[name]

        pending = self._pending.get(name)
        if pending is None:
            pending = _PendingRead(asyncio.get_running_loop().create_future())
            self._pending[name] = pending
            logger.debug("Waiting for registry slot %r", name)

        pending.readers += 1
        try:
            # A cancelled reader must not cancel the future other readers share.
            return await asyncio.shield(pending.future)
        except asyncio.CancelledError:
            pending.readers -= 1
            if pending.readers == 0 and self._pending.get(name) is pending:
                del self._pending[name]
                pending.future.cancel()
            raise

    async def all(
        self,
        names: Iterable[str],
        include_extra: bool = False,
    ) -> dict[str, Any]:
        """Wait for every slot in *names* and return them as a mapping.

        With *include_extra*, every other slot set at the moment of return is
        merged in as well, without waiting on anything.
        """
        wanted = list(names)
        result: dict[str, Any] = {}
        for name in wanted:
            result[name] = await self.get(name)
        if include_extra:
            for name, value in self._values.items():
                if name not in result:
                    result[name] = value
        return result

    # ── Mutation ─────────────────────────────────────────────────

    def set(self, name: str, value: Any = None) -> None:
        """Store *value* under *name* and wake its waiting readers.

        ``None`` behaves like :meth:`unset`.
        """
        if value is None:
            self.unset(name)
            return

        self._values[name] = value
        pending = self._pending.pop(name, None)
        if pending is not None and not pending.future.done():
            pending.future.set_result(value)
            logger.debug("Resolved pending registry slot %r", name)

    def unset(self, name: str) -> None:
        """Remove the value of *name*; pending readers keep waiting."""
        self._values.pop(name, None)

    def patch(self, members: Mapping[str, Any]) -> None:
        """``set`` every member whose value is not ``None``.

        ``None`` members are skipped, never unset.
        """
        for name, value in members.items():
            if value is not None:
                self.set(name, value)

    # ── Introspection ────────────────────────────────────────────

    def snapshot(self) -> dict[str, Any]:
        """Return the currently set slots (shallow copy)."""
        return dict(self._values)

    def pending(self) -> list[str]:
        """Return the names that readers are currently waiting on."""
        return list(self._pending)


__all__ = ["DeferredRegistry"]
