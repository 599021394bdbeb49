"""EventEmitter — synchronous publish/subscribe by event name."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger("action_history.emitter")


def _names(event: str | list[str]) -> list[str]:
    return list(event) if isinstance(event, list) else [event]


class EventEmitter:
    """Fan-out of positional arguments to handlers registered per event name.

    Handlers run synchronously, in registration order. A handler may be
    attached to several events at once by passing a list of names.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[Callable[..., Any]]] = {}

    def on(self, event: str | list[str], handler: Callable[..., Any]) -> None:
        """Attach *handler* to one or more events."""
        for name in _names(event):
            self._handlers.setdefault(name, []).append(handler)

    def off(self, event: str | list[str], handler: Callable[..., Any]) -> None:
        """Detach the most recently attached registration of *handler*."""
        for name in _names(event):
            handlers = self._handlers.get(name, [])
            for index in range(len(handlers) - 1, -1, -1):
                if handlers[index] == handler:
                    del handlers[index]
                    break

    def emit(self, event: str | list[str], *args: Any) -> None:
        """Call every handler of each event with *args*."""
        for name in _names(event):
            for handler in list(self._handlers.get(name, [])):
                try:
                    handler(*args)
                except Exception:
                    logger.exception(
                        "Error executing handler %s for event %r",
                        getattr(handler, "__name__", type(handler).__name__),
                        name,
                    )
                    raise

    # ── Introspection ────────────────────────────────────────────

    def get_registered_handlers(self) -> dict[str, list[Callable[..., Any]]]:
        """Return all registered handlers (debugging utility)."""
        return {k: list(v) for k, v in self._handlers.items() if v}

    def clear(self) -> None:
        """Remove all handler registrations (testing utility)."""
        self._handlers.clear()


__all__ = ["EventEmitter"]
