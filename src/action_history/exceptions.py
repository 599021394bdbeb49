"""Exceptions raised by the action-history toolkit."""

from __future__ import annotations


class ActionHistoryError(Exception):
    """Root exception for the entire action-history toolkit."""


class HandlerError(ActionHistoryError):
    """Base class for all handler related errors (registration, lookup)."""


class UnknownActionError(HandlerError):
    """Raised when an action is executed without a registered handler.

    Usage: ``ActionHistory.exec`` raises this for names never passed to
    ``ActionHistory.action``.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No action handler registered for {name!r}")


class HistoryConfigurationError(ActionHistoryError):
    """Raised when history options fail validation."""

    def __init__(self, errors: list[str] | str) -> None:
        self.errors = [errors] if isinstance(errors, str) else list(errors)
        super().__init__("; ".join(self.errors))


__all__ = [
    "ActionHistoryError",
    "HandlerError",
    "HistoryConfigurationError",
    "UnknownActionError",
]
