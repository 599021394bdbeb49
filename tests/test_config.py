from __future__ import annotations

import pytest

from action_history import (
    DEFAULT_LIMIT,
    ActionHistory,
    ActionHistoryError,
    HandlerError,
    HistoryConfig,
    HistoryConfigurationError,
    UnknownActionError,
)


def test_config_defaults() -> None:
    config = HistoryConfig()
    assert config.limit == DEFAULT_LIMIT == 10000


def test_config_is_frozen() -> None:
    config = HistoryConfig.build(limit=5)
    with pytest.raises(ValueError):
        config.limit = 6  # type: ignore[misc]


@pytest.mark.parametrize("limit", [-1, "many"])
def test_invalid_limit_raises_configuration_error(limit: object) -> None:
    with pytest.raises(HistoryConfigurationError, match="limit") as exc_info:
        ActionHistory(limit=limit)  # type: ignore[arg-type]
    assert exc_info.value.errors
    assert isinstance(exc_info.value, ActionHistoryError)


def test_unknown_options_are_rejected() -> None:
    with pytest.raises(HistoryConfigurationError, match="size"):
        HistoryConfig.build(size=3)


def test_history_exposes_config() -> None:
    history = ActionHistory(limit=0)
    assert history.config == HistoryConfig(limit=0)
    assert history.limit == 0


@pytest.mark.asyncio
async def test_zero_limit_keeps_nothing() -> None:
    history = ActionHistory(limit=0)
    history.action("foo", lambda _p, _c: lambda: None)
    await history.exec("foo")
    assert history.last(1) == []
    assert await history.undo() == 0


def test_exception_hierarchy() -> None:
    error = UnknownActionError("foo")
    assert isinstance(error, HandlerError)
    assert isinstance(error, ActionHistoryError)
    assert error.name == "foo"
    assert str(error) == "No action handler registered for 'foo'"

    config_error = HistoryConfigurationError("bad")
    assert config_error.errors == ["bad"]
