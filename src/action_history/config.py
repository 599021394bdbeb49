"""HistoryConfig — validated options for an ActionHistory instance."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .exceptions import HistoryConfigurationError

DEFAULT_LIMIT = 10000


class HistoryConfig(BaseModel):
    """Options of a single history.

    ``limit`` bounds the done log; the oldest entries are dropped first.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    limit: int = Field(
        default=DEFAULT_LIMIT,
        ge=0,
        description="Maximum number of entries kept in the done log",
    )

    @classmethod
    def build(cls, **options: Any) -> HistoryConfig:
        """Validate *options*, raising ``HistoryConfigurationError`` on failure."""
        try:
            return cls(**options)
        except PydanticValidationError as exc:
            errors = [
                f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
                for err in exc.errors()
            ]
            raise HistoryConfigurationError(errors) from exc


__all__ = ["DEFAULT_LIMIT", "HistoryConfig"]
