"""Error hierarchy for commonlink."""

from __future__ import annotations

from typing import Any, Mapping, Optional


class CommonLinkError(Exception):
    """Base exception for commonlink failures."""

    def __init__(
        self,
        message: str,
        *,
        user_message: Optional[str] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.user_message = message if user_message is None else user_message
        self.context = dict(context) if context else {}

    def log_message(self) -> str:
        if not self.context:
            return str(self)
        return f"{self}: {self.context}"


class ShapeError(CommonLinkError, ValueError):
    """Input matrix is not a square 2-D matrix or its labels do not fit."""


class EntryTypeError(CommonLinkError, TypeError):
    """Matrix entry cannot be read as an edge indicator."""


class SizeLimitError(CommonLinkError, ValueError):
    """Matrix exceeds the configured node limit."""


class ConfigError(CommonLinkError):
    """Configuration loading or validation error."""


class ProviderError(CommonLinkError):
    """Adjacency provider resolution or graph conversion error."""


__all__ = [
    "CommonLinkError",
    "ShapeError",
    "EntryTypeError",
    "SizeLimitError",
    "ConfigError",
    "ProviderError",
]
