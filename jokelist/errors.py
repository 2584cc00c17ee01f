"""Exceptions raised while fetching, normalizing and caching jokes."""
from __future__ import annotations

from typing import Optional


class JokeListError(Exception):
    """Base class for all jokelist failures.

    Attributes:
        message: Human-readable description, shown as-is in the UI.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class RemoteError(JokeListError):
    """The joke API answered with a non-2xx status or could not be reached.

    Attributes:
        status_code: HTTP status, or None for transport / decoding failures.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ApiError(JokeListError):
    """The API answered 2xx but flagged an application-level error in the body."""


class EmptyResultError(JokeListError):
    """The normalized response contained no jokes."""

    def __init__(self, message: str = "No jokes found in the selected category"):
        super().__init__(message)


class StorageError(JokeListError):
    """A cache read/write failed (I/O error, bad payload, quota exceeded).

    Attributes:
        key: The storage key involved, if any.
    """

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key

    def __str__(self) -> str:
        if self.key:
            return f"{self.message} (key: {self.key})"
        return self.message
