"""BlobCache Errors - Exception Hierarchy.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Optional


class ErrorKind(Enum):
    """Error kinds callers can branch on."""

    NOT_FOUND = auto()   # Nothing stored under the name
    STORE = auto()       # Any other failure


class CacheError(Exception):
    """Base exception for all cache errors.

    Attributes:
        message: Human readable message
        name: Cache name involved, if any
        kind: Error kind
    """

    kind: ErrorKind = ErrorKind.STORE

    def __init__(self, message: str = "", name: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.name = name

    @property
    def is_not_found(self) -> bool:
        """Check if this error signals a cache miss."""
        return self.kind is ErrorKind.NOT_FOUND


class CacheNotFoundError(CacheError, LookupError):
    """No cache is stored under the requested name."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, name: Optional[str] = None) -> None:
        message = f"cache not found: {name}" if name else "cache not found"
        super().__init__(message, name=name)


class StoreError(CacheError):
    """Any failure other than a miss.

    Examples: permission denied, disk full, I/O error, cancellation,
    malformed name.
    """

    kind = ErrorKind.STORE

    def __init__(
        self,
        message: str = "",
        name: Optional[str] = None,
        original: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message, name=name)
        self.original = original


class InvalidNameError(StoreError, ValueError):
    """Cache name is not a relative UNIX-style path inside the root."""


class OperationCancelledError(StoreError):
    """The operation's context was cancelled."""


class DeadlineExceededError(OperationCancelledError):
    """The operation's context deadline passed."""


__all__ = [
    "ErrorKind",
    "CacheError",
    "CacheNotFoundError",
    "StoreError",
    "InvalidNameError",
    "OperationCancelledError",
    "DeadlineExceededError",
]
