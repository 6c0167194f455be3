"""Error taxonomy for event sync.

Every error carries an ``error_type`` that callers dispatch on to render an
actionable message; the message text itself is for humans only.
"""

from __future__ import annotations

from enum import Enum


class ErrorType(str, Enum):
    NETWORK = "network"
    UNAUTHORIZED = "unauthorized"
    REMOTE_REJECTED = "remote_rejected"
    DECODE = "decode"
    NOT_FOUND = "not_found"
    STORAGE = "storage"
    COMBINED = "combined"


class SyncError(Exception):
    """Base error with a dispatch key and a readable message."""

    error_type: ErrorType

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class NetworkError(SyncError):
    """Transport-level failure: DNS, connect, read or timeout."""

    error_type = ErrorType.NETWORK

    def __init__(self, message: str, timeout: bool = False) -> None:
        super().__init__(message)
        self.timeout = timeout


class UnauthorizedError(SyncError):
    """Credential missing or rejected (HTTP 401/403)."""

    error_type = ErrorType.UNAUTHORIZED

    def __init__(self, message: str = "Invalid or missing API key") -> None:
        super().__init__(message)


class RemoteRejectedError(SyncError):
    """Any other non-success outcome from the remote service."""

    error_type = ErrorType.REMOTE_REJECTED

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class DecodeError(SyncError):
    """Payload present but structurally invalid."""

    error_type = ErrorType.DECODE


class CacheNotFoundError(SyncError):
    """No cached snapshot exists for the event key."""

    error_type = ErrorType.NOT_FOUND


class StorageError(SyncError):
    """Local filesystem failure."""

    error_type = ErrorType.STORAGE


class CombinedError(SyncError):
    """Live fetch failed and the cache fallback failed too."""

    error_type = ErrorType.COMBINED

    def __init__(self, fetch_error: SyncError, cache_error: SyncError) -> None:
        super().__init__(
            f"Failed to fetch event data ({fetch_error.message}), "
            f"and no cached data available ({cache_error.message})"
        )
        self.fetch_error = fetch_error
        self.cache_error = cache_error


def user_message(error: SyncError) -> str:
    """Turn an error into a message a user can act on."""
    if error.error_type is ErrorType.NETWORK:
        return (
            "Cannot connect to The Blue Alliance. Please check your internet "
            f"connection. Details: {error.message}"
        )
    if error.error_type is ErrorType.UNAUTHORIZED:
        return "Invalid TBA API key. Please check your API key in settings."
    if error.error_type is ErrorType.REMOTE_REJECTED:
        return f"The Blue Alliance API error: {error.message}"
    if error.error_type is ErrorType.DECODE:
        return f"Data format error: {error.message}. The event data may be corrupted."
    if error.error_type is ErrorType.NOT_FOUND:
        return f"No cached data: {error.message}"
    if error.error_type is ErrorType.STORAGE:
        return f"Local storage error: {error.message}"
    if error.error_type is ErrorType.COMBINED:
        return error.message
    return f"Error: {error.message}"
