"""Typed exception hierarchy for clipdeck."""

from __future__ import annotations


class ClipdeckError(Exception):
    """Base class for all clipdeck errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigError(ClipdeckError):
    """Raised for configuration issues (missing file, invalid JSON, validation failure)."""


class TransportFailure(ClipdeckError):
    """Raised when a backend request is rejected, times out, or returns garbage."""

    def __init__(self, message: str, method: str | None = None) -> None:
        self.method = method
        super().__init__(message)


class NotFound(ClipdeckError):
    """Raised when a mutation target no longer exists on the backend."""

    def __init__(self, entry_id: str) -> None:
        self.entry_id = entry_id
        super().__init__(f"Entry '{entry_id}' not found on backend")


class InvalidQuery(ClipdeckError):
    """Raised (or recorded) when a regex search query fails to compile."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid search pattern {pattern!r}: {reason}")
