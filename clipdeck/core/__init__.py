"""Core errors, constants and helpers."""

from clipdeck.core.cancel import CancellationToken
from clipdeck.core.errors import (
    ClipdeckError,
    ConfigError,
    InvalidQuery,
    NotFound,
    TransportFailure,
)

__all__ = [
    "CancellationToken",
    "ClipdeckError",
    "ConfigError",
    "InvalidQuery",
    "NotFound",
    "TransportFailure",
]
