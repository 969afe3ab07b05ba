"""Backend push events."""

from clipdeck.events.hub import EventQueue, PushEventHub
from clipdeck.events.types import (
    ENTRY_ADDED,
    HISTORY_CLEARED,
    HISTORY_EVENTS,
    HISTORY_SYNC,
    WINDOW_SHOWN,
)

__all__ = [
    "ENTRY_ADDED",
    "EventQueue",
    "HISTORY_CLEARED",
    "HISTORY_EVENTS",
    "HISTORY_SYNC",
    "PushEventHub",
    "WINDOW_SHOWN",
]
