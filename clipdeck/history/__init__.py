"""Clipboard history mirror."""

from clipdeck.history.cache import HistoryCache
from clipdeck.history.ordering import is_well_ordered, partition
from clipdeck.history.types import (
    ClipboardContent,
    ClipboardEntry,
    ContentCategory,
    ImageContent,
    RichTextContent,
    TextContent,
)

__all__ = [
    "ClipboardContent",
    "ClipboardEntry",
    "ContentCategory",
    "HistoryCache",
    "ImageContent",
    "RichTextContent",
    "TextContent",
    "is_well_ordered",
    "partition",
]
