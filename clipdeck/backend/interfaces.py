"""Backend protocol consumed by the history cache and the pickers.

Using a Protocol keeps the cache testable against in-memory fakes without
requiring inheritance from the HTTP client.
"""

from typing import Any, Protocol


class HistoryBackend(Protocol):
    """Request/response surface of the clipboard backend service.

    All methods raise TransportFailure when the round-trip fails. Entries are
    returned in their wire (dict) form; parsing is the caller's concern.
    """

    async def get_history(self) -> list[dict[str, Any]]:
        """Return the full history, pinned entries first."""
        ...

    async def clear_history(self) -> None:
        """Delete every unpinned entry."""
        ...

    async def delete_item(self, entry_id: str) -> None:
        """Delete one entry. Unknown ids are a no-op on the backend."""
        ...

    async def toggle_pin(self, entry_id: str) -> dict[str, Any] | None:
        """Flip the pin flag, returning the updated entry or None if unknown."""
        ...

    async def paste_item(self, entry_id: str) -> None:
        """Paste a history entry into the previously focused window."""
        ...


class PasteBackend(Protocol):
    """Paste requests used by the non-history pickers."""

    async def paste_text(self, text: str) -> None:
        """Paste literal text (emoji, symbol, kaomoji)."""
        ...

    async def paste_image_from_source(self, source: str) -> None:
        """Download an image (GIF URL) to the clipboard and paste it."""
        ...
