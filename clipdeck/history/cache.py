"""HistoryCache - client-side mirror of the backend's clipboard history.

The cache owns the canonical in-memory list of entries. Local mutations are
applied optimistically and reconciled with the backend; push events from the
PushEventHub are folded in as they arrive. Any failure that could leave the
mirror out of step degrades to a full refetch. Nothing here raises to the
caller: errors are recorded in `last_error` for the UI to surface.

Ordering guarantee: `items` always lists pinned entries before unpinned ones
(see clipdeck.history.ordering).

Example:
    async with HistoryCache(client, hub=hub) as cache:
        await cache.toggle_pin(cache.items[0].id)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import Any

from clipdeck.backend.interfaces import HistoryBackend
from clipdeck.core.errors import ClipdeckError, NotFound, TransportFailure
from clipdeck.events.hub import EventQueue, PushEventHub
from clipdeck.events.types import ENTRY_ADDED, HISTORY_CLEARED, HISTORY_EVENTS, HISTORY_SYNC
from clipdeck.history.ordering import insert_new, partition, pinned_only, reinsert
from clipdeck.history.types import ClipboardEntry, entries_from_wire

logger = logging.getLogger(__name__)

DEFAULT_DEDUP_WINDOW = 5


class HistoryCache:
    """Mirror of the backend history with optimistic edits and push reconciliation."""

    def __init__(
        self,
        backend: HistoryBackend,
        *,
        hub: PushEventHub | None = None,
        dedup_window: int = DEFAULT_DEDUP_WINDOW,
    ) -> None:
        """Initialize the cache.

        Args:
            backend: Request surface of the clipboard backend.
            hub: Push event hub to subscribe to on start(). Without one the
                cache only changes through its own operations and apply_event().
            dedup_window: How many leading unpinned entries a pushed entry is
                compared against before being treated as new.
        """
        self._backend = backend
        self._hub = hub
        self._dedup_window = dedup_window

        self._items: list[ClipboardEntry] = []
        self.loading = False
        self.last_error: ClipdeckError | None = None

        self._version = 0
        # Bumped by every history-sync; lets fetch() detect it was overtaken
        self._sync_generation = 0

        self._listeners: list[Callable[[], None]] = []
        self._queue: EventQueue | None = None
        self._consumer: asyncio.Task[None] | None = None

    # --- State access ---

    @property
    def items(self) -> tuple[ClipboardEntry, ...]:
        """Current entries, pinned first."""
        return tuple(self._items)

    @property
    def version(self) -> int:
        """Incremented on every change to items."""
        return self._version

    def get(self, entry_id: str) -> ClipboardEntry | None:
        for entry in self._items:
            if entry.id == entry_id:
                return entry
        return None

    def __len__(self) -> int:
        return len(self._items)

    def add_listener(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register a change callback. Returns a function that removes it."""
        self._listeners.append(callback)

        def remove() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return remove

    def _set_items(self, items: Sequence[ClipboardEntry], reason: str) -> None:
        self._items = list(items)
        self._version += 1
        logger.debug("History updated (%s): %d entries, version=%d", reason, len(items), self._version)
        for callback in list(self._listeners):
            try:
                callback()
            except Exception:
                logger.exception("History listener failed")

    # --- Lifecycle ---

    async def start(self) -> None:
        """Subscribe to push events (if a hub was given) and load the history.

        The subscription is made before the initial fetch so no event emitted
        during the fetch is missed.
        """
        if self._hub is not None and self._consumer is None:
            self._queue = self._hub.subscribe(*HISTORY_EVENTS)
            self._consumer = asyncio.create_task(self._consume(self._queue))
        await self.fetch()

    async def close(self) -> None:
        """Stop consuming push events and release the subscription."""
        if self._consumer is not None:
            self._consumer.cancel()
            try:
                await self._consumer
            except asyncio.CancelledError:
                pass
            self._consumer = None
        if self._hub is not None and self._queue is not None:
            self._hub.unsubscribe(self._queue)
        self._queue = None

    async def __aenter__(self) -> HistoryCache:
        await self.start()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def _consume(self, queue: EventQueue) -> None:
        while True:
            event = await queue.get()
            if self._hub is not None and self._hub.take_overflow(queue):
                # Events were lost; queued ones predate the refetch
                dropped = 1
                while not queue.empty():
                    queue.get_nowait()
                    dropped += 1
                logger.warning("Push events dropped, resynchronizing (%d queued discarded)", dropped)
                await self.fetch()
                continue
            try:
                self.apply_event(event)
            except ValueError as e:
                logger.warning("Malformed %s event, resynchronizing: %s", event.get("type"), e)
                await self.fetch()
            except Exception:
                logger.exception("Failed to apply %s event, resynchronizing", event.get("type"))
                await self.fetch()

    # --- Operations ---

    async def fetch(self) -> None:
        """Replace items with the backend's full list.

        If a history-sync event lands while the request is in flight, the
        response is discarded: the snapshot is at least as new.
        """
        generation = self._sync_generation
        self.loading = True
        try:
            payload = await self._backend.get_history()
            entries = entries_from_wire(payload)
        except ClipdeckError as e:
            self._record_error(e, "fetch")
            return
        except ValueError as e:
            self._record_error(
                TransportFailure(f"Malformed history payload: {e}", "get_history"), "fetch"
            )
            return
        finally:
            self.loading = False

        if generation != self._sync_generation:
            logger.debug("Discarding fetch result overtaken by history-sync")
            return
        self.last_error = None
        self._set_items(partition(entries), "fetch")

    async def clear(self) -> None:
        """Clear unpinned entries, optimistically."""
        self._set_items(pinned_only(self._items), "clear")
        try:
            await self._backend.clear_history()
        except ClipdeckError as e:
            await self._resync(e, "clear")

    async def delete(self, entry_id: str) -> None:
        """Delete an entry, optimistically and without rollback.

        A missing id is a no-op locally, so repeated deletes are idempotent.
        """
        remaining = [e for e in self._items if e.id != entry_id]
        if len(remaining) != len(self._items):
            self._set_items(remaining, "delete")
        try:
            await self._backend.delete_item(entry_id)
        except ClipdeckError as e:
            self._record_error(e, "delete")

    async def toggle_pin(self, entry_id: str) -> ClipboardEntry | None:
        """Toggle an entry's pin flag using the backend's authoritative answer.

        Returns:
            The updated entry, or None if the toggle failed (the cache has
            then been resynchronized and last_error is set).
        """
        try:
            payload = await self._backend.toggle_pin(entry_id)
        except ClipdeckError as e:
            await self._resync(e, "toggle_pin")
            return None

        if payload is None:
            await self._resync(NotFound(entry_id), "toggle_pin")
            return None

        try:
            updated = ClipboardEntry.from_wire(payload)
        except ValueError as e:
            await self._resync(
                TransportFailure(f"Malformed toggle_pin result: {e}", "toggle_pin"), "toggle_pin"
            )
            return None

        self._set_items(reinsert(self._items, updated), "toggle_pin")
        return updated

    async def paste(self, entry_id: str) -> bool:
        """Ask the backend to paste an entry. Never mutates items.

        Returns:
            True if the request succeeded.
        """
        try:
            await self._backend.paste_item(entry_id)
        except ClipdeckError as e:
            # The backend may have reordered history before the round-trip failed
            await self._resync(e, "paste")
            return False
        return True

    # --- Push events ---

    def apply_event(self, event: dict[str, Any]) -> None:
        """Fold one push event into the mirror.

        Raises:
            ValueError: If the event payload is malformed.
        """
        event_type = event.get("type")
        if event_type == ENTRY_ADDED:
            self._on_entry_added(ClipboardEntry.from_wire(event.get("data")))
        elif event_type == HISTORY_CLEARED:
            self._on_cleared()
        elif event_type == HISTORY_SYNC:
            self._on_sync(entries_from_wire(event.get("data")))
        else:
            logger.debug("Ignoring event type %r", event_type)

    def _on_entry_added(self, entry: ClipboardEntry) -> None:
        if self.get(entry.id) is not None:
            logger.debug("Entry %s already present, ignoring entry-added", entry.id)
            return
        if not entry.pinned and self._is_recent_duplicate(entry):
            logger.debug("Entry %s duplicates a recent entry, ignoring entry-added", entry.id)
            return
        self._set_items(insert_new(self._items, entry), "entry-added")

    def _is_recent_duplicate(self, entry: ClipboardEntry) -> bool:
        """Guard for the fetch/event race: compare only the first few unpinned entries."""
        recent = [e for e in self._items if not e.pinned][: self._dedup_window]
        return any(e.content == entry.content for e in recent)

    def _on_cleared(self) -> None:
        if any(not e.pinned for e in self._items):
            self._set_items(pinned_only(self._items), "history-cleared")

    def _on_sync(self, entries: list[ClipboardEntry]) -> None:
        self._sync_generation += 1
        self._set_items(partition(entries), "history-sync")

    # --- Failure handling ---

    def _record_error(self, error: ClipdeckError, operation: str) -> None:
        logger.warning("History %s failed: %s", operation, error.message)
        self.last_error = error

    async def _resync(self, error: ClipdeckError, operation: str) -> None:
        """Record the failure and fall back to a full refetch."""
        self._record_error(error, operation)
        await self.fetch()
        # Keep the triggering error visible even if the refetch succeeded
        self.last_error = error
