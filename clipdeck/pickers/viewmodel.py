"""Picker view models: one per surface, composing filter, category strip and grid.

A view model owns no rendering. It turns key presses into state changes and
exposes what a front end needs to draw:

    visible      the category-scoped, filtered items in grid order
    navigator    focus position (GridNavigator)
    filter       query/mode/open state (IncrementalFilter)
    categories   the category strip (CategoryStrip)
    zone         which of the strip or the grid has keyboard focus

Key routing, in order: surface shortcuts (e.g. Delete on history), the
filter (instant-type, Escape, Ctrl+F), then the focused zone. Query or
category changes reset grid focus to the first item. Selection runs the
surface's async paste action and never touches filter or focus state.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from enum import Enum
from typing import Generic, TypeVar

from clipdeck.backend.interfaces import PasteBackend
from clipdeck.config.schema import GridConfig, SearchMode
from clipdeck.core.errors import ClipdeckError
from clipdeck.filtering.incremental import IncrementalFilter
from clipdeck.history.cache import HistoryCache
from clipdeck.history.types import ClipboardEntry
from clipdeck.navigation.categories import AllCategories, CategoryStrip
from clipdeck.navigation.grid import GridNavigator, KeyOutcome, VirtualViewport
from clipdeck.navigation.keys import KeyPress, NavKey
from clipdeck.pickers.gifs import DebouncedSearch, SearchFn
from clipdeck.pickers.items import PickerItem

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FocusZone(str, Enum):
    """Which part of a picker receives navigation keys."""

    GRID = "grid"
    CATEGORIES = "categories"


class PickerViewModel(Generic[T]):
    """Base picker: filter + category strip + grid navigator over some items.

    Subclasses provide source_items(), text_of() and select(); they may also
    override category_matches(), handle_surface_key() and on_query_changed().
    """

    def __init__(
        self,
        name: str,
        *,
        columns: int = 1,
        grid: GridConfig | None = None,
        mode: SearchMode = SearchMode.SUBSTRING,
        categories: Sequence[str] = (),
        has_custom: bool = False,
        viewport: VirtualViewport | None = None,
    ) -> None:
        grid = grid or GridConfig()
        self.name = name
        self.filter = IncrementalFilter(mode)
        self.categories = CategoryStrip(categories, has_custom)
        self.navigator = GridNavigator(
            columns,
            viewport=viewport,
            page_rows=grid.page_rows,
            focus_retries=grid.focus_retries,
        )
        self.zone = FocusZone.GRID
        self.last_error: ClipdeckError | None = None
        # Successful selections; lets a front end close after a paste
        self.selection_count = 0
        self._visible: list[T] = []
        self._listeners: list[Callable[[], None]] = []

    # --- Subclass hooks ---

    def source_items(self) -> Sequence[T]:
        raise NotImplementedError

    def text_of(self, item: T) -> str | None:
        raise NotImplementedError

    async def select(self, item: T) -> None:
        """Perform the surface's paste action for item."""
        raise NotImplementedError

    def category_matches(self, item: T) -> bool:
        return True

    async def handle_surface_key(self, press: KeyPress) -> bool:
        """Surface-specific shortcuts, tried before anything else."""
        return False

    def on_query_changed(self) -> None:
        """Called after the query, mode or open state changed."""

    async def start(self) -> None:
        """Load initial content."""
        self.refresh(reset=True)

    async def close(self) -> None:
        """Release resources held by the surface."""

    # --- Derived state ---

    @property
    def visible(self) -> tuple[T, ...]:
        return tuple(self._visible)

    @property
    def focused_item(self) -> T | None:
        if not self._visible:
            return None
        return self._visible[self.navigator.focused_index]

    @property
    def has_category_strip(self) -> bool:
        return len(self.categories.options) > 1

    def filtered_items(self) -> list[T]:
        """Category-scoped items, filtered by the current query."""
        scoped = [item for item in self.source_items() if self.category_matches(item)]
        return self.filter.apply(scoped, self.text_of)

    def refresh(self, *, reset: bool = False) -> None:
        """Recompute visible items.

        Args:
            reset: Move grid focus back to the first item. Otherwise focus is
                clamped into the new range.
        """
        self._visible = self.filtered_items()
        self.navigator.set_items(len(self._visible), reset=reset)
        self._notify()

    def add_listener(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register a redraw callback. Returns a function that removes it."""
        self._listeners.append(callback)

        def remove() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return remove

    def _notify(self) -> None:
        for callback in list(self._listeners):
            try:
                callback()
            except Exception:
                logger.exception("Picker listener failed")

    # --- Actions ---

    def reset(self) -> None:
        """Back to the initial view: filter closed, All selected, focus on item 0."""
        self.filter.close()
        self.categories.select(AllCategories())
        self.zone = FocusZone.GRID
        self.on_query_changed()
        self.refresh(reset=True)

    def toggle_search_mode(self) -> SearchMode:
        mode = self.filter.toggle_mode()
        self.on_query_changed()
        self.refresh(reset=True)
        return mode

    async def activate(self, item: T) -> bool:
        """Run the selection action. Failures are recorded, never raised.

        Returns:
            True if the paste request succeeded.
        """
        try:
            await self.select(item)
        except ClipdeckError as e:
            logger.warning("%s selection failed: %s", self.name, e.message)
            self.last_error = e
            self._notify()
            return False
        self.last_error = None
        self.selection_count += 1
        return True

    async def handle_key(self, press: KeyPress, *, in_text_input: bool = False) -> bool:
        """Route a key press. Returns True if it was consumed."""
        if await self.handle_surface_key(press):
            return True

        before = (self.filter.query, self.filter.mode, self.filter.is_open)
        if self.filter.handle_key(press, in_text_input=in_text_input):
            if (self.filter.query, self.filter.mode, self.filter.is_open) != before:
                self.on_query_changed()
                self.refresh(reset=True)
            return True

        if self.zone is FocusZone.CATEGORIES:
            return self._handle_strip_key(press)
        return await self._handle_grid_key(press)

    def _handle_strip_key(self, press: KeyPress) -> bool:
        if press.nav_key is NavKey.DOWN:
            self.zone = FocusZone.GRID
            self._notify()
            return True

        previous = self.categories.selected
        outcome = self.categories.handle_key(press)
        if outcome is KeyOutcome.SELECTED:
            if self.categories.selected != previous:
                self.refresh(reset=True)
            self.zone = FocusZone.GRID
            self._notify()
        elif outcome is KeyOutcome.MOVED:
            self._notify()
        return outcome.consumed

    async def _handle_grid_key(self, press: KeyPress) -> bool:
        outcome = self.navigator.handle_key(press)
        if outcome is KeyOutcome.SELECTED:
            item = self.focused_item
            if item is not None:
                await self.activate(item)
            return True
        if outcome is KeyOutcome.MOVED:
            self._notify()
            return True

        # Up from the first row moves into the category strip
        if (
            press.nav_key is NavKey.UP
            and not press.ctrl
            and self.has_category_strip
            and self.navigator.state.row == 0
        ):
            self.zone = FocusZone.CATEGORIES
            self._notify()
            return True
        return False


class HistoryViewModel(PickerViewModel[ClipboardEntry]):
    """Clipboard history surface backed by a HistoryCache.

    Keys: Enter/Space paste, Delete removes the focused entry, Ctrl+P toggles
    its pin, Ctrl+R switches between substring and regex search.
    """

    def __init__(
        self,
        cache: HistoryCache,
        *,
        grid: GridConfig | None = None,
        mode: SearchMode = SearchMode.SUBSTRING,
        viewport: VirtualViewport | None = None,
    ) -> None:
        grid = grid or GridConfig()
        super().__init__(
            "clipboard", columns=grid.history_columns, grid=grid, mode=mode, viewport=viewport
        )
        self.cache = cache
        self._remove_listener = cache.add_listener(self._on_cache_changed)

    def source_items(self) -> Sequence[ClipboardEntry]:
        return self.cache.items

    def text_of(self, item: ClipboardEntry) -> str | None:
        return item.searchable_text

    def _on_cache_changed(self) -> None:
        self.refresh()

    async def select(self, item: ClipboardEntry) -> None:
        if not await self.cache.paste(item.id):
            if self.cache.last_error is not None:
                raise self.cache.last_error

    async def handle_surface_key(self, press: KeyPress) -> bool:
        if press.is_ctrl("r"):
            self.toggle_search_mode()
            return True

        focused = self.focused_item if self.zone is FocusZone.GRID else None
        if press.name == "delete" and not press.has_command_modifier:
            if focused is None:
                return False
            await self.cache.delete(focused.id)
            return True
        if press.is_ctrl("p"):
            if focused is None:
                return False
            await self.cache.toggle_pin(focused.id)
            return True
        return False

    async def close(self) -> None:
        self._remove_listener()


class StaticPickerViewModel(PickerViewModel[PickerItem]):
    """Emoji, symbol and kaomoji surfaces over a built-in item table."""

    def __init__(
        self,
        name: str,
        items: Sequence[PickerItem],
        paste: PasteBackend,
        *,
        columns: int = 8,
        grid: GridConfig | None = None,
        viewport: VirtualViewport | None = None,
    ) -> None:
        categories = list(dict.fromkeys(item.category for item in items if not item.is_custom))
        has_custom = any(item.is_custom for item in items)
        super().__init__(
            name,
            columns=columns,
            grid=grid,
            categories=categories,
            has_custom=has_custom,
            viewport=viewport,
        )
        self._items = tuple(items)
        self._paste = paste

    def source_items(self) -> Sequence[PickerItem]:
        return self._items

    def text_of(self, item: PickerItem) -> str | None:
        return item.searchable_text

    def category_matches(self, item: PickerItem) -> bool:
        return self.categories.selected.matches(item.category, item.is_custom)

    async def select(self, item: PickerItem) -> None:
        await self._paste.paste_text(item.display)


class GifPickerViewModel(PickerViewModel[PickerItem]):
    """GIF surface: the query drives a debounced remote search.

    An empty query shows trending GIFs. Results are shown as returned; the
    query is not applied locally.
    """

    def __init__(
        self,
        search: SearchFn,
        paste: PasteBackend,
        *,
        columns: int = 2,
        grid: GridConfig | None = None,
        debounce_ms: int = 300,
        viewport: VirtualViewport | None = None,
    ) -> None:
        super().__init__("gifs", columns=columns, grid=grid, viewport=viewport)
        self._paste = paste
        self._results: list[PickerItem] = []
        self.loading = False
        self._search = DebouncedSearch(
            search,
            self._on_results,
            on_error=self._on_search_error,
            delay=debounce_ms / 1000,
        )

    def source_items(self) -> Sequence[PickerItem]:
        return self._results

    def text_of(self, item: PickerItem) -> str | None:
        return item.label

    def filtered_items(self) -> list[PickerItem]:
        return list(self._results)

    def on_query_changed(self) -> None:
        self.loading = True
        self._search.submit(self.filter.query)

    async def start(self) -> None:
        """Load trending GIFs."""
        self.loading = True
        self._search.submit("", immediate=True)
        await self._search.wait()

    async def wait_for_results(self) -> None:
        """Wait until the latest search has completed."""
        await self._search.wait()

    def _on_results(self, query: str, results: list[PickerItem]) -> None:
        logger.debug("GIF search %r returned %d results", query, len(results))
        self.loading = False
        self.last_error = None
        self._results = results
        self.refresh(reset=True)

    def _on_search_error(self, query: str, error: ClipdeckError) -> None:
        self.loading = False
        self.last_error = error
        self._results = []
        self.refresh(reset=True)

    async def select(self, item: PickerItem) -> None:
        if not item.source_ref:
            logger.warning("GIF %s has no source URL, ignoring selection", item.id)
            return
        await self._paste.paste_image_from_source(item.source_ref)

    async def close(self) -> None:
        self._search.cancel()
