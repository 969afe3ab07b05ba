"""PickerHost - the tabbed container for all picker surfaces.

Owns the active tab, routes key presses to the active surface, and listens
for the backend's window-shown event to reset the active surface when the
picker window is reopened.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any

from clipdeck.backend.interfaces import PasteBackend
from clipdeck.config.schema import Config
from clipdeck.events.hub import EventQueue, PushEventHub
from clipdeck.events.types import WINDOW_SHOWN
from clipdeck.history.cache import HistoryCache
from clipdeck.navigation.keys import KeyPress
from clipdeck.pickers.gifs import SearchFn
from clipdeck.pickers.tables import emoji_items, kaomoji_items, symbol_items
from clipdeck.pickers.viewmodel import (
    GifPickerViewModel,
    HistoryViewModel,
    PickerViewModel,
    StaticPickerViewModel,
)

logger = logging.getLogger(__name__)


class PickerTab(str, Enum):
    """Picker surfaces in tab order."""

    CLIPBOARD = "clipboard"
    GIFS = "gifs"
    EMOJI = "emoji"
    KAOMOJI = "kaomoji"
    SYMBOLS = "symbols"


class PickerHost:
    """Tabbed set of picker surfaces.

    Usage:
        async with PickerHost(surfaces, hub=hub) as host:
            await host.handle_key(KeyPress("tab"))
            host.active.visible
    """

    def __init__(
        self,
        surfaces: Mapping[PickerTab, PickerViewModel[Any]],
        *,
        hub: PushEventHub | None = None,
        initial: PickerTab = PickerTab.CLIPBOARD,
    ) -> None:
        if not surfaces:
            raise ValueError("PickerHost needs at least one surface")
        # Tab order follows PickerTab, whatever the mapping's order
        self._tabs = [tab for tab in PickerTab if tab in surfaces]
        self._surfaces = dict(surfaces)
        self._hub = hub
        self._active = initial if initial in self._surfaces else self._tabs[0]
        self._queue: EventQueue | None = None
        self._consumer: asyncio.Task[None] | None = None

    @property
    def tabs(self) -> tuple[PickerTab, ...]:
        return tuple(self._tabs)

    @property
    def active_tab(self) -> PickerTab:
        return self._active

    @property
    def active(self) -> PickerViewModel[Any]:
        return self._surfaces[self._active]

    def surface(self, tab: PickerTab) -> PickerViewModel[Any]:
        return self._surfaces[tab]

    # --- Tabs ---

    def switch_to(self, tab: PickerTab) -> None:
        if tab not in self._surfaces:
            raise KeyError(f"No surface for tab {tab.value!r}")
        if tab is not self._active:
            logger.debug("Switching picker tab: %s -> %s", self._active.value, tab.value)
            self._active = tab

    def next_tab(self) -> PickerTab:
        position = self._tabs.index(self._active)
        self.switch_to(self._tabs[(position + 1) % len(self._tabs)])
        return self._active

    def previous_tab(self) -> PickerTab:
        position = self._tabs.index(self._active)
        self.switch_to(self._tabs[(position - 1) % len(self._tabs)])
        return self._active

    async def handle_key(self, press: KeyPress, *, in_text_input: bool = False) -> bool:
        """Tab/Shift+Tab switch surfaces; everything else goes to the active one."""
        name = press.name
        if name == "tab" and not press.has_command_modifier:
            if press.shift:
                self.previous_tab()
            else:
                self.next_tab()
            return True
        if name == "backtab":
            self.previous_tab()
            return True
        return await self.active.handle_key(press, in_text_input=in_text_input)

    def on_window_shown(self) -> None:
        """Reset filter and focus of the active surface."""
        logger.debug("Window shown, resetting %s", self._active.value)
        self.active.reset()

    # --- Lifecycle ---

    async def start(self) -> None:
        """Subscribe to window-shown and load every surface."""
        if self._hub is not None and self._consumer is None:
            self._queue = self._hub.subscribe(WINDOW_SHOWN)
            self._consumer = asyncio.create_task(self._consume(self._queue))
        for tab in self._tabs:
            await self._surfaces[tab].start()

    async def close(self) -> None:
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
        for surface in self._surfaces.values():
            await surface.close()

    async def __aenter__(self) -> PickerHost:
        await self.start()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def _consume(self, queue: EventQueue) -> None:
        while True:
            await queue.get()
            self.on_window_shown()


def build_surfaces(
    config: Config,
    cache: HistoryCache,
    paste: PasteBackend,
    gif_search: SearchFn | None = None,
) -> dict[PickerTab, PickerViewModel[Any]]:
    """Create the standard surfaces from configuration.

    The GIF tab is only included when a search function is given.
    """
    grid = config.grid
    surfaces: dict[PickerTab, PickerViewModel[Any]] = {
        PickerTab.CLIPBOARD: HistoryViewModel(cache, grid=grid, mode=config.search.default_mode),
        PickerTab.EMOJI: StaticPickerViewModel(
            "emoji", emoji_items(), paste, columns=grid.emoji_columns, grid=grid
        ),
        PickerTab.KAOMOJI: StaticPickerViewModel(
            "kaomoji",
            kaomoji_items(config.custom_kaomojis),
            paste,
            columns=grid.kaomoji_columns,
            grid=grid,
        ),
        PickerTab.SYMBOLS: StaticPickerViewModel(
            "symbols", symbol_items(), paste, columns=grid.symbol_columns, grid=grid
        ),
    }
    if gif_search is not None:
        surfaces[PickerTab.GIFS] = GifPickerViewModel(
            gif_search,
            paste,
            columns=grid.gif_columns,
            grid=grid,
            debounce_ms=config.search.debounce_ms,
        )
    return surfaces
