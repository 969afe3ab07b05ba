"""Full-screen terminal picker built on prompt_toolkit.

The screen is a thin renderer over PickerHost: every key press is translated
into a toolkit-neutral KeyPress and routed through the host, and the layout
redraws from view model state. Each surface's grid is drawn through a
GridViewport, the terminal counterpart of a virtualized list: only rows in
the scroll window exist as cells, so focus transfer goes through the
navigator's scroll-then-focus protocol.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from contextlib import AsyncExitStack
from enum import Enum
from typing import Any

from prompt_toolkit.application import Application
from prompt_toolkit.application.current import get_app
from prompt_toolkit.filters import Condition
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.key_binding import KeyBindings, KeyPressEvent
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout import ConditionalContainer, HSplit, Layout, Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.styles import Style

from clipdeck.cli.commands import make_client
from clipdeck.config.schema import Config, SearchMode
from clipdeck.core.errors import ClipdeckError
from clipdeck.display.render import truncate
from clipdeck.events.hub import PushEventHub
from clipdeck.history.cache import HistoryCache
from clipdeck.history.types import ClipboardEntry
from clipdeck.navigation.grid import GridNavigator
from clipdeck.navigation.keys import KeyPress
from clipdeck.pickers.gifs import GifSearchService
from clipdeck.pickers.host import PickerHost, PickerTab, build_surfaces
from clipdeck.pickers.items import PickerItem
from clipdeck.pickers.viewmodel import FocusZone, PickerViewModel

logger = logging.getLogger(__name__)

PICKER_STYLE = Style.from_dict({
    "tab": "",
    "tab.active": "reverse bold",
    "search": "",
    "search.mode": "ansicyan",
    "search.warning": "ansiyellow",
    "category": "ansibrightblack",
    "category.selected": "bold underline",
    "category.focused": "reverse",
    "cell": "",
    "cell.pinned": "ansiyellow",
    "cell.focused": "reverse",
    "status": "ansibrightblack",
    "status.error": "ansired bold",
})

# Lines used by the tab bar, search bar, category strip and status line
_CHROME_ROWS = 4

# Control chords prompt_toolkit reports under their own names
_PASSTHROUGH = frozenset({"c-m", "c-j", "c-h", "c-i", "s-tab"})


def translate_key(key: str) -> KeyPress:
    """Convert a prompt_toolkit key (Keys member or typed character) to a KeyPress."""
    name = key.value if isinstance(key, Enum) else str(key)
    if len(name) == 1 or name in _PASSTHROUGH:
        return KeyPress(name)
    if name.startswith("c-s-"):
        return KeyPress(name[4:], ctrl=True, shift=True)
    if name.startswith("c-"):
        return KeyPress(name[2:], ctrl=True)
    if name.startswith("s-"):
        return KeyPress(name[2:], shift=True)
    return KeyPress(name)


def cell_label(item: Any) -> str:
    """Text shown for one grid cell."""
    if isinstance(item, ClipboardEntry):
        return item.display_text
    if isinstance(item, PickerItem):
        # GIF previews are URLs; their title reads better in a terminal
        if item.source_ref:
            return item.label or item.id
        return item.display
    return str(item)


class _Cell:
    """A rendered grid cell that can take focus."""

    def __init__(self, viewport: GridViewport, index: int) -> None:
        self._viewport = viewport
        self.index = index

    def focus(self) -> None:
        self._viewport.focused_cell = self.index
        self._viewport.changed()


class GridViewport:
    """Scroll window over one navigator's rows.

    Only rows between top_row and top_row + visible_rows are rendered, so
    find_cell() returns None for anything else until scroll_to_cell() brings
    it into view.
    """

    def __init__(
        self,
        navigator: GridNavigator,
        *,
        visible_rows: int = 10,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._navigator = navigator
        self.visible_rows = max(1, visible_rows)
        self.top_row = 0
        self.focused_cell: int | None = None
        self._on_change = on_change

    def changed(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def row_range(self) -> range:
        last = min(self.top_row + self.visible_rows, self._navigator.state.row_count)
        return range(self.top_row, max(last, self.top_row))

    def set_visible_rows(self, rows: int) -> None:
        self.visible_rows = max(1, rows)
        self.scroll_to_cell(self._navigator.state.row, self._navigator.state.column)

    def scroll_to_cell(self, row: int, column: int) -> None:
        if row < self.top_row:
            self.top_row = row
        elif row >= self.top_row + self.visible_rows:
            self.top_row = row - self.visible_rows + 1
        # Never leave blank rows below the last one when shrinking
        max_top = max(self._navigator.state.row_count - self.visible_rows, 0)
        self.top_row = max(0, min(self.top_row, max_top))

    def find_cell(self, index: int) -> _Cell | None:
        if not 0 <= index < self._navigator.item_count:
            return None
        row = index // self._navigator.column_count
        if row not in self.row_range():
            return None
        return _Cell(self, index)


class PickerScreen:
    """prompt_toolkit Application presenting a PickerHost."""

    def __init__(self, host: PickerHost, *, close_on_select: bool = True) -> None:
        self.host = host
        self.close_on_select = close_on_select
        self._app: Application[int] | None = None
        self._lock = asyncio.Lock()
        self.viewports: dict[PickerTab, GridViewport] = {}
        for tab in host.tabs:
            surface = host.surface(tab)
            viewport = GridViewport(surface.navigator, on_change=self.invalidate)
            surface.navigator.attach_viewport(viewport)
            surface.add_listener(self.invalidate)
            self.viewports[tab] = viewport

    # --- Rendering ---

    @property
    def surface(self) -> PickerViewModel[Any]:
        return self.host.active

    def invalidate(self) -> None:
        if self._app is not None and self._app.is_running:
            self._app.invalidate()

    def tab_fragments(self) -> StyleAndTextTuples:
        fragments: StyleAndTextTuples = []
        for tab in self.host.tabs:
            style = "class:tab.active" if tab is self.host.active_tab else "class:tab"
            fragments.append((style, f" {tab.value.capitalize()} "))
            fragments.append(("", " "))
        return fragments

    def search_fragments(self) -> StyleAndTextTuples:
        search = self.surface.filter
        mode = "re" if search.mode is SearchMode.REGEX else "abc"
        fragments: StyleAndTextTuples = [("class:search.mode", f"[{mode}] ")]
        if search.is_open:
            fragments.append(("class:search", f"/{search.query}"))
        else:
            fragments.append(("class:status", "type to search"))
        if search.last_warning is not None:
            fragments.append(("class:search.warning", f"  {search.last_warning.reason}"))
        return fragments

    def category_fragments(self) -> StyleAndTextTuples:
        strip = self.surface.categories
        in_strip = self.surface.zone is FocusZone.CATEGORIES
        fragments: StyleAndTextTuples = []
        for position, option in enumerate(strip.options):
            if in_strip and position == strip.focused_index:
                style = "class:category.focused"
            elif option == strip.selected:
                style = "class:category.selected"
            else:
                style = "class:category"
            fragments.append((style, f" {option.label} "))
        return fragments

    def grid_fragments(self, width: int, height: int) -> StyleAndTextTuples:
        """Render the visible rows of the active surface's grid."""
        surface = self.surface
        viewport = self.viewports[self.host.active_tab]
        viewport.set_visible_rows(height)

        items = surface.visible
        if not items:
            if getattr(surface, "loading", False):
                return [("class:status", "Loading...")]
            return [("class:status", "Nothing to show")]

        columns = surface.navigator.column_count
        cell_width = max(width // columns, 1)
        focused = surface.navigator.focused_index
        grid_has_focus = surface.zone is FocusZone.GRID

        fragments: StyleAndTextTuples = []
        for row in viewport.row_range():
            for column in range(columns):
                index = row * columns + column
                if index >= len(items):
                    break
                item = items[index]
                style = "class:cell"
                if isinstance(item, ClipboardEntry) and item.pinned:
                    style = "class:cell.pinned"
                if grid_has_focus and index == focused:
                    style += " class:cell.focused"
                if index == viewport.focused_cell:
                    fragments.append(("[SetCursorPosition]", ""))
                text = truncate(cell_label(item), cell_width - 1)
                fragments.append((style, text.ljust(cell_width - 1)))
                fragments.append(("", " "))
            fragments.append(("", "\n"))
        return fragments

    def status_fragments(self) -> StyleAndTextTuples:
        surface = self.surface
        if surface.last_error is not None:
            return [("class:status.error", surface.last_error.message)]
        hints = "Tab switch  Enter paste  Ctrl+F search  Esc close"
        if self.host.active_tab is PickerTab.CLIPBOARD:
            hints = "Del delete  Ctrl+P pin  Ctrl+R regex  " + hints
        return [("class:status", hints)]

    def _grid_control_fragments(self) -> StyleAndTextTuples:
        size = get_app().output.get_size()
        chrome = _CHROME_ROWS if self.surface.has_category_strip else _CHROME_ROWS - 1
        return self.grid_fragments(size.columns, max(size.rows - chrome, 1))

    def build_layout(self) -> Layout:
        has_strip = Condition(lambda: self.surface.has_category_strip)
        grid = Window(
            FormattedTextControl(self._grid_control_fragments, focusable=True, show_cursor=False),
            wrap_lines=False,
        )
        return Layout(
            HSplit([
                Window(FormattedTextControl(self.tab_fragments), height=1),
                Window(FormattedTextControl(self.search_fragments), height=1),
                ConditionalContainer(
                    Window(FormattedTextControl(self.category_fragments), height=1),
                    filter=has_strip,
                ),
                grid,
                Window(FormattedTextControl(self.status_fragments), height=1),
            ]),
            focused_element=grid,
        )

    # --- Keys ---

    def build_key_bindings(self) -> KeyBindings:
        kb = KeyBindings()

        @kb.add("c-c")
        @kb.add("c-q")
        def _quit(event: KeyPressEvent) -> None:
            event.app.exit(result=0)

        @kb.add(Keys.Any)
        def _route(event: KeyPressEvent) -> None:
            press = translate_key(event.key_sequence[0].key)
            event.app.create_background_task(self.dispatch(press))

        return kb

    async def dispatch(self, press: KeyPress) -> None:
        """Route one key press through the host, serialized with earlier ones."""
        async with self._lock:
            surface = self.surface
            selections = surface.selection_count
            consumed = await self.host.handle_key(press)
            if not consumed and press.name == "escape":
                self.exit()
            elif self.close_on_select and surface.selection_count != selections:
                self.exit()
            self.invalidate()

    def exit(self) -> None:
        if self._app is not None and self._app.is_running:
            self._app.exit(result=0)

    # --- Lifecycle ---

    async def run(self) -> int:
        self._app = Application(
            layout=self.build_layout(),
            key_bindings=self.build_key_bindings(),
            style=PICKER_STYLE,
            full_screen=True,
            mouse_support=False,
        )
        try:
            return await self._app.run_async() or 0
        finally:
            self._app = None


async def _pump_events(hub: PushEventHub, events: Any) -> None:
    try:
        await hub.pump(events)
    except ClipdeckError as e:
        logger.warning("Push event stream lost, history will not update live: %s", e.message)


async def run_picker(
    config: Config,
    initial_tab: PickerTab = PickerTab.CLIPBOARD,
    gifs: bool = True,
) -> int:
    """Connect to the backend and run the picker until it is closed."""
    hub = PushEventHub()
    async with make_client(config) as backend:
        pump = asyncio.create_task(_pump_events(hub, backend.iter_events()))
        try:
            async with AsyncExitStack() as stack:
                cache = HistoryCache(backend, hub=hub, dedup_window=config.history.dedup_window)
                await stack.enter_async_context(cache)

                gif_search = None
                if gifs:
                    service = GifSearchService(config.gifs, timeout=config.backend.request_timeout)
                    gif_search = (await stack.enter_async_context(service)).search

                surfaces = build_surfaces(config, cache, backend, gif_search)
                host = await stack.enter_async_context(
                    PickerHost(surfaces, hub=hub, initial=initial_tab)
                )
                return await PickerScreen(host).run()
        finally:
            pump.cancel()
            await asyncio.gather(pump, return_exceptions=True)
