"""Roving-focus keyboard navigation over a row-major grid of items.

Exactly one cell of a picker grid is "focused" at a time. compute_move() is
the pure transition function; GridNavigator owns the focus state and, for
virtualized grids that only materialize visible cells, runs the focus
transfer protocol:

    1. update focused_index
    2. ask the viewport to scroll the target cell into view
    3. on the next event-loop tick, look the cell up and focus it, retrying
       for a bounded number of ticks while the cell is not yet rendered

A newer move supersedes a pending transfer. The navigator never raises out
of a key press: viewport failures are logged and the focus transfer skipped.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from clipdeck.core.utils import clamp
from clipdeck.navigation.keys import KeyPress, NavKey

logger = logging.getLogger(__name__)

DEFAULT_PAGE_ROWS = 3
DEFAULT_FOCUS_RETRIES = 1


class KeyOutcome(str, Enum):
    """What a key press did."""

    MOVED = "moved"
    SELECTED = "selected"
    IGNORED = "ignored"

    @property
    def consumed(self) -> bool:
        return self is not KeyOutcome.IGNORED


def compute_move(
    index: int,
    key: NavKey,
    column_count: int,
    item_count: int,
    ctrl: bool = False,
    page_rows: int = DEFAULT_PAGE_ROWS,
) -> int | None:
    """Compute the index a navigation key moves focus to.

    Args:
        index: Currently focused index.
        key: Navigation key pressed.
        column_count: Cells per row (values below 1 are treated as 1).
        item_count: Number of items in the grid.
        ctrl: Ctrl held. Turns Home/End into first/last item.
        page_rows: Rows moved by PageUp/PageDown.

    Returns:
        The new index, or None when the key is not a move (Enter/Space), the
        grid is empty, or the move would leave focus where it is.
    """
    if item_count <= 0 or key.is_select:
        return None

    columns = max(1, column_count)
    last = item_count - 1
    index = clamp(index, 0, last)
    row_start = (index // columns) * columns

    target: int | None
    if key is NavKey.RIGHT:
        target = index + 1 if index < last else None
    elif key is NavKey.LEFT:
        target = index - 1 if index > 0 else None
    elif key is NavKey.DOWN:
        target = index + columns if index + columns < item_count else None
    elif key is NavKey.UP:
        target = index - columns if index - columns >= 0 else None
    elif key is NavKey.HOME:
        target = 0 if ctrl else row_start
    elif key is NavKey.END:
        target = last if ctrl else min(row_start + columns - 1, last)
    elif key is NavKey.PAGE_DOWN:
        target = min(index + columns * page_rows, last)
    elif key is NavKey.PAGE_UP:
        target = max(index - columns * page_rows, 0)
    else:
        target = None

    if target is None or target == index:
        return None
    return target


class Focusable(Protocol):
    """A rendered cell that can take keyboard focus."""

    def focus(self) -> None: ...


class VirtualViewport(Protocol):
    """The rendering side of a (possibly virtualized) grid.

    Only cells inside the rendered window exist; find_cell() returns None for
    the rest until a scroll brings them in.
    """

    def scroll_to_cell(self, row: int, column: int) -> None: ...

    def find_cell(self, index: int) -> Focusable | None: ...


@dataclass
class FocusState:
    """Focus position within a grid.

    Attributes:
        focused_index: Index of the focused item (0 when the grid is empty).
        column_count: Cells per row.
        item_count: Number of items.
    """

    focused_index: int = 0
    column_count: int = 1
    item_count: int = 0

    @property
    def row(self) -> int:
        return self.focused_index // self.column_count

    @property
    def column(self) -> int:
        return self.focused_index % self.column_count

    @property
    def row_count(self) -> int:
        return -(-self.item_count // self.column_count)


class GridNavigator:
    """Stateful roving-focus navigator for one picker grid."""

    def __init__(
        self,
        column_count: int = 1,
        *,
        viewport: VirtualViewport | None = None,
        page_rows: int = DEFAULT_PAGE_ROWS,
        focus_retries: int = DEFAULT_FOCUS_RETRIES,
    ) -> None:
        """Initialize the navigator.

        Args:
            column_count: Initial cells per row.
            viewport: Rendering side to scroll and focus cells in. May be
                attached later.
            page_rows: Rows moved by PageUp/PageDown.
            focus_retries: Extra ticks to wait for a cell to be rendered
                before the focus transfer is skipped.
        """
        self.state = FocusState(column_count=max(1, column_count))
        self._viewport = viewport
        self._page_rows = page_rows
        self._focus_retries = focus_retries
        # Bumped per move; a pending transfer only runs if still current
        self._focus_generation = 0

    @property
    def focused_index(self) -> int:
        return self.state.focused_index

    @property
    def column_count(self) -> int:
        return self.state.column_count

    @property
    def item_count(self) -> int:
        return self.state.item_count

    def attach_viewport(self, viewport: VirtualViewport | None) -> None:
        self._viewport = viewport
        self._focus_generation += 1

    # --- State updates ---

    def set_items(self, item_count: int, *, reset: bool = False) -> None:
        """Tell the navigator the list changed.

        Args:
            item_count: New number of items.
            reset: Move focus back to the first item (filter or category
                change). Otherwise focus is clamped into the new range.
        """
        self.state.item_count = max(0, item_count)
        if reset:
            self.state.focused_index = 0
            self._focus_generation += 1
        else:
            self.state.focused_index = self._clamped(self.state.focused_index)

    def set_column_count(self, column_count: int) -> None:
        """Update cells per row, e.g. after the grid was resized."""
        self.state.column_count = max(1, column_count)

    def _clamped(self, index: int) -> int:
        if self.state.item_count == 0:
            return 0
        return clamp(index, 0, self.state.item_count - 1)

    # --- Key handling ---

    def handle_key(self, press: KeyPress | NavKey) -> KeyOutcome:
        """Apply a key press.

        Returns:
            MOVED if focus moved, SELECTED for Enter/Space on a non-empty
            grid (the caller activates the item at focused_index), IGNORED
            for unhandled keys and no-op moves.
        """
        if isinstance(press, NavKey):
            key, ctrl = press, False
        else:
            key, ctrl = press.nav_key, press.ctrl
        if key is None:
            return KeyOutcome.IGNORED

        if key.is_select:
            if self.state.item_count == 0:
                return KeyOutcome.IGNORED
            return KeyOutcome.SELECTED

        target = compute_move(
            self.state.focused_index,
            key,
            self.state.column_count,
            self.state.item_count,
            ctrl=ctrl,
            page_rows=self._page_rows,
        )
        if target is None:
            return KeyOutcome.IGNORED

        self.focus_index(target)
        return KeyOutcome.MOVED

    def focus_index(self, index: int) -> bool:
        """Move focus to an index and run the scroll-then-focus protocol.

        Returns:
            False if the index is out of range (nothing happens).
        """
        if not 0 <= index < self.state.item_count:
            return False
        self.state.focused_index = index
        self._focus_generation += 1

        viewport = self._viewport
        if viewport is None:
            return True

        try:
            viewport.scroll_to_cell(self.state.row, self.state.column)
        except Exception:
            logger.exception("Viewport failed to scroll to index %d", index)

        generation = self._focus_generation
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop to defer to: try once, synchronously
            self._transfer_focus(index, generation, 0)
            return True
        loop.call_soon(self._transfer_focus, index, generation, self._focus_retries)
        return True

    def _transfer_focus(self, index: int, generation: int, retries_left: int) -> None:
        if generation != self._focus_generation or self._viewport is None:
            return
        try:
            cell = self._viewport.find_cell(index)
        except Exception:
            logger.exception("Viewport failed to look up cell %d", index)
            return

        if cell is None:
            if retries_left > 0:
                asyncio.get_running_loop().call_soon(
                    self._transfer_focus, index, generation, retries_left - 1
                )
            else:
                logger.debug("Cell %d not rendered, skipping focus transfer", index)
            return

        try:
            cell.focus()
        except Exception:
            logger.exception("Failed to focus cell %d", index)
