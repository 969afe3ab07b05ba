"""Incremental substring/regex filtering with instant-type activation.

Typing any printable character while a picker grid has focus opens the
filter and starts the query; Escape clears and closes it. Ctrl+F toggles it
explicitly.

Example:
    flt = IncrementalFilter()
    flt.handle_key(KeyPress("h"))          # opens, query == "h"
    visible = flt.apply(entries, lambda e: e.searchable_text)
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from typing import TypeVar

from clipdeck.config.schema import SearchMode
from clipdeck.core.errors import InvalidQuery
from clipdeck.navigation.keys import KeyPress

logger = logging.getLogger(__name__)

T = TypeVar("T")


def compile_query(query: str) -> re.Pattern[str]:
    """Compile a case-insensitive regex query.

    Raises:
        InvalidQuery: If the pattern does not compile.
    """
    try:
        return re.compile(query, re.IGNORECASE)
    except re.error as e:
        raise InvalidQuery(query, str(e)) from e


def filter_items(
    items: Sequence[T],
    query: str,
    mode: SearchMode,
    text_of: Callable[[T], str | None],
) -> list[T]:
    """Filter items by query. Never raises.

    Items whose text is None (images) never match a non-empty query. In
    regex mode an unparsable pattern logs a warning and matches nothing.
    """
    if not query:
        return list(items)

    if mode is SearchMode.REGEX:
        try:
            pattern = compile_query(query)
        except InvalidQuery as e:
            logger.warning("Invalid regex pattern in search query %r: %s", e.pattern, e.reason)
            return []
        return [item for item in items if _regex_match(pattern, text_of(item))]

    needle = query.casefold()
    return [item for item in items if _substring_match(needle, text_of(item))]


def _regex_match(pattern: re.Pattern[str], text: str | None) -> bool:
    return text is not None and pattern.search(text) is not None


def _substring_match(needle: str, text: str | None) -> bool:
    return text is not None and needle in text.casefold()


class IncrementalFilter:
    """Query, mode and visibility of one picker's search bar.

    Attributes:
        query: Current query text.
        mode: Substring or regex matching.
        is_open: Whether the search bar is shown.
        last_warning: The InvalidQuery from the most recent apply(), if any.
    """

    def __init__(self, mode: SearchMode = SearchMode.SUBSTRING) -> None:
        self.query = ""
        self.mode = mode
        self.is_open = False
        self.last_warning: InvalidQuery | None = None

    # --- Query state ---

    def set_query(self, query: str) -> None:
        """Replace the query, opening the bar when it becomes non-empty."""
        self.query = query
        if query:
            self.is_open = True

    def open(self) -> None:
        self.is_open = True

    def close(self) -> None:
        """Hide the search bar and clear the query."""
        self.is_open = False
        self.query = ""
        self.last_warning = None

    def toggle(self) -> None:
        if self.is_open:
            self.close()
        else:
            self.open()

    def toggle_mode(self) -> SearchMode:
        """Flip between substring and regex matching."""
        self.mode = SearchMode.SUBSTRING if self.mode is SearchMode.REGEX else SearchMode.REGEX
        logger.debug("Search mode switched to %s", self.mode.value)
        return self.mode

    # --- Keys ---

    def handle_key(self, press: KeyPress, *, in_text_input: bool = False) -> bool:
        """Apply a key press to the filter.

        Args:
            press: The key press.
            in_text_input: Focus is inside a text field, which edits the
                query itself; instant-type is then suppressed.

        Returns:
            True if the key was consumed.
        """
        if press.is_ctrl("f"):
            self.toggle()
            return True

        name = press.name
        if name == "escape":
            if not self.is_open:
                return False
            self.close()
            return True

        if in_text_input:
            return False

        if name == "backspace" and not press.has_command_modifier:
            if not self.is_open:
                return False
            self.query = self.query[:-1]
            return True

        if not press.is_printable:
            return False
        # Space selects in the grid until a query is being typed
        if press.key == " " and not self.is_open:
            return False

        self.is_open = True
        self.query += press.key
        return True

    # --- Results ---

    def apply(self, items: Sequence[T], text_of: Callable[[T], str | None]) -> list[T]:
        """Filter items with the current query. Never raises.

        An unparsable regex yields an empty list, a logged warning and
        last_warning set to the InvalidQuery.
        """
        self.last_warning = None
        if self.query and self.mode is SearchMode.REGEX:
            try:
                compile_query(self.query)
            except InvalidQuery as e:
                self.last_warning = e
        return filter_items(items, self.query, self.mode, text_of)
