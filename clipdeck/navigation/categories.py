"""Category strip: the one-row pill navigator above a picker grid.

The strip offers a closed set of options, resolved once from the picker's
category list:

    All | Custom (only when the surface has custom items) | <category>...
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Union

from clipdeck.navigation.grid import KeyOutcome, compute_move
from clipdeck.navigation.keys import KeyPress, NavKey

logger = logging.getLogger(__name__)

CUSTOM_CATEGORY_NAME = "Custom"


@dataclass(frozen=True)
class AllCategories:
    """No category restriction."""

    @property
    def label(self) -> str:
        return "All"

    def matches(self, category: str, is_custom: bool = False) -> bool:
        return True


@dataclass(frozen=True)
class CustomCategory:
    """Only user-defined items."""

    @property
    def label(self) -> str:
        return CUSTOM_CATEGORY_NAME

    def matches(self, category: str, is_custom: bool = False) -> bool:
        return is_custom


@dataclass(frozen=True)
class NamedCategory:
    """One category from the picker's own table."""

    name: str

    @property
    def label(self) -> str:
        return self.name

    def matches(self, category: str, is_custom: bool = False) -> bool:
        return category == self.name


CategoryOption = Union[AllCategories, CustomCategory, NamedCategory]


def build_options(categories: Sequence[str], has_custom: bool = False) -> tuple[CategoryOption, ...]:
    """Resolve the strip's options in display order."""
    options: list[CategoryOption] = [AllCategories()]
    if has_custom:
        options.append(CustomCategory())
    options.extend(NamedCategory(name) for name in categories)
    return tuple(options)


# The strip is a single row: only horizontal movement applies
_STRIP_KEYS = frozenset({NavKey.LEFT, NavKey.RIGHT, NavKey.HOME, NavKey.END})


class CategoryStrip:
    """Focus and selection state of a category strip."""

    def __init__(self, categories: Sequence[str] = (), has_custom: bool = False) -> None:
        self.options: tuple[CategoryOption, ...] = build_options(categories, has_custom)
        self.focused_index = 0
        self.selected: CategoryOption = AllCategories()

    def handle_key(self, press: KeyPress) -> KeyOutcome:
        """Move the strip focus or select the focused option."""
        key = press.nav_key
        if key is None:
            return KeyOutcome.IGNORED
        if key.is_select:
            self.select(self.options[self.focused_index])
            return KeyOutcome.SELECTED
        if key not in _STRIP_KEYS:
            return KeyOutcome.IGNORED

        count = len(self.options)
        target = compute_move(self.focused_index, key, count, count, ctrl=press.ctrl)
        if target is None:
            return KeyOutcome.IGNORED
        self.focused_index = target
        return KeyOutcome.MOVED

    def select(self, option: CategoryOption) -> bool:
        """Select an option.

        Returns:
            True if the selection changed.
        """
        if option not in self.options:
            logger.debug("Ignoring unknown category option %r", option)
            return False
        self.focused_index = self.options.index(option)
        if option == self.selected:
            return False
        self.selected = option
        return True
