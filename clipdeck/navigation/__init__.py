"""Keyboard navigation for picker grids and category strips."""

from clipdeck.navigation.categories import (
    AllCategories,
    CategoryOption,
    CategoryStrip,
    CustomCategory,
    NamedCategory,
    build_options,
)
from clipdeck.navigation.grid import (
    FocusState,
    Focusable,
    GridNavigator,
    KeyOutcome,
    VirtualViewport,
    compute_move,
)
from clipdeck.navigation.keys import KeyPress, NavKey

__all__ = [
    "AllCategories",
    "CategoryOption",
    "CategoryStrip",
    "CustomCategory",
    "FocusState",
    "Focusable",
    "GridNavigator",
    "KeyOutcome",
    "KeyPress",
    "NamedCategory",
    "NavKey",
    "VirtualViewport",
    "build_options",
    "compute_move",
]
