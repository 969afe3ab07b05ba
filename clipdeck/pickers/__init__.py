"""Picker surfaces: history, GIF, emoji, kaomoji and symbols."""

from clipdeck.pickers.gifs import DebouncedSearch, GifSearchService
from clipdeck.pickers.host import PickerHost, PickerTab, build_surfaces
from clipdeck.pickers.items import PickerItem
from clipdeck.pickers.viewmodel import (
    FocusZone,
    GifPickerViewModel,
    HistoryViewModel,
    PickerViewModel,
    StaticPickerViewModel,
)

__all__ = [
    "DebouncedSearch",
    "FocusZone",
    "GifPickerViewModel",
    "GifSearchService",
    "HistoryViewModel",
    "PickerHost",
    "PickerItem",
    "PickerTab",
    "PickerViewModel",
    "StaticPickerViewModel",
    "build_surfaces",
]
