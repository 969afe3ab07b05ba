"""Picker item type shared by the emoji, symbol, kaomoji and GIF surfaces."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PickerItem:
    """One selectable cell in a static or remote picker.

    Attributes:
        id: Unique within its surface.
        display: The character or kaomoji text, or a GIF preview URL.
        label: Human-readable name ("grinning face", GIF title).
        category: Category the item is listed under.
        keywords: Extra search terms.
        source_ref: Full-size GIF URL handed to the backend when pasting.
        is_custom: User-defined item (listed under the Custom category).
    """

    id: str
    display: str
    label: str = ""
    category: str = ""
    keywords: tuple[str, ...] = ()
    source_ref: str | None = None
    is_custom: bool = False

    @property
    def searchable_text(self) -> str:
        return " ".join(part for part in (self.display, self.label, *self.keywords) if part)
