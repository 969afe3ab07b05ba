"""Toolkit-neutral key press representation.

Front ends translate their native key events into KeyPress before handing
them to the navigators, filters and view models. Key names follow the
prompt_toolkit vocabulary ("left", "pageup", "escape", ...); printable
characters are passed as themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class NavKey(str, Enum):
    """Keys understood by the grid navigator."""

    RIGHT = "right"
    LEFT = "left"
    UP = "up"
    DOWN = "down"
    HOME = "home"
    END = "end"
    PAGE_UP = "pageup"
    PAGE_DOWN = "pagedown"
    ENTER = "enter"
    SPACE = "space"

    @property
    def is_select(self) -> bool:
        return self in (NavKey.ENTER, NavKey.SPACE)


# Alternative spellings seen from terminals and browsers
_ALIASES: dict[str, str] = {
    " ": "space",
    "arrowright": "right",
    "arrowleft": "left",
    "arrowup": "up",
    "arrowdown": "down",
    "page_up": "pageup",
    "page_down": "pagedown",
    "return": "enter",
    "c-m": "enter",
    "c-j": "enter",
    "esc": "escape",
    "c-h": "backspace",
    "s-tab": "backtab",
    "c-i": "tab",
}


@dataclass(frozen=True)
class KeyPress:
    """A single key press with its modifiers.

    Attributes:
        key: Key name ("left", "escape", ...) or the typed character.
        ctrl: Control held.
        alt: Alt/Option held.
        shift: Shift held.
        meta: Meta/Command held.
    """

    key: str
    ctrl: bool = False
    alt: bool = False
    shift: bool = False
    meta: bool = False

    @property
    def name(self) -> str:
        """Normalized key name. Single characters keep their case."""
        if len(self.key) == 1 and self.key != " ":
            return self.key
        lowered = self.key.lower()
        return _ALIASES.get(lowered, lowered)

    @property
    def nav_key(self) -> NavKey | None:
        """The navigation key this press maps to, if any."""
        try:
            return NavKey(self.name)
        except ValueError:
            return None

    @property
    def has_command_modifier(self) -> bool:
        """Ctrl, Alt or Meta held. Shift alone does not count."""
        return self.ctrl or self.alt or self.meta

    @property
    def is_printable(self) -> bool:
        """A single printable character typed without Ctrl/Alt/Meta."""
        return len(self.key) == 1 and self.key.isprintable() and not self.has_command_modifier

    def is_ctrl(self, letter: str) -> bool:
        """Check for Ctrl+<letter>, case-insensitively."""
        if self.ctrl and self.key.lower() == letter.lower():
            return True
        # prompt_toolkit reports control chords as "c-<letter>"
        return self.key.lower() == f"c-{letter.lower()}"
