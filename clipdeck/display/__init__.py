"""clipdeck display system.

Shared console, theme and rich renderables for the CLI.
"""

from clipdeck.display.console import get_console, set_console
from clipdeck.display.render import format_event, history_table, truncate
from clipdeck.display.theme import Theme

__all__ = [
    # Console
    "get_console",
    "set_console",
    # Renderables
    "format_event",
    "history_table",
    "truncate",
    # Theme
    "Theme",
]
