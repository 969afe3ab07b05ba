"""Rich renderables for history listings and push event lines."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from rich.markup import escape
from rich.table import Table

from clipdeck.display.theme import Theme
from clipdeck.events.types import ENTRY_ADDED, HISTORY_SYNC
from clipdeck.history.types import ClipboardEntry


def truncate(text: str, width: int) -> str:
    """Shorten text to width characters, marking the cut with an ellipsis."""
    if width <= 0:
        return ""
    if len(text) <= width:
        return text
    return text[: max(width - 1, 0)] + "…"


def history_table(entries: Sequence[ClipboardEntry], theme: Theme | None = None) -> Table:
    """Build a table of history entries in display order."""
    theme = theme or Theme()
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("", no_wrap=True)
    table.add_column("#", justify="right", style="dim", no_wrap=True)
    table.add_column("Time", style=theme.timestamp, no_wrap=True)
    table.add_column("Kind", no_wrap=True)
    table.add_column("Content", overflow="ellipsis")

    for position, entry in enumerate(entries, start=1):
        category = entry.category
        style = theme.category_style(category)
        kind = f"[{style}]{category.value}[/]" if style else category.value
        table.add_row(
            theme.marker(entry.pinned),
            str(position),
            entry.timestamp.astimezone().strftime("%Y-%m-%d %H:%M"),
            kind,
            escape(truncate(entry.display_text, theme.preview_width)),
        )
    return table


def format_event(event: dict[str, Any], theme: Theme | None = None) -> str:
    """One markup line describing a push event."""
    theme = theme or Theme()
    event_type = str(event.get("type", "?"))
    line = f"[{theme.event_type}]{escape(event_type)}[/]"
    if "seq" in event:
        line += f" [dim]#{event['seq']}[/]"

    data = event.get("data")
    if event_type == ENTRY_ADDED and isinstance(data, dict):
        try:
            entry = ClipboardEntry.from_wire(data)
        except ValueError as e:
            return line + f" [{theme.error}]malformed: {escape(str(e))}[/]"
        preview = escape(truncate(entry.display_text, theme.preview_width))
        line += f" {theme.marker(entry.pinned)} {escape(entry.id)} {preview}"
    elif event_type == HISTORY_SYNC and isinstance(data, list):
        line += f" {len(data)} entries"
    return line
