"""Push event names emitted by the clipboard backend.

Every event is a dict of the form {"type": <name>, "data": <payload>}; the
payload is absent for events that carry none.
"""

ENTRY_ADDED = "entry-added"
"""A new entry was captured. data: one wire entry."""

HISTORY_CLEARED = "history-cleared"
"""All unpinned entries were removed. No data."""

HISTORY_SYNC = "history-sync"
"""Authoritative full snapshot. data: list of wire entries."""

WINDOW_SHOWN = "window-shown"
"""The picker window was shown again. No data."""

HISTORY_EVENTS: frozenset[str] = frozenset({ENTRY_ADDED, HISTORY_CLEARED, HISTORY_SYNC})
