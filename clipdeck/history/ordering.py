"""Ordering helpers for the pinned-first history list.

Every list handed out by the history cache satisfies:
    all pinned entries precede all unpinned entries; unpinned entries are
    newest first; pinned entries are most-recently-pinned first.

The helpers here never reorder within a partition unless asked to, so the
backend's own ordering of a snapshot is preserved.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from clipdeck.history.types import ClipboardEntry


def partition(entries: Iterable[ClipboardEntry]) -> list[ClipboardEntry]:
    """Stable partition: pinned entries first, relative order kept in each block."""
    pinned: list[ClipboardEntry] = []
    unpinned: list[ClipboardEntry] = []
    for entry in entries:
        (pinned if entry.pinned else unpinned).append(entry)
    return pinned + unpinned


def is_well_ordered(entries: Sequence[ClipboardEntry]) -> bool:
    """Check that no pinned entry follows an unpinned one."""
    seen_unpinned = False
    for entry in entries:
        if entry.pinned and seen_unpinned:
            return False
        if not entry.pinned:
            seen_unpinned = True
    return True


def pinned_count(entries: Sequence[ClipboardEntry]) -> int:
    """Length of the leading pinned block."""
    count = 0
    for entry in entries:
        if not entry.pinned:
            break
        count += 1
    return count


def insert_new(entries: Sequence[ClipboardEntry], entry: ClipboardEntry) -> list[ClipboardEntry]:
    """Insert a freshly captured entry at the head of its partition."""
    split = pinned_count(entries)
    items = list(entries)
    items.insert(0 if entry.pinned else split, entry)
    return items


def reinsert(entries: Sequence[ClipboardEntry], entry: ClipboardEntry) -> list[ClipboardEntry]:
    """Splice `entry` out by id and put it back where its pin state says.

    Pinned: head of the pinned block (most recently pinned first).
    Unpinned: the unpinned block is re-sorted newest first, so the entry lands
    at its timestamp position rather than its old slot.
    """
    rest = [e for e in entries if e.id != entry.id]
    pinned = [e for e in rest if e.pinned]
    unpinned = [e for e in rest if not e.pinned]
    if entry.pinned:
        return [entry, *pinned, *unpinned]
    unpinned.append(entry)
    unpinned.sort(key=lambda e: e.timestamp, reverse=True)
    return [*pinned, *unpinned]


def pinned_only(entries: Iterable[ClipboardEntry]) -> list[ClipboardEntry]:
    """What survives a clear-all."""
    return [e for e in entries if e.pinned]
