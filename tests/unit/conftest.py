"""Shared fixtures for unit tests: an in-memory backend and wire entry factory."""

import asyncio
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from clipdeck.core.errors import TransportFailure

BASE_TIME = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

WireEntryFactory = Callable[..., dict[str, Any]]


def _wire_entry(
    entry_id: str,
    text: str | None = None,
    *,
    minutes: int = 0,
    pinned: bool = False,
    image: bool = False,
) -> dict[str, Any]:
    """Build a wire entry captured `minutes` after BASE_TIME."""
    if image:
        content: dict[str, Any] = {
            "type": "Image",
            "data": {"base64": "iVBORw0KGgo=", "width": 16, "height": 16},
        }
    else:
        content = {"type": "Text", "data": text if text is not None else f"text {entry_id}"}
    return {
        "id": entry_id,
        "content": content,
        "timestamp": (BASE_TIME + timedelta(minutes=minutes)).isoformat(),
        "pinned": pinned,
        "preview": "",
    }


class MockBackend:
    """In-memory stand-in for the clipboard backend.

    Attributes:
        entries: Server-side history in wire form, pinned first.
        calls: (method, argument) for every request, in order.
        fail: Method names that raise TransportFailure.
        gates: Method name -> Event the request waits on before completing.
    """

    def __init__(self, entries: list[dict[str, Any]] | None = None) -> None:
        self.entries: list[dict[str, Any]] = [dict(e) for e in entries or []]
        self.calls: list[tuple[str, Any]] = []
        self.fail: set[str] = set()
        self.gates: dict[str, asyncio.Event] = {}
        self.forget: set[str] = set()

    async def _complete(self, method: str, arg: Any = None) -> None:
        self.calls.append((method, arg))
        gate = self.gates.get(method)
        if gate is not None:
            await gate.wait()
        if method in self.fail:
            raise TransportFailure(f"{method} failed", method)

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    async def get_history(self) -> list[dict[str, Any]]:
        snapshot = [dict(e) for e in self.entries]
        await self._complete("get_history")
        return snapshot

    async def clear_history(self) -> None:
        await self._complete("clear_history")
        self.entries = [e for e in self.entries if e["pinned"]]

    async def delete_item(self, entry_id: str) -> None:
        await self._complete("delete_item", entry_id)
        self.entries = [e for e in self.entries if e["id"] != entry_id]

    async def toggle_pin(self, entry_id: str) -> dict[str, Any] | None:
        await self._complete("toggle_pin", entry_id)
        if entry_id in self.forget:
            return None
        for entry in self.entries:
            if entry["id"] == entry_id:
                entry["pinned"] = not entry["pinned"]
                return dict(entry)
        return None

    async def paste_item(self, entry_id: str) -> None:
        await self._complete("paste_item", entry_id)

    async def paste_text(self, text: str) -> None:
        await self._complete("paste_text", text)

    async def paste_image_from_source(self, source: str) -> None:
        await self._complete("paste_image_from_source", source)


@pytest.fixture
def wire_entry() -> WireEntryFactory:
    """Factory for wire-format history entries."""
    return _wire_entry


@pytest.fixture
def backend() -> MockBackend:
    """Backend holding two pinned and four unpinned entries.

    Order: p2, p1 (pinned) then u4, u3, u2, u1 (newest first).
    """
    return MockBackend([
        _wire_entry("p2", "pinned two", minutes=2, pinned=True),
        _wire_entry("p1", "pinned one", minutes=1, pinned=True),
        _wire_entry("u4", "four", minutes=40),
        _wire_entry("u3", "three", minutes=30),
        _wire_entry("u2", "two", minutes=20),
        _wire_entry("u1", "one", minutes=10),
    ])


@pytest.fixture
def empty_backend() -> MockBackend:
    return MockBackend()
