"""Fixtures for picker tests."""

import pytest

from clipdeck.core.errors import TransportFailure
from clipdeck.pickers.items import PickerItem


class FakeGifSearch:
    """Search function returning three GIFs per query.

    Labels never contain the query, so any local filtering would hide them.
    """

    def __init__(self) -> None:
        self.queries: list[str] = []
        self.fail = False

    async def __call__(self, query: str) -> list[PickerItem]:
        self.queries.append(query)
        if self.fail:
            raise TransportFailure("Tenor API error: 503 Service Unavailable", "search")
        stem = query or "trending"
        return [
            PickerItem(
                id=f"{stem}-{i}",
                display=f"https://media.test/{stem}-{i}/nano.gif",
                label="GIF",
                category="GIF",
                source_ref=f"https://media.test/{stem}-{i}/tiny.gif",
            )
            for i in range(3)
        ]


@pytest.fixture
def gif_search() -> FakeGifSearch:
    return FakeGifSearch()
