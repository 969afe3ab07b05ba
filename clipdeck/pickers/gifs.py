"""GIF search: Tenor v1 client and a debounced, supersedable search runner."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from clipdeck.config.schema import GifConfig
from clipdeck.core.cancel import CancellationToken
from clipdeck.core.errors import ClipdeckError, TransportFailure
from clipdeck.pickers.items import PickerItem

logger = logging.getLogger(__name__)

# Tenor's public demo key, used when no key is configured
DEFAULT_TENOR_KEY = "LIVDSRZULELA"

GIF_CATEGORY = "GIF"


def gif_from_result(result: dict[str, Any]) -> PickerItem:
    """Convert one Tenor v1 result into a picker item.

    The smallest rendition is used as the grid preview, a mid-size one as the
    pasted source.

    Raises:
        ValueError: If the result lacks an id or usable media formats.
    """
    gif_id = result.get("id")
    if not isinstance(gif_id, str) or not gif_id:
        raise ValueError("GIF result has no id")
    media = result.get("media")
    if not isinstance(media, list) or not media or not isinstance(media[0], dict):
        raise ValueError(f"Missing media for GIF: {gif_id}")
    formats = media[0]

    preview = formats.get("nanogif") or formats.get("tinygif")
    full = formats.get("tinygif") or formats.get("mediumgif") or formats.get("gif")
    if not isinstance(preview, dict) or not isinstance(full, dict):
        raise ValueError(f"Missing media formats for GIF: {gif_id}")
    if not preview.get("url") or not full.get("url"):
        raise ValueError(f"Missing media URL for GIF: {gif_id}")

    tags = result.get("tags")
    return PickerItem(
        id=gif_id,
        display=str(preview["url"]),
        label=str(result.get("content_description") or result.get("title") or "GIF"),
        category=GIF_CATEGORY,
        keywords=tuple(str(t) for t in tags) if isinstance(tags, list) else (),
        source_ref=str(full["url"]),
    )


class GifSearchService:
    """Async client for Tenor's v1 trending and search endpoints.

    Usage:
        async with GifSearchService(config.gifs) as gifs:
            trending = await gifs.trending()
            cats = await gifs.search("cat")
    """

    def __init__(
        self,
        config: GifConfig | None = None,
        *,
        api_key: str | None = None,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            config: GIF settings (API base, key variable, result limit).
            api_key: Explicit key. Defaults to the configured environment
                variable, then Tenor's public demo key.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (tests use httpx.MockTransport).
        """
        self._config = config or GifConfig()
        self._api_key = api_key or os.environ.get(self._config.api_key_env) or DEFAULT_TENOR_KEY
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def limit(self) -> int:
        return self._config.limit

    async def __aenter__(self) -> GifSearchService:
        self._client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def trending(self, limit: int | None = None) -> list[PickerItem]:
        """Fetch trending GIFs."""
        return await self._get("trending", {"limit": limit or self.limit})

    async def search(self, query: str, limit: int | None = None) -> list[PickerItem]:
        """Search GIFs. A blank query returns trending GIFs."""
        if not query.strip():
            return await self.trending(limit)
        return await self._get("search", {"q": query.strip(), "limit": limit or self.limit})

    async def _get(self, endpoint: str, params: dict[str, Any]) -> list[PickerItem]:
        if self._client is None:
            raise TransportFailure(
                "GIF service not initialized. Use 'async with' context manager.", endpoint
            )

        url = f"{self._config.api_base.rstrip('/')}/{endpoint}"
        query = {"key": self._api_key, "media_filter": "minimal", **params}
        logger.debug("Tenor request: %s limit=%s", endpoint, params.get("limit"))

        try:
            response = await self._client.get(url, params=query)
        except httpx.TimeoutException as e:
            raise TransportFailure(f"Tenor request timed out: {e}", endpoint) from e
        except httpx.HTTPError as e:
            raise TransportFailure(f"Tenor request failed: {e}", endpoint) from e

        if response.status_code != 200:
            raise TransportFailure(
                f"Tenor API error: {response.status_code} {response.reason_phrase}", endpoint
            )

        try:
            data = response.json()
        except ValueError as e:
            raise TransportFailure(f"Tenor returned invalid JSON: {e}", endpoint) from e

        results = data.get("results") if isinstance(data, dict) else None
        if not isinstance(results, list):
            raise TransportFailure("Tenor response has no results list", endpoint)

        gifs: list[PickerItem] = []
        for result in results:
            try:
                gifs.append(gif_from_result(result if isinstance(result, dict) else {}))
            except ValueError as e:
                logger.warning("Skipping malformed GIF result: %s", e)
        return gifs


SearchFn = Callable[[str], Awaitable[list[PickerItem]]]
ResultsCallback = Callable[[str, list[PickerItem]], None]
ErrorCallback = Callable[[str, ClipdeckError], None]


class DebouncedSearch:
    """Run a search after a quiet period, discarding superseded responses.

    Each submit() cancels the previous request's liveness token. A request
    that completes after being superseded is dropped instead of published,
    so results never arrive out of order.

    Example:
        search = DebouncedSearch(gifs.search, on_results=show, delay=0.3)
        search.submit("ca")
        search.submit("cat")   # "ca" never reaches show()
    """

    def __init__(
        self,
        search: SearchFn,
        on_results: ResultsCallback,
        *,
        on_error: ErrorCallback | None = None,
        delay: float = 0.3,
    ) -> None:
        self._search = search
        self._on_results = on_results
        self._on_error = on_error
        self._delay = delay
        self._token: CancellationToken | None = None
        self._task: asyncio.Task[None] | None = None
        self._tasks: set[asyncio.Task[None]] = set()

    def submit(self, query: str, *, immediate: bool = False) -> asyncio.Task[None]:
        """Schedule a search, superseding any earlier one.

        Args:
            query: Search text. Blank means trending.
            immediate: Skip the debounce delay (initial load, refresh).
        """
        if self._token is not None:
            self._token.cancel()
        token = CancellationToken(query)
        self._token = token

        task = asyncio.create_task(self._run(query, token, 0.0 if immediate else self._delay))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self._task = task
        return task

    async def _run(self, query: str, token: CancellationToken, delay: float) -> None:
        if delay > 0:
            await asyncio.sleep(delay)
        if token.is_cancelled:
            return

        try:
            results = await self._search(query)
        except ClipdeckError as e:
            if token.is_cancelled:
                return
            logger.warning("Search for %r failed: %s", query, e.message)
            if self._on_error is not None:
                self._on_error(query, e)
            return

        if token.is_cancelled:
            logger.debug("Discarding superseded results for %r", query)
            return
        self._on_results(query, results)

    async def wait(self) -> None:
        """Wait for the latest submitted search to finish."""
        task = self._task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            if not task.cancelled():
                raise

    def cancel(self) -> None:
        """Drop every pending or in-flight search."""
        if self._token is not None:
            self._token.cancel()
        for task in list(self._tasks):
            task.cancel()
