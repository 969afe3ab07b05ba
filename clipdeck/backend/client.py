"""Async HTTP client for the clipboard backend's JSON-RPC endpoint."""

import logging
from collections.abc import AsyncIterator
from typing import Any, cast

import httpx

from clipdeck.backend.protocol import (
    JSONRPC_VERSION,
    ParseError,
    Request,
    Response,
    parse_event,
    parse_response,
    serialize_request,
)
from clipdeck.core.errors import TransportFailure

logger = logging.getLogger(__name__)


class BackendClient:
    """Async HTTP client for the clipboard backend.

    Implements both HistoryBackend and PasteBackend. Every failure (connection,
    timeout, RPC error, malformed response) surfaces as TransportFailure.

    Usage:
        async with BackendClient("http://127.0.0.1:7345") as client:
            entries = await client.get_history()

        # Push events on the same client, typically in a background task:
        async for event in client.iter_events():
            print(event["type"])
    """

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            url: Base URL of the backend JSON-RPC endpoint.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (tests use httpx.MockTransport).
        """
        self._url = url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._request_id = 0
        logger.debug("BackendClient initialized: url=%s, timeout=%s", self._url, timeout)

    @property
    def url(self) -> str:
        return self._url

    async def __aenter__(self) -> "BackendClient":
        """Enter async context, create httpx client."""
        self._client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context, close httpx client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _next_id(self) -> int:
        self._request_id += 1
        return self._request_id

    async def _call(self, method: str, params: dict[str, Any] | None = None) -> Any:
        """Make a JSON-RPC call and return its result.

        Raises:
            TransportFailure: On connection error, timeout, protocol error, or
                an error response from the backend.
        """
        if self._client is None:
            raise TransportFailure(
                "Client not initialized. Use 'async with' context manager.", method
            )

        request = Request(jsonrpc=JSONRPC_VERSION, method=method, params=params, id=self._next_id())

        logger.debug("RPC call: method=%s, id=%s", method, request.id)
        try:
            http_response = await self._client.post(
                self._url,
                content=serialize_request(request),
                headers={"Content-Type": "application/json"},
            )
            response = parse_response(http_response.text)
        except httpx.ConnectError as e:
            logger.warning("Connection failed to %s: %s", self._url, e)
            raise TransportFailure(f"Connection failed: {e}", method) from e
        except httpx.TimeoutException as e:
            logger.warning("Request timed out: method=%s, timeout=%s", method, self._timeout)
            raise TransportFailure(f"Request timed out: {e}", method) from e
        except httpx.HTTPError as e:
            logger.warning("HTTP error for method=%s: %s", method, e)
            raise TransportFailure(f"HTTP error: {e}", method) from e
        except ParseError as e:
            logger.warning("Invalid backend response for method=%s: %s", method, e)
            raise TransportFailure(f"Invalid backend response: {e}", method) from e

        return self._check(response, method)

    def _check(self, response: Response, method: str) -> Any:
        """Extract result from response or raise TransportFailure on error."""
        if response.error:
            code = response.error.get("code", -1)
            message = response.error.get("message", "Unknown error")
            logger.warning("RPC error %d from %s: %s", code, method, message)
            raise TransportFailure(f"RPC error {code}: {message}", method)
        return response.result

    # History requests

    async def get_history(self) -> list[dict[str, Any]]:
        """Fetch the full history list."""
        result = await self._call("get_history")
        if not isinstance(result, list):
            raise TransportFailure(
                f"get_history returned {type(result).__name__}, expected list", "get_history"
            )
        return cast(list[dict[str, Any]], result)

    async def clear_history(self) -> None:
        """Clear all unpinned entries."""
        await self._call("clear_history")

    async def delete_item(self, entry_id: str) -> None:
        """Delete one entry by id."""
        await self._call("delete_item", {"id": entry_id})

    async def toggle_pin(self, entry_id: str) -> dict[str, Any] | None:
        """Toggle an entry's pin flag.

        Returns:
            The updated entry, or None when the backend no longer knows the id.
        """
        result = await self._call("toggle_pin", {"id": entry_id})
        if result is not None and not isinstance(result, dict):
            raise TransportFailure(
                f"toggle_pin returned {type(result).__name__}, expected object", "toggle_pin"
            )
        return cast(dict[str, Any] | None, result)

    async def paste_item(self, entry_id: str) -> None:
        """Paste a history entry."""
        await self._call("paste_item", {"id": entry_id})

    # Picker requests

    async def paste_text(self, text: str) -> None:
        """Paste literal text such as an emoji or kaomoji."""
        await self._call("paste_text", {"text": text})

    async def paste_image_from_source(self, source: str) -> None:
        """Ask the backend to fetch an image (e.g. GIF URL) and paste it."""
        await self._call("paste_image_from_source", {"source": source})

    # Push events

    async def iter_events(self) -> AsyncIterator[dict[str, Any]]:
        """Iterate push events from the backend's SSE stream.

        Opens a long-lived GET on <url>/events and yields parsed event dicts of
        the form {"type": ..., "data": ...}. Malformed events are logged and
        skipped.

        Raises:
            TransportFailure: On connection error or non-200 response.
        """
        if self._client is None:
            raise TransportFailure(
                "Client not initialized. Use 'async with' context manager.", "events"
            )

        events_url = self._url + "/events"
        logger.debug("Opening SSE stream: url=%s", events_url)

        try:
            # timeout=None for the long-lived stream
            async with self._client.stream(
                "GET",
                events_url,
                headers={"Accept": "text/event-stream"},
                timeout=None,
            ) as response:
                if response.status_code != 200:
                    body = await response.aread()
                    body_text = body.decode("utf-8", errors="replace")[:500]
                    raise TransportFailure(
                        f"SSE connection failed: {response.status_code} {body_text}", "events"
                    )

                data_lines: list[str] = []

                async for line in response.aiter_lines():
                    # Blank line signals end of event
                    if not line:
                        if data_lines:
                            data_str = "\n".join(data_lines)
                            data_lines = []
                            try:
                                yield parse_event(data_str)
                            except ParseError as e:
                                logger.warning("Skipping malformed push event: %s", e)
                        continue

                    if line.startswith("data:"):
                        data_lines.append(line[5:].strip())
                    # "event:", comments (":") and unknown fields are ignored;
                    # the type lives in the JSON payload

                # Flush a final event not followed by a blank line
                if data_lines:
                    try:
                        yield parse_event("\n".join(data_lines))
                    except ParseError as e:
                        logger.warning("Skipping malformed push event: %s", e)

        except httpx.ConnectError as e:
            logger.warning("SSE connection failed to %s: %s", events_url, e)
            raise TransportFailure(f"SSE connection failed: {e}", "events") from e
        except httpx.ReadError as e:
            logger.debug("SSE stream closed: %s", e)
            return
