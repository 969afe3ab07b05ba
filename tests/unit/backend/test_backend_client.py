"""Tests for BackendClient using httpx.MockTransport."""

import json
import logging

import httpx
import pytest

from clipdeck.backend.client import BackendClient
from clipdeck.core.errors import TransportFailure

URL = "http://backend.test/rpc"


def rpc_handler(results: dict, seen: list | None = None):
    """Build a MockTransport handler answering JSON-RPC calls from a result map."""

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if seen is not None:
            seen.append(body)
        method = body["method"]
        if method not in results:
            return httpx.Response(
                200,
                json={
                    "jsonrpc": "2.0",
                    "id": body["id"],
                    "error": {"code": -32601, "message": f"Method not found: {method}"},
                },
            )
        return httpx.Response(
            200, json={"jsonrpc": "2.0", "id": body["id"], "result": results[method]}
        )

    return handler


def client_for(handler) -> BackendClient:
    return BackendClient(URL, transport=httpx.MockTransport(handler))


class TestRequests:
    """Tests for the request/response contract."""

    @pytest.mark.asyncio
    async def test_get_history(self, wire_entry):
        entries = [wire_entry("a"), wire_entry("b")]
        async with client_for(rpc_handler({"get_history": entries})) as client:
            assert await client.get_history() == entries

    @pytest.mark.asyncio
    async def test_params_are_sent(self):
        seen: list = []
        results = {
            "delete_item": None,
            "paste_item": None,
            "paste_text": None,
            "paste_image_from_source": None,
            "clear_history": None,
        }
        async with client_for(rpc_handler(results, seen)) as client:
            await client.delete_item("e1")
            await client.paste_item("e2")
            await client.paste_text("(^_^)")
            await client.paste_image_from_source("https://media.test/a.gif")
            await client.clear_history()

        assert [(b["method"], b.get("params")) for b in seen] == [
            ("delete_item", {"id": "e1"}),
            ("paste_item", {"id": "e2"}),
            ("paste_text", {"text": "(^_^)"}),
            ("paste_image_from_source", {"source": "https://media.test/a.gif"}),
            ("clear_history", None),
        ]
        assert [b["id"] for b in seen] == [1, 2, 3, 4, 5]

    @pytest.mark.asyncio
    async def test_toggle_pin_returns_entry_or_none(self, wire_entry):
        entry = wire_entry("a", pinned=True)
        async with client_for(rpc_handler({"toggle_pin": entry})) as client:
            assert await client.toggle_pin("a") == entry
        async with client_for(rpc_handler({"toggle_pin": None})) as client:
            assert await client.toggle_pin("a") is None

    @pytest.mark.asyncio
    async def test_toggle_pin_rejects_non_object(self):
        async with client_for(rpc_handler({"toggle_pin": [1, 2]})) as client:
            with pytest.raises(TransportFailure, match="expected object"):
                await client.toggle_pin("a")

    @pytest.mark.asyncio
    async def test_get_history_rejects_non_list(self):
        async with client_for(rpc_handler({"get_history": {"a": 1}})) as client:
            with pytest.raises(TransportFailure) as exc_info:
                await client.get_history()
        assert exc_info.value.method == "get_history"

    @pytest.mark.asyncio
    async def test_rpc_error_is_transport_failure(self):
        async with client_for(rpc_handler({})) as client:
            with pytest.raises(TransportFailure, match="RPC error -32601"):
                await client.clear_history()

    @pytest.mark.asyncio
    async def test_unparsable_body(self):
        def handler(request):
            return httpx.Response(200, text="<html>oops</html>")

        async with client_for(handler) as client:
            with pytest.raises(TransportFailure, match="Invalid backend response"):
                await client.get_history()

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        async with client_for(handler) as client:
            with pytest.raises(TransportFailure, match="Connection failed") as exc_info:
                await client.paste_item("x")
        assert exc_info.value.method == "paste_item"

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        async with client_for(handler) as client:
            with pytest.raises(TransportFailure, match="timed out"):
                await client.get_history()

    @pytest.mark.asyncio
    async def test_requires_context_manager(self):
        client = BackendClient(URL)
        with pytest.raises(TransportFailure, match="not initialized"):
            await client.get_history()

    def test_url_trailing_slash_stripped(self):
        assert BackendClient(URL + "/").url == URL


def sse_client(body: str, status: int = 200) -> BackendClient:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/rpc/events"
        assert request.headers["accept"] == "text/event-stream"
        return httpx.Response(
            status, content=body.encode(), headers={"content-type": "text/event-stream"}
        )

    return client_for(handler)


class TestIterEvents:
    """Tests for the SSE push event reader."""

    @pytest.mark.asyncio
    async def test_parses_events(self, wire_entry):
        entry = wire_entry("a")
        body = (
            f"event: entry-added\ndata: {json.dumps({'type': 'entry-added', 'data': entry})}\n\n"
            ": keep-alive comment\n\n"
            'data: {"type": "history-cleared"}\n\n'
        )
        async with sse_client(body) as client:
            events = [e async for e in client.iter_events()]

        assert events == [{"type": "entry-added", "data": entry}, {"type": "history-cleared"}]

    @pytest.mark.asyncio
    async def test_multiline_data_joined(self):
        body = 'data: {"type":\ndata: "window-shown"}\n\n'
        async with sse_client(body) as client:
            events = [e async for e in client.iter_events()]

        assert events == [{"type": "window-shown"}]

    @pytest.mark.asyncio
    async def test_trailing_event_flushed(self):
        body = 'data: {"type": "history-cleared"}'
        async with sse_client(body) as client:
            events = [e async for e in client.iter_events()]

        assert events == [{"type": "history-cleared"}]

    @pytest.mark.asyncio
    async def test_malformed_event_skipped(self, caplog):
        body = 'data: not json\n\ndata: {"no_type": 1}\n\ndata: {"type": "window-shown"}\n\n'
        async with sse_client(body) as client:
            with caplog.at_level(logging.WARNING, logger="clipdeck.backend.client"):
                events = [e async for e in client.iter_events()]

        assert events == [{"type": "window-shown"}]
        assert caplog.text.count("Skipping malformed push event") == 2

    @pytest.mark.asyncio
    async def test_non_200_raises(self):
        async with sse_client("unavailable", status=503) as client:
            with pytest.raises(TransportFailure, match="503"):
                async for _ in client.iter_events():
                    pass
