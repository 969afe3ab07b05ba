"""Fixtures for CLI tests: a recording console and a mock backend transport."""

import json
from io import StringIO

import httpx
import pytest
from rich.console import Console

from clipdeck.backend.client import BackendClient
from clipdeck.display import console as console_module

BACKEND_URL = "http://backend.test/rpc"


@pytest.fixture
def output(monkeypatch) -> StringIO:
    """Route the shared console into a buffer and return the buffer."""
    buffer = StringIO()
    console = Console(file=buffer, width=160, color_system=None, force_terminal=False)
    monkeypatch.setattr(console_module, "_console", console)
    return buffer


def backend_transport(entries: list, sse_body: str = "", sse_status: int = 200):
    """MockTransport answering get_history over RPC and GET <url>/events with SSE."""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            assert request.url.path == "/rpc/events"
            return httpx.Response(
                sse_status,
                content=sse_body.encode(),
                headers={"content-type": "text/event-stream"},
            )
        body = json.loads(request.content)
        return httpx.Response(
            200, json={"jsonrpc": "2.0", "id": body["id"], "result": entries}
        )

    return httpx.MockTransport(handler)


@pytest.fixture
def make_backend_client():
    def factory(entries: list, sse_body: str = "", sse_status: int = 200) -> BackendClient:
        return BackendClient(BACKEND_URL, transport=backend_transport(entries, sse_body, sse_status))

    return factory
