"""JSON-RPC 2.0 framing for backend calls and parsing of SSE push events."""

import json
from dataclasses import dataclass
from typing import Any

from clipdeck.core.errors import ClipdeckError

JSONRPC_VERSION = "2.0"


class ParseError(ClipdeckError):
    """Raised when a JSON-RPC response or push event cannot be parsed."""


@dataclass
class Request:
    """One backend call. An id of None makes it a notification."""

    jsonrpc: str
    method: str
    params: dict[str, Any] | None = None
    id: str | int | None = None


@dataclass
class Response:
    """Backend reply carrying either ``result`` or an ``error`` object."""

    jsonrpc: str
    id: str | int | None
    result: Any | None = None
    error: dict[str, Any] | None = None


def serialize_request(request: Request) -> str:
    """Compact single-line JSON for a request body. Unset params and id are omitted."""
    data: dict[str, Any] = {"jsonrpc": request.jsonrpc, "method": request.method}
    if request.params is not None:
        data["params"] = request.params
    if request.id is not None:
        data["id"] = request.id
    return json.dumps(data, separators=(",", ":"))


def _decode_object(text: str, what: str) -> dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid {what} JSON: {e}") from e
    if not isinstance(data, dict):
        raise ParseError(f"{what.capitalize()} must be a JSON object, got {type(data).__name__}")
    return data


def parse_response(text: str) -> Response:
    """Parse a backend reply body.

    Raises:
        ParseError: If the body is not a well-formed JSON-RPC 2.0 response.
    """
    data = _decode_object(text, "response")

    if data.get("jsonrpc") != JSONRPC_VERSION:
        raise ParseError(f"Unsupported jsonrpc version: {data.get('jsonrpc')!r}")
    if "id" not in data:
        raise ParseError("Response has no 'id'")
    response_id = data["id"]
    if response_id is not None and not isinstance(response_id, (str, int)):
        raise ParseError(f"Response id has invalid type {type(response_id).__name__}")

    # Exactly one of result/error
    if ("result" in data) == ("error" in data):
        raise ParseError("Response must carry exactly one of 'result' or 'error'")

    error = data.get("error")
    if error is not None and not (
        isinstance(error, dict) and "code" in error and "message" in error
    ):
        raise ParseError(f"Malformed error object: {error!r}")

    return Response(
        jsonrpc=JSONRPC_VERSION,
        id=response_id,
        result=data.get("result"),
        error=error,
    )


def parse_event(text: str) -> dict[str, Any]:
    """Parse the data payload of one SSE push event.

    Raises:
        ParseError: If the payload is not a JSON object with a string "type".
    """
    event = _decode_object(text, "event")
    if not isinstance(event.get("type"), str):
        raise ParseError("Event must have a string 'type' field")
    return event
