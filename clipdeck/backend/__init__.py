"""Backend request/event contract."""

from clipdeck.backend.client import BackendClient
from clipdeck.backend.interfaces import HistoryBackend, PasteBackend
from clipdeck.backend.protocol import ParseError, Request, Response

__all__ = [
    "BackendClient",
    "HistoryBackend",
    "PasteBackend",
    "ParseError",
    "Request",
    "Response",
]
