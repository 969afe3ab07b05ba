"""Clipboard history types and wire (de)serialization."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Union


@dataclass(frozen=True)
class TextContent:
    """Plain text clipboard content."""

    text: str


@dataclass(frozen=True)
class RichTextContent:
    """Rich text with an HTML rendition and its plain-text fallback."""

    plain: str
    html: str


@dataclass(frozen=True)
class ImageContent:
    """Image content as base64-encoded PNG data."""

    base64: str
    width: int
    height: int


ClipboardContent = Union[TextContent, RichTextContent, ImageContent]


class ContentCategory(str, Enum):
    """Detected kind of a clipboard entry, used for badges and filtering."""

    URL = "URL"
    EMAIL = "Email"
    COLOR = "Color"
    PHONE = "Phone"
    CODE = "Code"
    IMAGE = "Image"
    TEXT = "Text"


_URL_RE = re.compile(r"^(?:https?|ftp)://\S+$", re.IGNORECASE)
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_HEX_COLOR_RE = re.compile(r"^#([0-9a-f]{3}){1,2}$", re.IGNORECASE)
_RGB_COLOR_RE = re.compile(r"^rgba?\(\s*\d{1,3}\s*,\s*\d{1,3}\s*,\s*\d{1,3}", re.IGNORECASE)
_PHONE_RE = re.compile(r"^[+]?[(]?[0-9]{1,4}[)]?[-\s./0-9]{6,15}$")
_CODE_RE = re.compile(
    r"[{}\[\]();].*[{}\[\]();]"
    r"|^(import |export |const |let |var |function |class |def |fn |pub |if \(|for \(|while \(|</?[a-z][\s\S]*>)",
    re.IGNORECASE | re.MULTILINE,
)


def content_from_wire(data: dict[str, Any]) -> ClipboardContent:
    """Parse a `{"type": ..., "data": ...}` content object.

    Raises:
        ValueError: If the type tag is unknown or the payload is malformed.
    """
    if not isinstance(data, dict):
        raise ValueError(f"content must be an object, got {type(data).__name__}")
    kind = data.get("type")
    payload = data.get("data")
    if kind == "Text":
        if not isinstance(payload, str):
            raise ValueError("Text content data must be a string")
        return TextContent(text=payload)
    if kind == "RichText":
        if not isinstance(payload, dict):
            raise ValueError("RichText content data must be an object")
        return RichTextContent(plain=str(payload.get("plain", "")), html=str(payload.get("html", "")))
    if kind == "Image":
        if not isinstance(payload, dict):
            raise ValueError("Image content data must be an object")
        try:
            width = int(payload.get("width", 0))
            height = int(payload.get("height", 0))
        except (TypeError, OverflowError) as e:
            raise ValueError(f"Image dimensions must be integers: {e}") from e
        return ImageContent(base64=str(payload.get("base64", "")), width=width, height=height)
    raise ValueError(f"Unknown content type: {kind!r}")


def content_to_wire(content: ClipboardContent) -> dict[str, Any]:
    """Serialize content back to its tagged wire form."""
    if isinstance(content, TextContent):
        return {"type": "Text", "data": content.text}
    if isinstance(content, RichTextContent):
        return {"type": "RichText", "data": {"plain": content.plain, "html": content.html}}
    return {
        "type": "Image",
        "data": {"base64": content.base64, "width": content.width, "height": content.height},
    }


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError) as e:
            raise ValueError(f"timestamp out of range: {value!r}") from e
    if not isinstance(value, str):
        raise ValueError(f"timestamp must be a string or number, got {type(value).__name__}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class ClipboardEntry:
    """A single clipboard history entry as mirrored from the backend."""

    id: str
    content: ClipboardContent
    timestamp: datetime
    pinned: bool = False
    favorited: bool = False
    preview: str = ""

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> ClipboardEntry:
        """Build an entry from the backend's JSON form.

        Raises:
            ValueError: If required fields are missing or malformed.
        """
        if not isinstance(data, dict):
            raise ValueError(f"entry must be an object, got {type(data).__name__}")
        entry_id = data.get("id")
        if not isinstance(entry_id, str) or not entry_id:
            raise ValueError("entry id must be a non-empty string")
        if "content" not in data or "timestamp" not in data:
            raise ValueError(f"entry {entry_id!r} is missing content or timestamp")
        return cls(
            id=entry_id,
            content=content_from_wire(data["content"]),
            timestamp=_parse_timestamp(data["timestamp"]),
            pinned=bool(data.get("pinned", False)),
            favorited=bool(data.get("favorited", False)),
            preview=str(data.get("preview", "")),
        )

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the backend's JSON form."""
        return {
            "id": self.id,
            "content": content_to_wire(self.content),
            "timestamp": self.timestamp.isoformat(),
            "pinned": self.pinned,
            "favorited": self.favorited,
            "preview": self.preview,
        }

    @property
    def searchable_text(self) -> str | None:
        """Text used by search. Images are never text-searchable."""
        if isinstance(self.content, TextContent):
            return self.content.text
        if isinstance(self.content, RichTextContent):
            return self.content.plain
        return None

    @property
    def category(self) -> ContentCategory:
        """Detect what kind of content this entry holds."""
        if isinstance(self.content, ImageContent):
            return ContentCategory.IMAGE
        trimmed = (self.searchable_text or "").strip()
        if not trimmed:
            return ContentCategory.TEXT
        if _URL_RE.match(trimmed):
            return ContentCategory.URL
        if _EMAIL_RE.match(trimmed):
            return ContentCategory.EMAIL
        if _HEX_COLOR_RE.match(trimmed) or _RGB_COLOR_RE.match(trimmed):
            return ContentCategory.COLOR
        if _PHONE_RE.match(trimmed) and len(re.sub(r"\D", "", trimmed)) >= 7:
            return ContentCategory.PHONE
        if _CODE_RE.search(trimmed):
            return ContentCategory.CODE
        return ContentCategory.TEXT

    @property
    def display_text(self) -> str:
        """Single-line label for list rendering."""
        if self.preview:
            return self.preview
        if isinstance(self.content, ImageContent):
            return f"[image {self.content.width}x{self.content.height}]"
        text = self.searchable_text or ""
        return " ".join(text.split())


def entries_from_wire(payload: Any) -> list[ClipboardEntry]:
    """Parse a list of wire entries.

    Raises:
        ValueError: If the payload is not a list or any entry is malformed.
    """
    if not isinstance(payload, list):
        raise ValueError(f"history payload must be a list, got {type(payload).__name__}")
    return [ClipboardEntry.from_wire(item) for item in payload]
