"""Pydantic models for clipdeck configuration validation."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from clipdeck.core.constants import DEFAULT_BACKEND_PORT


class SearchMode(str, Enum):
    """How a picker query is matched against item text."""

    SUBSTRING = "substring"
    REGEX = "regex"


class BackendConfig(BaseModel):
    """Where the clipboard backend service listens.

    Example in config.json:
        "backend": {"url": "http://127.0.0.1:7345", "request_timeout": 10}
    """

    model_config = ConfigDict(extra="forbid")

    url: str = f"http://127.0.0.1:{DEFAULT_BACKEND_PORT}"
    """Base URL of the backend JSON-RPC endpoint. Push events are read from <url>/events."""

    request_timeout: float = Field(default=30.0, gt=0)
    """Timeout in seconds for request/response round-trips."""

    @field_validator("url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"backend url must be http(s), got: {v!r}")
        return v.rstrip("/")


class HistoryConfig(BaseModel):
    """History mirror settings."""

    model_config = ConfigDict(extra="forbid")

    max_size: int = Field(default=50, ge=1)
    """Capacity declared by the backend. Informational: eviction is backend-owned."""

    dedup_window: int = Field(default=5, ge=0, le=50)
    """How many leading unpinned entries a pushed entry is compared against."""


class GridConfig(BaseModel):
    """Keyboard navigation and layout settings shared by all pickers."""

    model_config = ConfigDict(extra="forbid")

    page_rows: int = Field(default=3, ge=1)
    """Rows moved by PageUp/PageDown."""

    focus_retries: int = Field(default=1, ge=0, le=10)
    """Extra event-loop ticks to wait for a virtualized cell before giving up on focus."""

    history_columns: int = Field(default=1, ge=1)
    emoji_columns: int = Field(default=8, ge=1)
    symbol_columns: int = Field(default=8, ge=1)
    kaomoji_columns: int = Field(default=3, ge=1)
    gif_columns: int = Field(default=2, ge=1)


class SearchConfig(BaseModel):
    """Incremental search settings."""

    model_config = ConfigDict(extra="forbid")

    debounce_ms: int = Field(default=300, ge=0)
    """Delay before a remote (GIF) search request is sent."""

    default_mode: SearchMode = SearchMode.SUBSTRING
    """Initial match mode for the history search."""


class GifConfig(BaseModel):
    """Tenor GIF search settings."""

    model_config = ConfigDict(extra="forbid")

    api_base: str = "https://g.tenor.com/v1"
    """Tenor v1 API base URL."""

    api_key_env: str = "TENOR_API_KEY"
    """Environment variable holding the Tenor API key."""

    limit: int = Field(default=30, ge=1, le=50)
    """Results per trending/search request."""


class CustomKaomoji(BaseModel):
    """A user-defined kaomoji shown under the Custom category."""

    model_config = ConfigDict(extra="forbid")

    text: str = Field(min_length=1)
    category: str = "Custom"
    keywords: list[str] = []


class Config(BaseModel):
    """Root configuration model."""

    model_config = ConfigDict(extra="forbid")

    backend: BackendConfig = BackendConfig()
    history: HistoryConfig = HistoryConfig()
    grid: GridConfig = GridConfig()
    search: SearchConfig = SearchConfig()
    gifs: GifConfig = GifConfig()
    custom_kaomojis: list[CustomKaomoji] = []
