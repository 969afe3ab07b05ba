"""Configuration loading and validation."""

from clipdeck.config.loader import load_config
from clipdeck.config.schema import (
    BackendConfig,
    Config,
    CustomKaomoji,
    GifConfig,
    GridConfig,
    HistoryConfig,
    SearchConfig,
    SearchMode,
)

__all__ = [
    "BackendConfig",
    "Config",
    "CustomKaomoji",
    "GifConfig",
    "GridConfig",
    "HistoryConfig",
    "SearchConfig",
    "SearchMode",
    "load_config",
]
