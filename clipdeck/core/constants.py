"""Core constants and paths for clipdeck.

Single source of truth for global paths. All modules should import from here
instead of hardcoding paths like `Path.home() / ".clipdeck"`.
"""

from pathlib import Path

CLIPDECK_DIR_NAME = ".clipdeck"

DEFAULT_BACKEND_PORT = 7345


def get_clipdeck_dir() -> Path:
    """Get ~/.clipdeck (global config directory)."""
    return Path.home() / CLIPDECK_DIR_NAME

