"""Shared utility functions for clipdeck.

These are common operations used across multiple modules that don't
fit into more specific categories.
"""

from typing import Any


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge dicts. Override values take precedence.

    Merge rules:
    - Dicts are recursively merged
    - Lists are REPLACED (override wins completely), so a project config can
      clear a list such as `custom_kaomojis` set globally
    - Other values are overwritten

    Args:
        base: Base dictionary.
        override: Dictionary with values to overlay.

    Returns:
        New merged dictionary (original dicts not modified).
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def clamp(value: int, low: int, high: int) -> int:
    """Clamp value into [low, high]. Assumes low <= high."""
    return max(low, min(value, high))
