"""Shared Rich Console instance for clipdeck."""

from __future__ import annotations

import sys

from rich.console import Console

_console: Console | None = None


def get_console() -> Console:
    """Get the shared Console instance.

    Creates the console on first access. Output is forced to a terminal only
    when stdout is one, so piped `clipdeck history` output stays plain.
    """
    global _console
    if _console is None:
        _console = Console(
            highlight=False,
            markup=True,
            force_terminal=sys.stdout.isatty() or None,
            legacy_windows=False,
        )
    return _console


def set_console(console: Console) -> None:
    """Set a custom Console instance.

    Useful for testing or custom configurations.
    """
    global _console
    _console = console
