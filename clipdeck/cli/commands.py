"""Non-interactive CLI commands: history listing, clearing and push event watching.

Each command returns a process exit code: 0 on success, 1 on failure.
"""

from __future__ import annotations

import asyncio
import logging

from rich.console import Console

from clipdeck.backend.client import BackendClient
from clipdeck.config.schema import Config, SearchMode
from clipdeck.core.errors import ClipdeckError
from clipdeck.display import Theme, format_event, get_console, history_table
from clipdeck.events.hub import EventQueue, PushEventHub
from clipdeck.events.types import HISTORY_EVENTS, WINDOW_SHOWN
from clipdeck.filtering.incremental import filter_items
from clipdeck.history.cache import HistoryCache
from clipdeck.history.types import ClipboardEntry

logger = logging.getLogger(__name__)


def make_client(config: Config) -> BackendClient:
    return BackendClient(config.backend.url, timeout=config.backend.request_timeout)


def select_entries(
    entries: tuple[ClipboardEntry, ...],
    *,
    limit: int | None = None,
    search: str | None = None,
    regex: bool = False,
) -> list[ClipboardEntry]:
    """Apply the history command's --search and --limit options."""
    selected = list(entries)
    if search:
        mode = SearchMode.REGEX if regex else SearchMode.SUBSTRING
        selected = filter_items(selected, search, mode, lambda e: e.searchable_text)
    if limit is not None:
        selected = selected[:limit]
    return selected


async def cmd_history(
    config: Config,
    limit: int | None = None,
    as_json: bool = False,
    search: str | None = None,
    regex: bool = False,
    client: BackendClient | None = None,
) -> int:
    """Fetch and print the history."""
    console = get_console()
    async with client or make_client(config) as backend:
        cache = HistoryCache(backend, dedup_window=config.history.dedup_window)
        await cache.fetch()

    if cache.last_error is not None:
        console.print(f"[red]Error:[/] {cache.last_error.message}")
        return 1

    entries = select_entries(cache.items, limit=limit, search=search, regex=regex)
    if as_json:
        console.print_json(data=[entry.to_wire() for entry in entries])
    elif not entries:
        console.print("No entries.", style="dim")
    else:
        console.print(history_table(entries))
    return 0


async def _print_events(queue: EventQueue, console: Console, theme: Theme) -> None:
    while True:
        event = await queue.get()
        console.print(format_event(event, theme))


async def cmd_watch(config: Config, client: BackendClient | None = None) -> int:
    """Mirror the history and print push events until the stream ends."""
    console = get_console()
    theme = Theme()
    hub = PushEventHub()

    async with client or make_client(config) as backend:
        pump = asyncio.create_task(hub.pump(backend.iter_events()))
        async with hub.subscription(*HISTORY_EVENTS, WINDOW_SHOWN) as queue:
            cache = HistoryCache(backend, hub=hub, dedup_window=config.history.dedup_window)
            async with cache:
                if cache.last_error is not None:
                    console.print(f"[{theme.warning}]Initial fetch failed:[/] {cache.last_error.message}")
                else:
                    console.print(f"Watching {backend.url} ({len(cache)} entries)", style="dim")

                printer = asyncio.create_task(_print_events(queue, console, theme))
                try:
                    await asyncio.wait({pump, printer}, return_when=asyncio.FIRST_COMPLETED)
                finally:
                    printer.cancel()
                    pump.cancel()
                    await asyncio.gather(printer, pump, return_exceptions=True)

                # Events published just before the stream ended
                while not queue.empty():
                    console.print(format_event(queue.get_nowait(), theme))

    if pump.cancelled():
        return 0
    error = pump.exception()
    if isinstance(error, ClipdeckError):
        console.print(f"[red]Event stream failed:[/] {error.message}")
        return 1
    if error is not None:
        raise error
    console.print("Event stream closed.", style="dim")
    return 0


async def cmd_clear(config: Config, client: BackendClient | None = None) -> int:
    """Clear unpinned history entries."""
    console = get_console()
    async with client or make_client(config) as backend:
        cache = HistoryCache(backend, dedup_window=config.history.dedup_window)
        await cache.fetch()
        if cache.last_error is None:
            await cache.clear()

    if cache.last_error is not None:
        console.print(f"[red]Error:[/] {cache.last_error.message}")
        return 1
    console.print(f"Cleared history ({len(cache)} pinned entries kept).")
    return 0
