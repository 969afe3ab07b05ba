"""Entry point for the clipdeck command."""

import asyncio
import logging
from pathlib import Path

from dotenv import load_dotenv

from clipdeck.cli.arg_parser import parse_args
from clipdeck.config.loader import load_config
from clipdeck.config.schema import Config
from clipdeck.core.errors import ConfigError
from clipdeck.core.log import configure_logging
from clipdeck.display import get_console
from clipdeck.pickers.host import PickerTab

# Load .env file if present
load_dotenv()

logger = logging.getLogger(__name__)


def resolve_config(config_path: Path | None, url: str | None) -> Config:
    """Load config and apply command-line overrides.

    Raises:
        ConfigError: If the config cannot be loaded or the override is invalid.
    """
    config = load_config(config_path)
    if url is None:
        return config
    try:
        backend = config.backend.model_validate({**config.backend.model_dump(), "url": url})
    except ValueError as e:
        raise ConfigError(f"Invalid --url: {e}") from e
    return config.model_copy(update={"backend": backend})


def main() -> None:
    """Entry point for the clipdeck CLI."""
    args = parse_args()
    configure_logging(logging.DEBUG if args.verbose else logging.WARNING, args.log_file)
    console = get_console()

    try:
        config = resolve_config(args.config, args.url)
    except ConfigError as e:
        console.print(f"[red]Config error:[/] {e.message}")
        raise SystemExit(1) from e
    logger.debug("Backend: %s", config.backend.url)

    try:
        if args.command == "history":
            from clipdeck.cli.commands import cmd_history

            exit_code = asyncio.run(cmd_history(
                config,
                limit=args.limit,
                as_json=args.as_json,
                search=args.search,
                regex=args.regex,
            ))
        elif args.command == "clear":
            from clipdeck.cli.commands import cmd_clear

            exit_code = asyncio.run(cmd_clear(config))
        elif args.command == "watch":
            from clipdeck.cli.commands import cmd_watch

            exit_code = asyncio.run(cmd_watch(config))
        else:
            from clipdeck.cli.picker_app import run_picker

            exit_code = asyncio.run(run_picker(
                config,
                initial_tab=PickerTab(args.tab),
                gifs=not args.no_gifs,
            ))
    except KeyboardInterrupt:
        exit_code = 130
    raise SystemExit(exit_code)
