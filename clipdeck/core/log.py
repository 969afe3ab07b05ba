"""Logging setup for the clipdeck namespace logger."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

ROOT_LOGGER_NAME = "clipdeck"

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(
    level: int = logging.WARNING,
    log_file: Path | None = None,
    file_level: int = logging.INFO,
) -> Path | None:
    """Configure console (and optionally file) logging for clipdeck.

    Console output goes to stderr so it never interleaves with the picker UI
    on stdout. The file handler rotates at 5MB with 3 backups.

    Args:
        level: Logging level for stderr output (default WARNING).
        log_file: Optional path of a rotating log file. Parent directory is
            created if missing.
        file_level: Logging level for file output (default INFO).

    Returns:
        The log file path if file logging was configured, else None.
    """
    clipdeck_logger = logging.getLogger(ROOT_LOGGER_NAME)

    # Remove any existing handlers to avoid duplicates on reconfigure
    for handler in list(clipdeck_logger.handlers):
        clipdeck_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%H:%M:%S"))
    clipdeck_logger.addHandler(console_handler)

    effective_level = level
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        clipdeck_logger.addHandler(file_handler)
        effective_level = min(level, file_level)

    clipdeck_logger.setLevel(effective_level)
    clipdeck_logger.propagate = False

    if log_file is not None:
        clipdeck_logger.info("File logging configured: %s", log_file)
    return log_file
