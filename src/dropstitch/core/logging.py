"""Logging infrastructure for Dropstitch."""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

# Log level mapping for environment variable
LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

ROOT_LOGGER_NAME = "dropstitch"

# Default log file location
DEFAULT_LOG_DIR = Path.home() / ".dropstitch" / "logs"
DEFAULT_LOG_FILE = DEFAULT_LOG_DIR / "dropstitch.log"

# Log file settings
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB per file
BACKUP_COUNT = 5


def get_log_level_from_env() -> int:
    """Get logging level from DROPSTITCH_LOG_LEVEL environment variable.

    Returns:
        Logging level constant. Defaults to WARNING if not set or invalid.
    """
    level_str = os.environ.get("DROPSTITCH_LOG_LEVEL", "WARNING").upper()
    return LOG_LEVEL_MAP.get(level_str, logging.WARNING)


def setup_logging(
    level: int | None = None,
    log_file: Path | None = None,
    file_logging: bool = False,
) -> None:
    """Configure logging for Dropstitch.

    The console level is resolved from:
    1. Explicit level parameter (highest priority)
    2. DROPSTITCH_LOG_LEVEL environment variable
    3. Default level (WARNING)

    Console output always goes to stderr so it never mixes with the
    command's own output. File logging is opt-in and rotates.

    Args:
        level: Logging level. If None, uses env var or default (WARNING).
        log_file: Custom file path for log output. If None, uses default.
        file_logging: Also write logs to a rotating file.
    """
    handlers: list[logging.Handler] = []

    if level is None:
        level = get_log_level_from_env()

    if file_logging:
        if log_file is None:
            log_file = DEFAULT_LOG_FILE

        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=MAX_LOG_SIZE,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )
        )
        # File handler always logs at DEBUG level to capture everything
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)

    handlers.append(
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            show_time=False,
            show_path=False,
            level=level,
        )
    )

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG if file_logging else level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    for handler in handlers:
        root_logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name.

    Args:
        name: The name for the logger (will be prefixed with 'dropstitch.').

    Returns:
        A configured Logger instance.
    """
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
