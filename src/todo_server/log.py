"""Logging configuration for the todo_server package."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

DEFAULT_LOG_LEVEL = "INFO"

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Libraries known to be noisy
NOISY_LIBRARIES = ["uvicorn.access", "httpx", "httpcore"]


def setup_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Configure the root logger to write to stdout at the given level.

    Invalid levels fall back to INFO with a warning on stderr.
    """
    level_name = level.upper()
    if level_name not in VALID_LOG_LEVELS:
        print(
            f"WARNING: Invalid LOG_LEVEL '{level}'. "
            f"Defaulting to {DEFAULT_LOG_LEVEL}. "
            f"Valid levels are: {', '.join(VALID_LOG_LEVELS)}",
            file=sys.stderr,
        )
        level_name = DEFAULT_LOG_LEVEL

    root_logger = logging.getLogger()
    root_logger.setLevel(level_name)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(handler)

    for name in NOISY_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)
