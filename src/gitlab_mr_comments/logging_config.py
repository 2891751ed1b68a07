"""Logging configuration for the GitLab MR Comments server.

All diagnostics go to stderr so they never mix with the stdio
transport's protocol framing on stdout.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gitlab_mr_comments.config import Config

# Package logger name
LOGGER_NAME = "gitlab_mr_comments"

# Log format
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

# HTTP libraries log one line per request at INFO; only show them when debugging
HTTP_LIBRARY_LOGGERS = ("httpx", "httpcore")

# Track if logging has been set up to prevent duplicate handlers
_logging_configured = False


def _stderr_handler(level: int) -> logging.Handler:
    """Create a formatted stderr handler at the given level."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(config: Config) -> None:
    """Configure the package logger from the application config.

    Installs a single stderr handler on first call; later calls only
    change levels. Records do not propagate to the root logger.

    Args:
        config: Application configuration containing log_level setting
    """
    global _logging_configured

    # Get the numeric log level
    log_level = getattr(logging, config.log_level.value)

    # Get or create the package logger
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)

    # Quiet per-request HTTP logs outside DEBUG
    library_level = logging.DEBUG if log_level <= logging.DEBUG else logging.WARNING
    for name in HTTP_LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)

    # Prevent duplicate handler setup
    if _logging_configured:
        # Just update the handler levels if already configured
        for handler in logger.handlers:
            handler.setLevel(log_level)
        return

    # Remove any existing handlers to prevent duplicates
    logger.handlers.clear()
    logger.addHandler(_stderr_handler(log_level))

    # Prevent propagation to root logger
    logger.propagate = False

    _logging_configured = True

    logger.debug("Logging configured with level %s", config.log_level.value)


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the package namespace.

    Module names already inside the package are used as-is; anything
    else becomes a child of the package logger.
    """
    if name.startswith(LOGGER_NAME):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def reset_logging() -> None:
    """Undo setup_logging so tests can configure it again."""
    global _logging_configured
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    # Hand the HTTP library loggers back to their defaults
    for name in HTTP_LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET)
    _logging_configured = False
