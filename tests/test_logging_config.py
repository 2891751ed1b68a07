"""Tests for logging configuration module."""

from __future__ import annotations

import logging
import sys

import pytest

from gitlab_mr_comments.config import Config, LogLevel
from gitlab_mr_comments.logging_config import (
    HTTP_LIBRARY_LOGGERS,
    LOGGER_NAME,
    get_logger,
    reset_logging,
    setup_logging,
)


@pytest.fixture(autouse=True)
def reset_logging_state() -> None:
    """Reset logging state before each test."""
    reset_logging()


class TestLoggingSetup:
    """Tests for logging setup."""

    def test_setup_logging_creates_stderr_handler(self) -> None:
        """Test that setup_logging logs to stderr, never stdout."""
        setup_logging(Config(log_level=LogLevel.DEBUG))

        logger = logging.getLogger(LOGGER_NAME)
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG
        handler = logger.handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert handler.stream is sys.stderr
        assert logger.propagate is False

    def test_setup_logging_idempotent(self) -> None:
        """Test that setup_logging is idempotent."""
        config = Config(log_level=LogLevel.DEBUG)

        setup_logging(config)
        setup_logging(config)
        setup_logging(config)

        logger = logging.getLogger(LOGGER_NAME)
        assert len(logger.handlers) == 1

    def test_setup_logging_updates_level(self) -> None:
        """Test that setup_logging updates level on subsequent calls."""
        setup_logging(Config(log_level=LogLevel.DEBUG))
        logger = logging.getLogger(LOGGER_NAME)
        assert logger.level == logging.DEBUG

        setup_logging(Config(log_level=LogLevel.INFO))
        assert logger.level == logging.INFO
        assert logger.handlers[0].level == logging.INFO


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger_returns_child_logger(self) -> None:
        """Test that get_logger returns a child logger."""
        logger = get_logger("test_module")
        assert logger.name == f"{LOGGER_NAME}.test_module"

    def test_get_logger_with_package_name(self) -> None:
        """Test that get_logger handles full package name."""
        logger = get_logger(f"{LOGGER_NAME}.submodule")
        assert logger.name == f"{LOGGER_NAME}.submodule"

    def test_get_logger_consistent(self) -> None:
        """Test that get_logger returns same logger for same name."""
        assert get_logger("test_module") is get_logger("test_module")


class TestHttpLibraryLoggers:
    """Tests for httpx/httpcore log levels."""

    def test_quiet_unless_debugging(self) -> None:
        """Test per-request HTTP logs are hidden at INFO."""
        setup_logging(Config(log_level=LogLevel.INFO))

        for name in HTTP_LIBRARY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_verbose_when_debugging(self) -> None:
        """Test per-request HTTP logs are shown at DEBUG."""
        setup_logging(Config(log_level=LogLevel.DEBUG))

        for name in HTTP_LIBRARY_LOGGERS:
            assert logging.getLogger(name).level == logging.DEBUG


class TestResetLogging:
    """Tests for reset_logging."""

    def test_reset_restores_defaults(self) -> None:
        """Test reset removes handlers and re-enables propagation."""
        setup_logging(Config(log_level=LogLevel.ERROR))

        reset_logging()

        logger = logging.getLogger(LOGGER_NAME)
        assert logger.handlers == []
        assert logger.level == logging.NOTSET
        assert logger.propagate is True
