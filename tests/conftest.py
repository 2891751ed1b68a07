"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from gitlab_mr_comments.config import Config, LogLevel, TransportMode

GITLAB_URL = "https://gitlab.example.com"
GITLAB_TOKEN = "glpat-test-token"

GITLAB_ENV_VARS = (
    "GITLAB_HOST",
    "GITLAB_BASE_URL",
    "GITLAB_TOKEN",
    "GITLAB_PERSONAL_ACCESS_TOKEN",
    "GITLAB_SSL_VERIFY",
)


@pytest.fixture(autouse=True)
def clean_gitlab_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make sure no GitLab settings leak in from the outer environment."""
    for name in GITLAB_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def gitlab_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Configure GitLab settings through the environment."""
    monkeypatch.setenv("GITLAB_HOST", GITLAB_URL)
    monkeypatch.setenv("GITLAB_TOKEN", GITLAB_TOKEN)


@pytest.fixture
def default_config() -> Config:
    """Create a default configuration for testing."""
    return Config()


@pytest.fixture
def sse_config() -> Config:
    """Create an SSE configuration for testing."""
    return Config(
        app_name="Test MCP Server",
        log_level=LogLevel.DEBUG,
        transport_mode=TransportMode.SSE,
        bind_host="127.0.0.1",
        bind_port=8080,
    )


def _build_note(**overrides: Any) -> dict[str, Any]:
    note: dict[str, Any] = {
        "body": "Fix this",
        "system": False,
        "resolvable": True,
        "resolved": False,
        "position": {"new_path": "a.ts", "new_line": 5},
        "author": {"username": "joe"},
        "created_at": "2024-01-01T00:00:00Z",
    }
    note.update(overrides)
    return note


@pytest.fixture
def make_note() -> Callable[..., dict[str, Any]]:
    """Factory for GitLab note payloads with sensible defaults."""
    return _build_note
