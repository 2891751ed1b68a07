"""Tests for the command-line interface."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

import pytest
from typer.testing import CliRunner

from gitlab_mr_comments import __version__, cli
from gitlab_mr_comments.config import TransportMode
from gitlab_mr_comments.logging_config import reset_logging

if TYPE_CHECKING:
    from pathlib import Path

    from gitlab_mr_comments.config import Config

runner = CliRunner()


@pytest.fixture(autouse=True)
def reset_logging_state() -> Iterator[None]:
    """Reset logging state around each CLI run."""
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def started(monkeypatch: pytest.MonkeyPatch) -> list[Config]:
    """Replace the server loop with a recorder."""
    configs: list[Config] = []

    async def fake_run_server(config: Config) -> None:
        configs.append(config)

    monkeypatch.setattr(cli, "_run_server", fake_run_server)
    return configs


class TestVersion:
    """Tests for version output."""

    def test_version_command(self) -> None:
        """Test the version command prints the package version."""
        result = runner.invoke(cli.app, ["version"])

        assert result.exit_code == 0
        assert f"gitlab-mr-comments version {__version__}" in result.output

    def test_version_option(self) -> None:
        """Test --version prints and exits."""
        result = runner.invoke(cli.app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output


class TestServe:
    """Tests for the serve command."""

    def test_defaults_to_stdio(self, started: list[Config]) -> None:
        """Test the server starts in stdio mode by default."""
        result = runner.invoke(cli.app, ["serve"])

        assert result.exit_code == 0
        assert len(started) == 1
        assert started[0].transport_mode == TransportMode.STDIO

    def test_cli_overrides(self, started: list[Config]) -> None:
        """Test CLI options reach the configuration."""
        result = runner.invoke(
            cli.app,
            ["serve", "--transport", "sse", "--host", "0.0.0.0", "--port", "9000"],
        )

        assert result.exit_code == 0
        config = started[0]
        assert config.transport_mode == TransportMode.SSE
        assert config.bind_host == "0.0.0.0"
        assert config.bind_port == 9000

    def test_config_file(self, started: list[Config], tmp_path: Path) -> None:
        """Test settings are read from a JSON file."""
        config_file = tmp_path / "config.json"
        config_file.write_text('{"app_name": "From File", "request_timeout": 5}')

        result = runner.invoke(cli.app, ["serve", "--config", str(config_file)])

        assert result.exit_code == 0
        assert started[0].app_name == "From File"
        assert started[0].request_timeout == 5.0

    def test_missing_config_file(self, started: list[Config], tmp_path: Path) -> None:
        """Test a missing config file is a configuration error."""
        result = runner.invoke(
            cli.app, ["serve", "--config", str(tmp_path / "missing.json")]
        )

        assert result.exit_code == 1
        assert "Configuration error" in result.output
        assert started == []

    def test_invalid_transport(self, started: list[Config]) -> None:
        """Test an unknown transport is rejected."""
        result = runner.invoke(cli.app, ["serve", "--transport", "carrier-pigeon"])

        assert result.exit_code == 1
        assert "Configuration error" in result.output

    def test_server_failure(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test unexpected failures exit with status 1."""

        async def failing_run_server(config: Config) -> None:
            raise RuntimeError("port in use")

        monkeypatch.setattr(cli, "_run_server", failing_run_server)

        result = runner.invoke(cli.app, ["serve"])

        assert result.exit_code == 1
        assert "Fatal error: port in use" in result.output
