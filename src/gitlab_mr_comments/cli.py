"""Command-line entry point: ``gitlab-mr-comments serve`` and friends."""

from __future__ import annotations

import asyncio
import platform
import sys

import typer

from gitlab_mr_comments import __version__
from gitlab_mr_comments.config import Config, ConfigurationError, load_config
from gitlab_mr_comments.logging_config import get_logger, setup_logging

app = typer.Typer(
    name="gitlab-mr-comments",
    help="MCP server exposing GitLab merge request comments to AI assistants",
    add_completion=False,
)

logger = get_logger(__name__)


def _version_lines() -> list[str]:
    try:
        import fastmcp

        fastmcp_version = fastmcp.__version__
    except (ImportError, AttributeError):
        fastmcp_version = "unknown"
    return [
        f"gitlab-mr-comments version {__version__}",
        f"fastmcp version {fastmcp_version}",
        f"Python {sys.version}",
    ]


def _print_version(value: bool) -> None:
    if value:
        typer.echo("\n".join(_version_lines()))
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=_print_version,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """GitLab merge request comments over MCP."""


@app.command()
def serve(
    config_path: str | None = typer.Option(
        None, "--config", "-c", help="JSON or YAML file with server settings"
    ),
    log_level: str | None = typer.Option(
        None, "--log-level", "-l", help="DEBUG, INFO, WARNING, ERROR or CRITICAL"
    ),
    host: str | None = typer.Option(None, "--host", "-h", help="Bind address (SSE only)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port (SSE only)"),
    transport: str | None = typer.Option(
        None, "--transport", "-t", help="stdio (default) or sse"
    ),
) -> None:
    """Run the MCP server.

    GitLab access comes from GITLAB_HOST (or GITLAB_BASE_URL), GITLAB_TOKEN
    (or GITLAB_PERSONAL_ACCESS_TOKEN) and GITLAB_SSL_VERIFY, read from the
    environment or a .env file on every tool call.
    """
    try:
        config = load_config(
            path=config_path,
            cli_args={
                "log_level": log_level,
                "bind_host": host,
                "bind_port": port,
                "transport_mode": transport,
            },
        )
        setup_logging(config)
        logger.info(
            "Starting %s %s (transport: %s, Python %s on %s)",
            config.app_name,
            __version__,
            config.transport_mode.value,
            platform.python_version(),
            sys.platform,
        )
        asyncio.run(_run_server(config))
    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=1) from None
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
        raise typer.Exit(code=0) from None
    except Exception as e:
        logger.critical("Server stopped with an error: %s", e, exc_info=True)
        typer.echo(f"Fatal error: {e}", err=True)
        raise typer.Exit(code=1) from None


async def _run_server(config: Config) -> None:
    from gitlab_mr_comments.server import create_app
    from gitlab_mr_comments.transport import serve_transport

    await serve_transport(create_app(config), config)


@app.command()
def version() -> None:
    """Print package, FastMCP and Python versions."""
    typer.echo("\n".join(_version_lines()))


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
