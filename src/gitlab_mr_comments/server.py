"""Assembly of the FastMCP application."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastmcp import FastMCP

from gitlab_mr_comments.logging_config import get_logger
from gitlab_mr_comments.tools.merge_requests import register_merge_request_tools

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from gitlab_mr_comments.config import Config

    ToolRegistrar = Callable[[Any, Config], None]

logger = get_logger(__name__)

SERVER_INSTRUCTIONS = (
    "Reads review comments from GitLab merge requests. "
    "Call gitlab.get_merge_request_comments with a project ID or path and a "
    "merge request IID; resolved threads are skipped unless include_resolved is true."
)

DEFAULT_TOOL_REGISTRARS: tuple[ToolRegistrar, ...] = (register_merge_request_tools,)


def create_app(
    config: Config,
    extra_tool_registrars: Iterable[ToolRegistrar] | None = None,
) -> FastMCP:
    """Build the FastMCP app and register its tools.

    Each registrar receives the app and the config. Extra registrars run
    after the built-in ones, so embedders can add tools of their own.
    """
    app = FastMCP(config.app_name, instructions=SERVER_INSTRUCTIONS)

    registrars = [*DEFAULT_TOOL_REGISTRARS, *(extra_tool_registrars or ())]
    for registrar in registrars:
        registrar(app, config)

    logger.info("MCP server '%s' ready with %d tool registrar(s)", config.app_name, len(registrars))
    return app
