"""Ways of serving the MCP app: stdio (default) or SSE over HTTP."""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from starlette.routing import Mount, Route

from gitlab_mr_comments.config import ConfigurationError, TransportMode, resolve_gitlab_settings
from gitlab_mr_comments.logging_config import get_logger

if TYPE_CHECKING:
    from fastmcp import FastMCP
    from starlette.requests import Request

    from gitlab_mr_comments.config import Config

logger = get_logger(__name__)


def gitlab_configured() -> bool:
    """Whether GitLab settings currently resolve from the environment."""
    try:
        resolve_gitlab_settings()
    except ConfigurationError:
        return False
    return True


def create_sse_app(mcp_app: FastMCP, config: Config) -> Starlette:
    """Wrap the MCP app in a Starlette app for SSE clients.

    Routes:
        GET /health: liveness plus whether GitLab settings are present
        {config.sse_path}: FastMCP SSE endpoint (and its message route)

    Args:
        mcp_app: FastMCP application instance
        config: Application configuration

    Returns:
        Starlette application ready for uvicorn
    """

    async def health(request: Request) -> JSONResponse:
        return JSONResponse(
            {
                "status": "ok",
                "app_name": config.app_name,
                "gitlab_configured": gitlab_configured(),
            }
        )

    sse_app = mcp_app.http_app(path=config.sse_path, transport="sse")

    return Starlette(
        routes=[
            Route("/health", health, methods=["GET"]),
            Mount("/", app=sse_app),
        ],
        middleware=[
            Middleware(
                CORSMiddleware,
                allow_origins=["*"],
                allow_methods=["GET", "POST"],
                allow_headers=["*"],
            )
        ],
        lifespan=sse_app.lifespan,
    )


async def run_stdio(mcp_app: FastMCP) -> None:
    """Serve JSON-RPC over stdin/stdout until the client disconnects."""
    logger.info("Serving MCP over stdio")
    await mcp_app.run_stdio_async()


async def run_sse(app: Starlette, host: str, port: int) -> None:
    """Serve the SSE app with uvicorn until interrupted."""
    import uvicorn

    logger.info("Serving MCP over SSE on http://%s:%d", host, port)
    server = uvicorn.Server(uvicorn.Config(app=app, host=host, port=port, log_level="info"))
    await server.serve()


async def serve_transport(mcp_app: FastMCP, config: Config) -> None:
    """Run the MCP app on the transport selected in the config."""
    if config.transport_mode == TransportMode.STDIO:
        await run_stdio(mcp_app)
        return

    logger.info(
        "SSE endpoint: http://%s:%d%s", config.bind_host, config.bind_port, config.sse_path
    )
    await run_sse(create_sse_app(mcp_app, config), config.bind_host, config.bind_port)
