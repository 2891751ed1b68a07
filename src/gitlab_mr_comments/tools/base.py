"""Shared plumbing for MCP tools: argument logging and error translation."""

from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING, Any

from fastmcp.exceptions import ToolError as FastMCPToolError

from gitlab_mr_comments.logging_config import get_logger
from gitlab_mr_comments.security import mask_sensitive_data

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = get_logger(__name__)


class ToolError(FastMCPToolError):
    """A tool call failed.

    FastMCP sends the message back to the client as an error-flagged
    result; ``error_code`` and ``details`` are for the server log.
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.error_code = error_code or "TOOL_ERROR"
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.error_code, "message": str(self), "details": self.details}


def log_tool_call(tool_name: str, arguments: dict[str, Any]) -> None:
    """Log a tool invocation with sensitive arguments masked."""
    logger.debug("Tool %s called with %s", tool_name, mask_sensitive_data(arguments))


@contextlib.contextmanager
def tool_errors(tool_name: str) -> Iterator[None]:
    """Turn any exception raised in the block into a ToolError.

    The traceback is logged here; the client only receives
    "Tool <name> failed: <reason>". ToolErrors pass through untouched.

    Example:
        with tool_errors("my_tool"):
            return await do_work()
    """
    try:
        yield
    except ToolError:
        raise
    except Exception as e:
        # Some httpx errors (e.g. timeouts) stringify to ""
        reason = str(e) or type(e).__name__
        details: dict[str, Any] = {"tool": tool_name}
        status_code = getattr(e, "status_code", None)
        if status_code is not None:
            details["status_code"] = status_code

        error = ToolError(
            f"Tool {tool_name} failed: {reason}",
            error_code=type(e).__name__,
            details=details,
        )
        logger.error("Tool %s failed: %s", tool_name, error.to_dict(), exc_info=True)
        raise error from e
