"""MCP tools for the GitLab MR Comments server."""

from gitlab_mr_comments.tools.base import ToolError, log_tool_call, tool_errors
from gitlab_mr_comments.tools.merge_requests import (
    GET_MERGE_REQUEST_COMMENTS,
    MergeRequestCommentsQuery,
    fetch_merge_request_comments,
    register_merge_request_tools,
)

__all__ = [
    "GET_MERGE_REQUEST_COMMENTS",
    "MergeRequestCommentsQuery",
    "ToolError",
    "fetch_merge_request_comments",
    "log_tool_call",
    "register_merge_request_tools",
    "tool_errors",
]
