"""GitLab merge request comment tools."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Annotated, Any

from pydantic import BaseModel, Field

from gitlab_mr_comments.comments import CommentPayload, flatten_discussions
from gitlab_mr_comments.config import ConfigurationError, resolve_gitlab_settings
from gitlab_mr_comments.gitlab.client import DEFAULT_TIMEOUT, GitLabClient
from gitlab_mr_comments.logging_config import get_logger
from gitlab_mr_comments.security import PrivateTokenAuth, preview_token
from gitlab_mr_comments.tools.base import log_tool_call, tool_errors

if TYPE_CHECKING:
    from collections.abc import Mapping

    from gitlab_mr_comments.config import Config

logger = get_logger(__name__)

GET_MERGE_REQUEST_COMMENTS = "gitlab.get_merge_request_comments"

GET_MERGE_REQUEST_COMMENTS_DESCRIPTION = (
    "Fetch comments for a GitLab merge request and return filename, line, and text. "
    'Provide the project path (e.g., "mars/general-market") and merge request IID '
    '(e.g., "7380").'
)

ProjectIdArg = Annotated[
    str,
    Field(description='Numeric project ID or full path (e.g., "123" or "group/project")'),
]
MergeRequestIidArg = Annotated[
    str,
    Field(description='Internal IID of the merge request (e.g., "456")'),
]
PerPageArg = Annotated[
    int | None,
    Field(ge=1, le=100, description="Number of discussions per page (GitLab default 20)."),
]
PageArg = Annotated[
    int | None,
    Field(ge=1, description="Page of discussions to fetch (GitLab default 1)."),
]
IncludeResolvedArg = Annotated[
    bool,
    Field(description="If false (default), resolved comments are excluded."),
]


class MergeRequestCommentsQuery(BaseModel):
    """Arguments of the merge request comments tool."""

    project_id: ProjectIdArg
    merge_request_iid: MergeRequestIidArg
    per_page: PerPageArg = None
    page: PageArg = None
    include_resolved: IncludeResolvedArg = False


async def fetch_merge_request_comments(
    query: MergeRequestCommentsQuery,
    timeout: float = DEFAULT_TIMEOUT,
    environ: Mapping[str, str] | None = None,
) -> list[CommentPayload]:
    """Fetch one page of merge request discussions and flatten them.

    Args:
        query: Validated tool arguments
        timeout: GitLab request timeout in seconds
        environ: Environment to resolve GitLab settings from (defaults to os.environ)

    Returns:
        Comments in thread order

    Raises:
        ConfigurationError: If GitLab settings are missing or invalid
        GitLabAPIError: If GitLab answers with a non-success status
        GitLabParseError: If the response is not a list of discussions
    """
    settings = resolve_gitlab_settings(environ)
    logger.debug(
        "Fetching comments for %s!%s from %s (token: %s)",
        query.project_id,
        query.merge_request_iid,
        settings.host,
        preview_token(settings.token),
    )

    auth_strategy = PrivateTokenAuth(settings.token)
    async with GitLabClient(
        settings.host,
        auth_strategy,
        verify=settings.ssl_verify,
        timeout=timeout,
    ) as client:
        discussions = await client.list_merge_request_discussions(
            project_id=query.project_id,
            merge_request_iid=query.merge_request_iid,
            per_page=query.per_page,
            page=query.page,
        )

    comments = flatten_discussions(discussions, include_resolved=query.include_resolved)
    logger.info(
        "Fetched %d comments from %d discussions for %s!%s",
        len(comments),
        len(discussions),
        query.project_id,
        query.merge_request_iid,
    )
    return comments


def comments_to_json(comments: list[CommentPayload]) -> str:
    """Serialize comments as the tool's indented JSON text result."""
    return json.dumps(
        [comment.model_dump() for comment in comments],
        indent=2,
        ensure_ascii=False,
    )


def register_merge_request_tools(app: Any, config: Config) -> None:
    """Register GitLab merge request tools.

    Args:
        app: FastMCP application instance
        config: Application configuration
    """
    try:
        settings = resolve_gitlab_settings()
    except ConfigurationError as e:
        logger.warning("GitLab is not configured yet, tool calls will fail: %s", e)
    else:
        logger.info("Using GitLab at %s", settings.host)

    @app.tool(
        name=GET_MERGE_REQUEST_COMMENTS,
        description=GET_MERGE_REQUEST_COMMENTS_DESCRIPTION,
    )
    async def get_merge_request_comments(
        project_id: ProjectIdArg,
        merge_request_iid: MergeRequestIidArg,
        per_page: PerPageArg = None,
        page: PageArg = None,
        include_resolved: IncludeResolvedArg = False,
    ) -> str:
        """Fetch merge request comments as a JSON array.

        Each comment has file, line, text, author, created_at and resolved.
        """
        arguments = {
            "project_id": project_id,
            "merge_request_iid": merge_request_iid,
            "per_page": per_page,
            "page": page,
            "include_resolved": include_resolved,
        }
        log_tool_call(GET_MERGE_REQUEST_COMMENTS, arguments)

        with tool_errors(GET_MERGE_REQUEST_COMMENTS):
            query = MergeRequestCommentsQuery(**arguments)
            comments = await fetch_merge_request_comments(
                query, timeout=config.request_timeout
            )
            return comments_to_json(comments)

    logger.debug("Merge request tools registered (%s)", GET_MERGE_REQUEST_COMMENTS)
