"""GitLab API client.

Provides an async HTTP client for the GitLab REST API merge request
discussions endpoint.
"""

from __future__ import annotations

import urllib.parse
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import TypeAdapter, ValidationError

from gitlab_mr_comments.gitlab.exceptions import (
    GitLabParseError,
    GitLabRateLimitError,
    error_class_for_status,
)
from gitlab_mr_comments.gitlab.models import Discussion
from gitlab_mr_comments.logging_config import get_logger

if TYPE_CHECKING:
    from types import TracebackType

    from gitlab_mr_comments.security import AuthStrategy

logger = get_logger(__name__)

# Default timeout for API requests (seconds)
DEFAULT_TIMEOUT = 30.0

API_PREFIX = "/api/v4"

_discussions_adapter = TypeAdapter(list[Discussion])


def encode_path_segment(value: str | int) -> str:
    """URL-encode a project ID, path or IID for use as one path segment.

    GitLab accepts either numeric IDs or URL-encoded paths like "group%2Fproject".

    Args:
        value: Numeric ID or path like "mygroup/myproject"

    Returns:
        Percent-encoded segment with no literal slashes
    """
    return urllib.parse.quote(str(value), safe="")


def build_discussions_url(
    base_url: str,
    project_id: str | int,
    merge_request_iid: str | int,
    per_page: int | None = None,
    page: int | None = None,
) -> str:
    """Build the URL listing discussions of a merge request.

    Pagination parameters are only added when given, so GitLab's own
    defaults apply otherwise.

    Args:
        base_url: GitLab instance base URL (e.g., "https://gitlab.com")
        project_id: Project ID or path (e.g., "mygroup/myproject")
        merge_request_iid: Merge request internal ID
        per_page: Discussions per page
        page: Page number

    Returns:
        Fully-qualified discussions URL
    """
    path = (
        f"{API_PREFIX}/projects/{encode_path_segment(project_id)}"
        f"/merge_requests/{encode_path_segment(merge_request_iid)}/discussions"
    )
    url = f"{base_url.rstrip('/')}{path}"

    params: dict[str, int] = {}
    if per_page is not None:
        params["per_page"] = per_page
    if page is not None:
        params["page"] = page
    if params:
        url = f"{url}?{urllib.parse.urlencode(params)}"
    return url


def _read_body(response: httpx.Response) -> str:
    """Read a response body as text, returning "" if it cannot be read."""
    try:
        return response.text
    except (httpx.HTTPError, UnicodeDecodeError) as e:
        logger.debug("Could not read error response body: %s", e)
        return ""


class GitLabClient:
    """Async client for the GitLab REST API.

    Each client owns its own httpx client, so TLS verification and
    timeouts apply to this instance only. Use it as an async context
    manager to close the connection pool when done.

    Example:
        ```python
        auth = PrivateTokenAuth(token)
        async with GitLabClient("https://gitlab.com", auth) as client:
            discussions = await client.list_merge_request_discussions(
                "mygroup/myproject", "42"
            )
        ```
    """

    def __init__(
        self,
        base_url: str,
        auth_strategy: AuthStrategy,
        verify: bool = True,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the GitLab client.

        Args:
            base_url: GitLab instance base URL (e.g., "https://gitlab.com")
            auth_strategy: Authentication strategy for API requests
            verify: Verify TLS certificates
            timeout: Request timeout in seconds
        """
        self._base_url = base_url.rstrip("/")
        self._auth_strategy = auth_strategy
        self._verify = verify
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> GitLabClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            if not self._verify:
                logger.warning(
                    "TLS certificate verification is disabled for %s", self._base_url
                )
            # Follow http -> https and reverse proxy redirects
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                verify=self._verify,
                follow_redirects=True,
                headers={"Accept": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def _handle_error_response(self, response: httpx.Response) -> None:
        """Raise the exception matching a non-success response.

        Raises:
            GitLabAPIError: Appropriate subclass based on status code
        """
        status = response.status_code
        body = _read_body(response)
        message = f"GitLab API error {status}: {body}"
        logger.error("GitLab API error response (%d): %s", status, body)

        error_class = error_class_for_status(status)
        if error_class is GitLabRateLimitError:
            retry_after = response.headers.get("Retry-After", "")
            raise GitLabRateLimitError(
                message,
                status,
                body,
                retry_after=int(retry_after) if retry_after.isdigit() else None,
            )

        raise error_class(message, status, body)

    async def _get(self, url: str) -> Any:
        """Make one authenticated GET request and decode the JSON body.

        Raises:
            GitLabAPIError: On non-success status
            GitLabParseError: If the body is not valid JSON
        """
        client = self._get_client()
        auth_headers = await self._auth_strategy.get_auth_headers()

        logger.debug("GitLab API request: GET %s", url)
        response = await client.get(url, headers=auth_headers)
        logger.debug(
            "GitLab API response: %d %s", response.status_code, response.reason_phrase
        )

        if not response.is_success:
            self._handle_error_response(response)

        try:
            return response.json()
        except ValueError as e:
            msg = f"Failed to parse GitLab API response as JSON: {e}"
            raise GitLabParseError(msg) from e

    async def list_merge_request_discussions(
        self,
        project_id: str | int,
        merge_request_iid: str | int,
        per_page: int | None = None,
        page: int | None = None,
    ) -> list[Discussion]:
        """List discussion threads on a merge request.

        Fetches a single page; callers page through results themselves.

        Args:
            project_id: Project ID or path
            merge_request_iid: Merge request IID
            per_page: Discussions per page (GitLab default when omitted)
            page: Page number (GitLab default when omitted)

        Returns:
            List of discussions in the order GitLab returned them

        Raises:
            GitLabAPIError: On non-success status
            GitLabParseError: If the body is not a list of discussions
        """
        url = build_discussions_url(
            self._base_url, project_id, merge_request_iid, per_page=per_page, page=page
        )
        payload = await self._get(url)

        if not isinstance(payload, list):
            msg = f"Expected a list of discussions, got {type(payload).__name__}"
            raise GitLabParseError(msg)

        try:
            discussions = _discussions_adapter.validate_python(payload)
        except ValidationError as e:
            msg = f"Unexpected discussion payload: {e}"
            raise GitLabParseError(msg) from e

        logger.debug("Received %d discussions", len(discussions))
        return discussions
