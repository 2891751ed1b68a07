"""Errors raised while talking to GitLab."""

from __future__ import annotations


class GitLabError(Exception):
    """Base exception for failures talking to GitLab."""


class GitLabAPIError(GitLabError):
    """GitLab answered with a non-success status.

    Subclasses fix the status code and a fallback message for the
    statuses callers commonly need to tell apart.

    Attributes:
        message: Human-readable error message
        status_code: HTTP status code, if known
        response_body: Raw response body ("" if it could not be read)
    """

    default_message = "GitLab API request failed."
    default_status_code: int | None = None

    def __init__(
        self,
        message: str | None = None,
        status_code: int | None = None,
        response_body: str = "",
    ) -> None:
        self.message = message or self.default_message
        self.status_code = self.default_status_code if status_code is None else status_code
        self.response_body = response_body
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class GitLabAuthenticationError(GitLabAPIError):
    """401: the token is missing, expired or revoked."""

    default_message = "Authentication failed. Check your GitLab token."
    default_status_code = 401


class GitLabForbiddenError(GitLabAPIError):
    """403: the token cannot read this project."""

    default_message = "Access forbidden. Check your permissions."
    default_status_code = 403


class GitLabNotFoundError(GitLabAPIError):
    """404: unknown project or merge request, or no access to it."""

    default_message = "Project or merge request not found."
    default_status_code = 404


class GitLabRateLimitError(GitLabAPIError):
    """429: too many requests.

    Attributes:
        retry_after: Seconds GitLab asked us to wait, when it said so
    """

    default_message = "Rate limit exceeded."
    default_status_code = 429

    def __init__(
        self,
        message: str | None = None,
        status_code: int | None = None,
        response_body: str = "",
        retry_after: int | None = None,
    ) -> None:
        super().__init__(message, status_code, response_body)
        self.retry_after = retry_after


class GitLabParseError(GitLabError):
    """A successful response body is not the expected JSON."""


_STATUS_ERRORS: dict[int, type[GitLabAPIError]] = {
    cls.default_status_code: cls
    for cls in (
        GitLabAuthenticationError,
        GitLabForbiddenError,
        GitLabNotFoundError,
        GitLabRateLimitError,
    )
    if cls.default_status_code is not None
}


def error_class_for_status(status_code: int) -> type[GitLabAPIError]:
    """Return the exception class for an HTTP status code."""
    return _STATUS_ERRORS.get(status_code, GitLabAPIError)
