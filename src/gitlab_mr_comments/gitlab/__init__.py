"""GitLab API client and utilities."""

from gitlab_mr_comments.gitlab.client import (
    GitLabClient,
    build_discussions_url,
    encode_path_segment,
)
from gitlab_mr_comments.gitlab.exceptions import (
    GitLabAPIError,
    GitLabAuthenticationError,
    GitLabError,
    GitLabForbiddenError,
    GitLabNotFoundError,
    GitLabParseError,
    GitLabRateLimitError,
    error_class_for_status,
)
from gitlab_mr_comments.gitlab.models import Author, Discussion, Note, Position

__all__ = [
    "Author",
    "Discussion",
    "GitLabAPIError",
    "GitLabAuthenticationError",
    "GitLabClient",
    "GitLabError",
    "GitLabForbiddenError",
    "GitLabNotFoundError",
    "GitLabParseError",
    "GitLabRateLimitError",
    "Note",
    "Position",
    "build_discussions_url",
    "encode_path_segment",
    "error_class_for_status",
]
