"""Tests for GitLab exceptions."""

from __future__ import annotations

import pytest

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


class TestGitLabAPIError:
    """Tests for base GitLabAPIError."""

    def test_basic_error(self) -> None:
        """Test basic error creation."""
        error = GitLabAPIError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.status_code is None
        assert error.response_body == ""

    def test_error_with_status_and_body(self) -> None:
        """Test error carrying status code and body."""
        error = GitLabAPIError("GitLab API error 500: oops", status_code=500, response_body="oops")
        assert str(error) == "GitLab API error 500: oops"
        assert error.status_code == 500
        assert error.response_body == "oops"


class TestStatusErrors:
    """Tests for status-specific errors."""

    def test_authentication_defaults(self) -> None:
        """Test default 401 error."""
        error = GitLabAuthenticationError()
        assert error.status_code == 401
        assert "token" in str(error).lower()

    def test_forbidden_defaults(self) -> None:
        """Test default 403 error."""
        assert GitLabForbiddenError().status_code == 403

    def test_not_found_defaults(self) -> None:
        """Test default 404 error."""
        assert GitLabNotFoundError().status_code == 404

    def test_rate_limit_retry_after(self) -> None:
        """Test 429 error keeps retry_after."""
        error = GitLabRateLimitError(retry_after=30)
        assert error.status_code == 429
        assert error.retry_after == 30

    def test_hierarchy(self) -> None:
        """Test status errors share the API error base."""
        for error_class in (
            GitLabAuthenticationError,
            GitLabForbiddenError,
            GitLabNotFoundError,
            GitLabRateLimitError,
        ):
            error = error_class()
            assert isinstance(error, GitLabAPIError)
            assert isinstance(error, GitLabError)


class TestGitLabParseError:
    """Tests for GitLabParseError."""

    def test_is_gitlab_error_but_not_api_error(self) -> None:
        """Test parse errors are distinct from status errors."""
        error = GitLabParseError("bad json")
        assert isinstance(error, GitLabError)
        assert not isinstance(error, GitLabAPIError)
        assert str(error) == "bad json"


class TestErrorClassForStatus:
    """Tests for mapping status codes to exception classes."""

    @pytest.mark.parametrize(
        ("status_code", "error_class"),
        [
            (401, GitLabAuthenticationError),
            (403, GitLabForbiddenError),
            (404, GitLabNotFoundError),
            (429, GitLabRateLimitError),
            (400, GitLabAPIError),
            (500, GitLabAPIError),
        ],
    )
    def test_mapping(self, status_code: int, error_class: type[GitLabAPIError]) -> None:
        """Test each status maps to its exception class."""
        assert error_class_for_status(status_code) is error_class

    def test_explicit_status_overrides_default(self) -> None:
        """Test an explicit status code wins over the class default."""
        assert GitLabNotFoundError("gone", status_code=410).status_code == 410

    def test_empty_message_uses_default(self) -> None:
        """Test an empty message falls back to the class message."""
        assert str(GitLabForbiddenError("")) == "Access forbidden. Check your permissions."
