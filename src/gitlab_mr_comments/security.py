"""Keeping GitLab tokens out of logs, and putting them into requests."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import SecretStr

PRIVATE_TOKEN_HEADER = "PRIVATE-TOKEN"

# Leading token characters that may appear in logs
TOKEN_PREVIEW_LENGTH = 4

DEFAULT_SENSITIVE_KEYS = frozenset(
    {
        "token",
        "secret",
        "password",
        "authorization",
        "private-token",
    }
)


def redact(value: str | None) -> str:
    """Replace a value with "***", or "<empty>" when there is nothing to hide."""
    return "***" if value else "<empty>"


def preview_token(token: str | SecretStr | None) -> str:
    """Return a bounded-length preview of a token for logs, e.g. "glpa***"."""
    if isinstance(token, SecretStr):
        token = token.get_secret_value()
    if not token:
        return "NOT SET"
    return f"{token[:TOKEN_PREVIEW_LENGTH]}***"


def _mask_value(value: Any, sensitive_keys: frozenset[str] | set[str]) -> Any:
    if isinstance(value, dict):
        return mask_sensitive_data(value, sensitive_keys)
    if isinstance(value, list):
        return [_mask_value(item, sensitive_keys) for item in value]
    return value


def mask_sensitive_data(
    data: dict[str, Any], sensitive_keys: frozenset[str] | set[str] | None = None
) -> dict[str, Any]:
    """Copy a mapping for logging with sensitive values redacted.

    A key is sensitive when any of ``sensitive_keys`` occurs in it,
    case-insensitively ("gitlab_token" matches "token"). Nested dicts and
    lists are masked too.

    Args:
        data: Mapping that may contain secrets
        sensitive_keys: Key fragments to mask (defaults to DEFAULT_SENSITIVE_KEYS)

    Returns:
        Masked copy of ``data``
    """
    keys = DEFAULT_SENSITIVE_KEYS if sensitive_keys is None else sensitive_keys

    masked: dict[str, Any] = {}
    for key, value in data.items():
        if any(fragment in key.lower() for fragment in keys):
            if isinstance(value, SecretStr):
                value = value.get_secret_value()
            masked[key] = redact(None if value is None else str(value))
        else:
            masked[key] = _mask_value(value, keys)
    return masked


class AuthStrategy(ABC):
    """Source of authentication headers for GitLab requests."""

    @abstractmethod
    async def get_auth_headers(self) -> dict[str, str]:
        """Return the headers that authenticate one request."""


class PrivateTokenAuth(AuthStrategy):
    """Personal, project or group access token sent as ``PRIVATE-TOKEN``."""

    def __init__(self, token: str | SecretStr, header_name: str = PRIVATE_TOKEN_HEADER) -> None:
        self._token = token if isinstance(token, SecretStr) else SecretStr(token)
        self._header_name = header_name

    async def get_auth_headers(self) -> dict[str, str]:
        return {self._header_name: self._token.get_secret_value()}

    def __repr__(self) -> str:
        return f"PrivateTokenAuth(header_name={self._header_name!r}, token={self._token!r})"
