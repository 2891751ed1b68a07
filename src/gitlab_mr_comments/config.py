"""Configuration management for the GitLab MR Comments server.

Two kinds of configuration live here:

- Server settings (``Config``), loaded once at startup from an optional
  configuration file, ``GITLAB_MR_COMMENTS_`` environment variables and
  CLI overrides.
- GitLab connection settings (``GitLabSettings``), resolved from the
  ``GITLAB_*`` environment variables on every tool call.
"""

from __future__ import annotations

import logging
import os
import urllib.parse
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field, SecretStr, ValidationError, field_validator

logger = logging.getLogger(__name__)

ENV_PREFIX = "GITLAB_MR_COMMENTS_"

# GitLab connection variables, in lookup order
HOST_ENV_VARS = ("GITLAB_HOST", "GITLAB_BASE_URL")
TOKEN_ENV_VARS = ("GITLAB_TOKEN", "GITLAB_PERSONAL_ACCESS_TOKEN")
SSL_VERIFY_ENV_VAR = "GITLAB_SSL_VERIFY"

SSL_VERIFY_FALSY = frozenset({"0", "false", "no"})


class ConfigurationError(Exception):
    """Raised when configuration is missing or invalid."""


class LogLevel(str, Enum):
    """Supported log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class TransportMode(str, Enum):
    """MCP transport modes."""

    STDIO = "stdio"
    SSE = "sse"


class Config(BaseModel):
    """Server configuration.

    Configuration can be loaded from:
    - Environment variables with GITLAB_MR_COMMENTS_ prefix
    - Optional .env file in the working directory
    - Optional configuration file passed via CLI
    """

    app_name: str = Field(default="GitLab MR Comments", description="Application name")
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")

    transport_mode: TransportMode = Field(
        default=TransportMode.STDIO, description="MCP transport mode"
    )
    bind_host: str = Field(default="127.0.0.1", description="SSE server bind host")
    bind_port: int = Field(default=8000, ge=1, le=65535, description="SSE server bind port")
    sse_path: str = Field(default="/sse", description="SSE endpoint path")

    request_timeout: float = Field(
        default=30.0, gt=0, description="Timeout for GitLab API requests (seconds)"
    )

    model_config = {
        "validate_assignment": True,
    }

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        """Normalize log level to uppercase."""
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("transport_mode", mode="before")
    @classmethod
    def normalize_transport_mode(cls, v: Any) -> Any:
        """Normalize transport mode to lowercase."""
        if isinstance(v, str):
            return v.lower()
        return v


class GitLabSettings(BaseModel):
    """Connection settings for the GitLab REST API."""

    host: str
    token: SecretStr
    ssl_verify: bool = True


def _first_non_empty(environ: Mapping[str, str], names: tuple[str, ...]) -> str | None:
    for name in names:
        value = environ.get(name)
        if value:
            return value
    return None


def _gitlab_env_names(environ: Mapping[str, str]) -> list[str]:
    return sorted(key for key in environ if key.startswith("GITLAB"))


def resolve_host(environ: Mapping[str, str]) -> str:
    """Resolve the GitLab base URL.

    Raises:
        ConfigurationError: If no host is set or it is not an http(s) URL
    """
    host = _first_non_empty(environ, HOST_ENV_VARS)
    if not host:
        logger.debug("GitLab variables present: %s", _gitlab_env_names(environ))
        msg = "Missing GITLAB_HOST environment variable."
        raise ConfigurationError(msg)

    host = host.rstrip("/")
    parsed = urllib.parse.urlsplit(host)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        msg = f"Invalid GITLAB_HOST {host!r}: expected an http(s) URL such as https://gitlab.com"
        raise ConfigurationError(msg)
    return host


def resolve_token(environ: Mapping[str, str]) -> SecretStr:
    """Resolve the GitLab access token.

    Raises:
        ConfigurationError: If no token is set
    """
    token = _first_non_empty(environ, TOKEN_ENV_VARS)
    if not token:
        logger.debug("GitLab variables present: %s", _gitlab_env_names(environ))
        msg = "Missing GITLAB_TOKEN environment variable."
        raise ConfigurationError(msg)
    return SecretStr(token)


def resolve_ssl_verify(environ: Mapping[str, str]) -> bool:
    """Resolve whether TLS certificates should be verified.

    Verification is on unless GITLAB_SSL_VERIFY is one of "0", "false"
    or "no" (case-insensitive).
    """
    raw = environ.get(SSL_VERIFY_ENV_VAR)
    if raw is None:
        return True
    return raw.lower() not in SSL_VERIFY_FALSY


def resolve_gitlab_settings(environ: Mapping[str, str] | None = None) -> GitLabSettings:
    """Resolve GitLab connection settings from the environment.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Validated GitLabSettings

    Raises:
        ConfigurationError: If the host or token is missing or invalid
    """
    if environ is None:
        environ = os.environ

    settings = GitLabSettings(
        host=resolve_host(environ),
        token=resolve_token(environ),
        ssl_verify=resolve_ssl_verify(environ),
    )
    logger.debug(
        "Resolved GitLab settings (host: %s, token length: %d, ssl_verify: %s)",
        settings.host,
        len(settings.token.get_secret_value()),
        settings.ssl_verify,
    )
    return settings


def _load_env_config(environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """Collect ``GITLAB_MR_COMMENTS_<FIELD>`` overrides for Config fields.

    Values stay strings; pydantic converts them when Config is built.
    """
    if environ is None:
        environ = os.environ

    overrides: dict[str, str] = {}
    for field_name in Config.model_fields:
        value = environ.get(f"{ENV_PREFIX}{field_name.upper()}")
        if value is not None:
            overrides[field_name] = value
    return overrides


def _parse_yaml(content: str) -> Any:
    try:
        import yaml
    except ImportError:
        msg = "PyYAML is required for YAML configuration files; install the 'yaml' extra"
        raise ConfigurationError(msg) from None
    return yaml.safe_load(content)


def _load_file_config(path: str | Path) -> dict[str, Any]:
    """Read server settings from a JSON or YAML file.

    An empty YAML file yields no settings.

    Raises:
        ConfigurationError: If the file is missing, unreadable, of an
            unknown type, or does not hold a mapping
    """
    import json

    path = Path(path)
    if not path.is_file():
        msg = f"Configuration file not found: {path}"
        raise ConfigurationError(msg)

    suffix = path.suffix.lower()
    content = path.read_text(encoding="utf-8")

    if suffix == ".json":
        try:
            data = json.loads(content)
        except ValueError as e:
            msg = f"Invalid JSON in configuration file {path}: {e}"
            raise ConfigurationError(msg) from e
    elif suffix in (".yaml", ".yml"):
        data = _parse_yaml(content) or {}
    else:
        msg = f"Unsupported configuration file format: {suffix or '(none)'}"
        raise ConfigurationError(msg)

    if not isinstance(data, dict):
        msg = f"Configuration file {path} must contain a mapping, got {type(data).__name__}"
        raise ConfigurationError(msg)
    return data


def load_config(
    path: str | Path | None = None,
    cli_args: Mapping[str, Any] | None = None,
) -> Config:
    """Load and validate server configuration.

    Sources, later ones winning: model defaults, the configuration
    file, ``GITLAB_MR_COMMENTS_*`` environment variables, then CLI
    arguments that are not None. A ``.env`` file in the working
    directory is loaded first, which also makes ``GITLAB_*`` connection
    variables defined there visible to resolve_gitlab_settings.

    Args:
        path: Optional path to a JSON or YAML configuration file
        cli_args: Optional CLI overrides keyed by Config field name

    Returns:
        Validated Config instance

    Raises:
        ConfigurationError: If any source is unreadable or a value is invalid
    """
    load_dotenv()

    settings: dict[str, Any] = {}
    if path:
        logger.debug("Loading configuration from file: %s", path)
        settings.update(_load_file_config(path))

    env_overrides = _load_env_config()
    if env_overrides:
        logger.debug("Configuration from environment: %s", sorted(env_overrides))
    settings.update(env_overrides)

    cli_overrides = {key: value for key, value in (cli_args or {}).items() if value is not None}
    if cli_overrides:
        logger.debug("Configuration from CLI: %s", sorted(cli_overrides))
    settings.update(cli_overrides)

    try:
        return Config(**settings)
    except ValidationError as e:
        msg = f"Configuration validation failed: {e}"
        raise ConfigurationError(msg) from e
