"""GitLab MR Comments MCP Server.

An MCP server exposing a single tool that fetches merge request
discussions from GitLab and flattens them into a simple comment list.
"""

__version__ = "0.1.0"

from gitlab_mr_comments.config import Config, ConfigurationError, load_config
from gitlab_mr_comments.server import create_app

__all__ = [
    "Config",
    "ConfigurationError",
    "__version__",
    "create_app",
    "load_config",
]
