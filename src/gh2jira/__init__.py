"""gh2jira - mirror GitHub issues into a Jira project board.

High-level public API:

from gh2jira import ListerConfig, ClonerConfig, list_issues, clone

issues = list_issues(ListerConfig(token="...", project="acme/widgets", labels=["bug"]))
for issue in issues:
    if not issue.is_pull_request:
        clone(issue, ClonerConfig(token="...", jira_username="me@acme.io", project="WID", dry_run=True))

The CLI (``gh2jira`` / ``python -m gh2jira``) delegates to this library.
"""

from __future__ import annotations

# Version constant (sync manually with pyproject)
__version__ = "0.2.0"

from .cloner import ClonerConfig, clone, get_web_url  # noqa: E402
from .config import Gh2JiraConfig, load_config, read_tokens  # noqa: E402
from .errors import (  # noqa: E402
    AuthenticationError,
    CloneError,
    ConfigError,
    GitHubAPIError,
    Gh2JiraError,
    JiraAPIError,
)
from .lister import ListerConfig, get_issue, list_issues  # noqa: E402
from .models import GitHubIssue, JiraIssue  # noqa: E402

__all__ = [
    "AuthenticationError",
    "CloneError",
    "ClonerConfig",
    "ConfigError",
    "GitHubAPIError",
    "GitHubIssue",
    "Gh2JiraConfig",
    "Gh2JiraError",
    "JiraAPIError",
    "JiraIssue",
    "ListerConfig",
    "__version__",
    "clone",
    "get_issue",
    "get_web_url",
    "list_issues",
    "load_config",
    "read_tokens",
]
