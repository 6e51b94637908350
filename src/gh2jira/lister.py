"""List GitHub issues for a repository, filtered by milestone, assignee and labels.

Typical use::

    cfg = ListerConfig(token=tokens.github, project="acme/widgets", labels=["bug"])
    for issue in list_issues(cfg):
        if issue.is_pull_request:
            continue
        print_github_issue(issue)

Each call validates its own configuration and builds its own session, so no
state is shared between calls unless the caller injects a session.
"""

from __future__ import annotations

import dataclasses
import sys
from dataclasses import dataclass, field
from typing import Any, TextIO

import requests

from .errors import AuthenticationError, GitHubAPIError
from .github_rest import DEFAULT_API_URL, GitHubRestClient, build_session
from .logging import get_logger
from .models import GitHubIssue
from .ux import Colors, colorize, format_labels

PAGE_SIZE = 50


@dataclass
class ListerConfig:
    token: str = ""
    session: requests.Session | None = None
    milestone: str = ""
    assignee: str = ""
    labels: list[str] = field(default_factory=list)
    project: str = ""
    base_url: str = DEFAULT_API_URL

    def apply(self, **changes: Any) -> ListerConfig:
        """Return a copy with ``changes`` applied; later values win."""
        return dataclasses.replace(self, **changes)

    def set_defaults(self) -> requests.Session:
        if self.session is None:
            if not self.token:
                raise AuthenticationError("cannot create github client without a token")
            self.session = build_session(self.token)
        return self.session

    @property
    def github_org(self) -> str:
        # A reference without a slash has no org part.
        org, sep, _ = self.project.partition("/")
        return org if sep else ""

    @property
    def github_repo(self) -> str:
        _, sep, rest = self.project.partition("/")
        if not sep:
            return self.project
        return rest.split("/")[0]


def _client(config: ListerConfig) -> GitHubRestClient:
    session = config.set_defaults()
    return GitHubRestClient(
        org=config.github_org,
        repo=config.github_repo,
        session=session,
        base_url=config.base_url,
    )


def get_issue(number: int, config: ListerConfig) -> GitHubIssue:
    client = _client(config)
    return GitHubIssue.from_api(client.get_issue(number))


def list_issues(config: ListerConfig) -> list[GitHubIssue]:
    """Fetch every open issue matching the filters, page by page.

    Pull requests are included; callers skip them via ``is_pull_request``.
    Any failing page aborts the whole listing.
    """
    client = _client(config)
    logger = get_logger()
    with logger.timed_operation("list_issues", repo=client.slug):
        raw = client.list_issues(
            state="open",
            per_page=PAGE_SIZE,
            milestone=config.milestone,
            assignee=config.assignee,
            labels=config.labels,
        )
    issues: list[GitHubIssue] = []
    for entry in raw:
        if not isinstance(entry, dict):
            raise GitHubAPIError(
                f"GitHub API returned a malformed issue entry for {client.slug}: {entry!r}"
            )
        issues.append(GitHubIssue.from_api(entry))
    logger.log_operation("issues_listed", repo=client.slug, count=len(issues))
    return issues


def print_github_issue(
    issue: GitHubIssue, show_labels: bool = True, show_url: bool = True, stream: TextIO | None = None
) -> None:
    stream = stream or sys.stdout
    number = colorize(f"#{issue.number}", Colors.BOLD, stream=stream)
    print(f"{number} {issue.title}", file=stream)
    if show_url and issue.html_url:
        print(f"    {issue.html_url}", file=stream)
    if show_labels and issue.labels:
        print(f"    labels: {format_labels(issue.labels, stream=stream)}", file=stream)


__all__ = ["ListerConfig", "PAGE_SIZE", "get_issue", "list_issues", "print_github_issue"]
