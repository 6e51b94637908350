"""Clone a single GitHub issue into a Jira project.

``clone`` runs at most two requests against Jira, in order: the current-user
lookup that yields the reporter's account id, then the issue create. In dry
run mode neither is sent and the would-be issue is printed instead. Nothing is
retried and every live call creates a new Jira issue.
"""

from __future__ import annotations

import dataclasses
import sys
from dataclasses import dataclass
from typing import Any, TextIO

import requests

from .config import DEFAULT_JIRA_BASE_URL
from .errors import AuthenticationError, CloneError, JiraAPIError
from .jira_rest import JiraRestClient, build_session
from .logging import get_logger
from .models import ISSUE_TYPE_STORY, GitHubIssue, JiraIssue, JiraIssueFields
from .ux import print_banner, print_error, print_success


@dataclass
class ClonerConfig:
    token: str = ""
    session: requests.Session | None = None
    dry_run: bool = False
    project: str = ""
    jira_base_url: str = DEFAULT_JIRA_BASE_URL
    jira_username: str = ""

    def apply(self, **changes: Any) -> ClonerConfig:
        """Return a copy with ``changes`` applied; later values win."""
        return dataclasses.replace(self, **changes)

    def set_defaults(self) -> requests.Session:
        if self.session is None:
            if not self.token:
                raise AuthenticationError("cannot create jira client without a token")
            get_logger().debug("building jira session", jira_username=self.jira_username)
            self.session = build_session(self.jira_username, self.token)
        return self.session


def get_web_url(url: str) -> str:
    """Turn ``https://api.github.com/repos/o/r/issues/n`` into the browsable URL."""
    if not url:
        return url
    return url.replace("api.github.com", "github.com", 1).replace("repos/", "", 1)


def build_fields(issue: GitHubIssue, project: str, account_id: str | None = None) -> JiraIssueFields:
    return JiraIssueFields(
        summary=f"[UPSTREAM] {issue.title} #{issue.number}",
        description=f"{issue.body}\n\nUpstream Github issue: {get_web_url(issue.url)}\n",
        project_key=project,
        issue_type=ISSUE_TYPE_STORY,
        reporter_account_id=account_id,
    )


def _print_preview(issue: GitHubIssue, fields: JiraIssueFields, out: TextIO) -> None:
    print_banner(out)
    print(f"Cloning issue #{issue.number} to jira project board: {fields.project_key}\n", file=out)
    print(f"Summary: {fields.summary}", file=out)
    print(f"Type: {fields.issue_type}", file=out)
    print("Description:", file=out)
    print(fields.description, file=out)
    print_banner(out)


def clone(issue: GitHubIssue, config: ClonerConfig, *, out: TextIO | None = None) -> JiraIssue | None:
    """Create the Jira counterpart of ``issue``, or preview it in dry run mode.

    Returns the created issue, or ``None`` for a dry run. Raises
    AuthenticationError before any request when no credentials are set,
    JiraAPIError when the account lookup fails, and CloneError (with the
    partial result, if any) when the create request fails.
    """
    out = out or sys.stdout
    logger = get_logger()
    session = config.set_defaults()

    if config.dry_run:
        _print_preview(issue, build_fields(issue, config.project), out)
        logger.log_issue_action("clone", issue.number, config.project, dry_run=True)
        return None

    client = JiraRestClient(base_url=config.jira_base_url, session=session)
    try:
        account_id = client.get_account_id()
    except JiraAPIError as exc:
        print_error(f"Error cloning issue: {exc}", stream=out)
        logger.log_error("jira account lookup failed", error=str(exc), status=exc.status)
        raise

    fields = build_fields(issue, config.project, account_id)
    print("Creating new issue", file=out)
    print(f"Cloning issue #{issue.number} to jira project board: {fields.project_key}\n", file=out)
    try:
        body = client.create_issue(fields.to_payload())
    except JiraAPIError as exc:
        partial = None
        if exc.payload and exc.payload.get("key"):
            partial = JiraIssue.from_api(exc.payload, fields)
        print_error(f"Error cloning issue: {exc}", stream=out)
        logger.log_error("issue clone failed", error=str(exc), issue_number=issue.number)
        raise CloneError(f"error cloning issue #{issue.number}: {exc}", partial=partial) from exc

    created = JiraIssue.from_api(body, fields)
    if created.key:
        print_success(f"Issue cloned; see {client.browse_url(created.key)}", stream=out)
    logger.log_issue_action("clone", issue.number, config.project, jira_key=created.key)
    return created


__all__ = ["ClonerConfig", "DEFAULT_JIRA_BASE_URL", "build_fields", "clone", "get_web_url"]
