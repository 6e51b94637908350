from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

ISSUE_TYPE_STORY = "Story"


@dataclass
class GitHubIssue:
    """In-memory copy of a GitHub issue as returned by the REST API."""

    number: int
    title: str = ""
    body: str = ""
    url: str = ""
    html_url: str = ""
    state: str = "open"
    labels: list[str] = field(default_factory=list)
    assignees: list[str] = field(default_factory=list)
    milestone: str | None = None
    is_pull_request: bool = False

    @classmethod
    def from_api(cls, entry: dict[str, Any]) -> GitHubIssue:
        labels: list[str] = []
        for lbl in entry.get("labels") or []:
            if isinstance(lbl, dict):
                name = lbl.get("name")
                if isinstance(name, str):
                    labels.append(name)
            elif isinstance(lbl, str):
                labels.append(lbl)
        assignees = [
            a["login"]
            for a in entry.get("assignees") or []
            if isinstance(a, dict) and isinstance(a.get("login"), str)
        ]
        milestone = entry.get("milestone")
        return cls(
            number=int(entry.get("number") or 0),
            title=entry.get("title") or "",
            body=entry.get("body") or "",
            url=entry.get("url") or "",
            html_url=entry.get("html_url") or "",
            state=entry.get("state") or "open",
            labels=labels,
            assignees=assignees,
            milestone=milestone.get("title") if isinstance(milestone, dict) else None,
            is_pull_request=entry.get("pull_request") is not None,
        )


@dataclass
class JiraIssueFields:
    summary: str
    description: str
    project_key: str
    issue_type: str = ISSUE_TYPE_STORY
    reporter_account_id: str | None = None

    def to_payload(self) -> dict[str, Any]:
        fields: dict[str, Any] = {
            "summary": self.summary,
            "description": self.description,
            "issuetype": {"name": self.issue_type},
            "project": {"key": self.project_key},
        }
        if self.reporter_account_id:
            fields["reporter"] = {"accountId": self.reporter_account_id}
        return {"fields": fields}


@dataclass
class JiraIssue:
    fields: JiraIssueFields | None = None
    key: str = ""
    id: str = ""
    self_url: str = ""

    @classmethod
    def from_api(cls, entry: dict[str, Any], fields: JiraIssueFields | None = None) -> JiraIssue:
        return cls(
            fields=fields,
            key=str(entry.get("key") or ""),
            id=str(entry.get("id") or ""),
            self_url=str(entry.get("self") or ""),
        )


__all__ = ["GitHubIssue", "ISSUE_TYPE_STORY", "JiraIssue", "JiraIssueFields"]
