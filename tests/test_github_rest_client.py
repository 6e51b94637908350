from types import SimpleNamespace

import pytest

from gh2jira.errors import GitHubAPIError
from gh2jira.github_rest import GitHubRestClient, next_page
from gh2jira.models import GitHubIssue


def test_client_sets_default_headers(make_session):
    session = make_session()
    session.headers["Accept"] = "application/custom"
    GitHubRestClient(org="acme", repo="widgets", session=session)

    assert session.headers["Accept"] == "application/custom"
    assert session.headers["User-Agent"].startswith("gh2jira/")


def test_client_honours_base_url(make_session, response):
    session = make_session(response(200, []))
    client = GitHubRestClient(
        org="acme", repo="widgets", session=session, base_url="https://ghe.example.com/api/v3/"
    )

    client.list_issues()

    assert session.request_log[0][1] == "https://ghe.example.com/api/v3/repos/acme/widgets/issues"


def test_client_rejects_non_list_page(make_session, response):
    session = make_session(response(200, {"message": "weird"}))
    client = GitHubRestClient(org="acme", repo="widgets", session=session)

    with pytest.raises(GitHubAPIError):
        client.list_issues()


def test_get_issue_raises_on_404(make_session, response):
    session = make_session(response(404, {"message": "Not Found"}))
    client = GitHubRestClient(org="acme", repo="widgets", session=session)

    with pytest.raises(GitHubAPIError) as excinfo:
        client.get_issue(99)
    assert excinfo.value.status == 404
    assert "Not Found" in (excinfo.value.response_text or "")


@pytest.mark.parametrize(
    ("links", "expected"),
    [
        ({}, 0),
        ({"next": {"url": "https://api.github.com/repos/a/b/issues?per_page=50&page=4"}}, 4),
        ({"last": {"url": "https://api.github.com/repos/a/b/issues?page=9"}}, 0),
        ({"next": {"url": "https://api.github.com/repos/a/b/issues?page=x"}}, 0),
    ],
)
def test_next_page(links, expected):
    assert next_page(SimpleNamespace(links=links)) == expected


def test_issue_from_api_payload():
    issue = GitHubIssue.from_api(
        {
            "number": 12,
            "title": "Crash",
            "body": None,
            "url": "https://api.github.com/repos/acme/widgets/issues/12",
            "labels": [{"name": "bug"}, "triage"],
            "assignees": [{"login": "octocat"}],
            "milestone": {"title": "v1.0", "number": 3},
            "pull_request": {"url": "https://api.github.com/repos/acme/widgets/pulls/12"},
        }
    )

    assert issue.body == ""
    assert issue.labels == ["bug", "triage"]
    assert issue.assignees == ["octocat"]
    assert issue.milestone == "v1.0"
    assert issue.is_pull_request is True
