from __future__ import annotations

import io

import pytest
import requests
from requests.auth import HTTPBasicAuth

from gh2jira import cloner
from gh2jira.cloner import ClonerConfig, build_fields, clone, get_web_url
from gh2jira.errors import AuthenticationError, CloneError, JiraAPIError
from gh2jira.models import GitHubIssue

BASE = "https://acme.atlassian.net/"
MYSELF_URL = "https://acme.atlassian.net/rest/api/latest/myself"
CREATE_URL = "https://acme.atlassian.net/rest/api/latest/issue"


@pytest.fixture
def issue() -> GitHubIssue:
    return GitHubIssue(
        number=7,
        title="Fix bug",
        body="details",
        url="https://api.github.com/repos/acme/widgets/issues/7",
    )


def _config(session, **kw) -> ClonerConfig:
    return ClonerConfig(session=session, project="WID", jira_base_url=BASE, **kw)


def test_get_web_url_rewrites_api_url():
    assert (
        get_web_url("https://api.github.com/repos/acme/widgets/issues/7")
        == "https://github.com/acme/widgets/issues/7"
    )


def test_get_web_url_empty_is_identity():
    assert get_web_url("") == ""


def test_build_fields_templates(issue):
    fields = build_fields(issue, "WID", "abc123")

    assert fields.summary == "[UPSTREAM] Fix bug #7"
    assert fields.description == (
        "details\n\nUpstream Github issue: https://github.com/acme/widgets/issues/7\n"
    )
    assert fields.issue_type == "Story"
    assert fields.to_payload()["fields"]["reporter"] == {"accountId": "abc123"}


def test_dry_run_sends_nothing_and_returns_none(make_session, issue):
    session = make_session()
    out = io.StringIO()

    result = clone(issue, _config(session, dry_run=True), out=out)

    assert result is None
    assert session.request_log == []
    text = out.getvalue()
    assert text.count("############# DRY RUN MODE #############") == 2
    assert "Cloning issue #7 to jira project board: WID" in text
    assert "Summary: [UPSTREAM] Fix bug #7" in text
    assert "Type: Story" in text
    assert "Upstream Github issue: https://github.com/acme/widgets/issues/7" in text


def test_live_clone_submits_expected_payload(make_session, response, issue):
    session = make_session(
        response(200, {"accountId": "abc123", "displayName": "Me"}),
        response(201, {"id": "10001", "key": "WID-1", "self": f"{CREATE_URL}/10001"}),
    )
    out = io.StringIO()

    created = clone(issue, _config(session), out=out)

    assert [entry[:2] for entry in session.request_log] == [
        ("GET", MYSELF_URL),
        ("POST", CREATE_URL),
    ]
    fields = session.request_log[1][2]["json"]["fields"]
    assert fields["summary"] == "[UPSTREAM] Fix bug #7"
    assert fields["issuetype"] == {"name": "Story"}
    assert fields["project"] == {"key": "WID"}
    assert fields["reporter"] == {"accountId": "abc123"}
    assert "details" in fields["description"]
    assert "https://github.com/acme/widgets/issues/7" in fields["description"]

    assert created is not None
    assert created.key == "WID-1"
    assert created.fields is not None and created.fields.reporter_account_id == "abc123"
    assert "Issue cloned; see https://acme.atlassian.net/browse/WID-1" in out.getvalue()


def test_account_lookup_non_2xx_reports_status(make_session, response, issue):
    session = make_session(response(401, {"message": "unauthorized"}))
    out = io.StringIO()

    with pytest.raises(JiraAPIError) as excinfo:
        clone(issue, _config(session), out=out)

    assert excinfo.value.status == 401
    assert "Error cloning issue" in out.getvalue()
    assert "401" in str(excinfo.value)
    assert session.calls_to("/issue") == []


def test_account_lookup_transport_error_has_no_status(make_session, issue):
    session = make_session(requests.ConnectionError("connection reset"))

    with pytest.raises(JiraAPIError) as excinfo:
        clone(issue, _config(session), out=io.StringIO())

    assert excinfo.value.status is None
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


def test_account_lookup_decode_error_has_no_status(make_session, response, issue):
    session = make_session(response(200, raw_text="<html>not json</html>"))

    with pytest.raises(JiraAPIError) as excinfo:
        clone(issue, _config(session), out=io.StringIO())

    assert excinfo.value.status is None
    assert "decode" in str(excinfo.value)


def test_create_failure_prints_and_raises(make_session, response, issue):
    session = make_session(
        response(200, {"accountId": "abc123"}),
        response(400, {"errorMessages": [], "errors": {"project": "project is required"}}),
    )
    out = io.StringIO()

    with pytest.raises(CloneError) as excinfo:
        clone(issue, _config(session), out=out)

    assert excinfo.value.partial is None
    assert isinstance(excinfo.value.__cause__, JiraAPIError)
    assert excinfo.value.__cause__.status == 400
    assert "Error cloning issue: " in out.getvalue()
    assert "project is required" in out.getvalue()


def test_create_failure_keeps_partial_result(make_session, response, issue):
    session = make_session(
        response(200, {"accountId": "abc123"}),
        response(500, {"key": "WID-9", "id": "10009", "errorMessages": ["workflow failed"]}),
    )

    with pytest.raises(CloneError) as excinfo:
        clone(issue, _config(session), out=io.StringIO())

    assert excinfo.value.partial is not None
    assert excinfo.value.partial.key == "WID-9"


def test_every_live_clone_creates_a_new_issue(make_session, response, issue):
    session = make_session(
        response(200, {"accountId": "abc123"}),
        response(201, {"id": "1", "key": "WID-1"}),
        response(200, {"accountId": "abc123"}),
        response(201, {"id": "2", "key": "WID-2"}),
    )
    cfg = _config(session)

    first = clone(issue, cfg, out=io.StringIO())
    second = clone(issue, cfg, out=io.StringIO())

    assert first is not None and second is not None
    assert (first.key, second.key) == ("WID-1", "WID-2")
    assert len(session.calls_to("/issue")) == 2


def test_missing_token_fails_before_any_request(monkeypatch, issue):
    built: list[tuple[str, str]] = []
    monkeypatch.setattr(cloner, "build_session", lambda user, token: built.append((user, token)))

    with pytest.raises(AuthenticationError):
        clone(issue, ClonerConfig(project="WID", dry_run=True), out=io.StringIO())
    assert built == []


def test_token_builds_basic_auth_session():
    cfg = ClonerConfig(token="secret", jira_username="me@acme.io")
    session = cfg.set_defaults()

    assert session is cfg.session
    assert cfg.session is not None
    assert cfg.session.auth == HTTPBasicAuth("me@acme.io", "secret")


def test_apply_last_write_wins():
    cfg = ClonerConfig().apply(dry_run=True, project="A").apply(project="B")
    assert cfg.dry_run is True
    assert cfg.project == "B"


def test_injected_session_is_returned_unchanged(make_session):
    session = make_session()
    assert ClonerConfig(session=session).set_defaults() is session
