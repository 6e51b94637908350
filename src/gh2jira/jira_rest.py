from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import requests
from requests.auth import HTTPBasicAuth

from . import __version__
from .errors import JiraAPIError

API_PREFIX = "rest/api/latest"
USER_AGENT = f"gh2jira/{__version__}"
HTTP_ERROR_STATUS = 400
REQUEST_TIMEOUT = 30


def build_session(username: str, token: str) -> requests.Session:
    """Return a session using Jira Cloud basic auth (username + API token)."""
    session = requests.Session()
    session.auth = HTTPBasicAuth(username, token)
    return session


@dataclass
class JiraRestClient:
    """Minimal Jira REST client: current user lookup and issue creation."""

    base_url: str
    session: requests.Session

    def __post_init__(self) -> None:
        self.session.headers.setdefault("Accept", "application/json")
        self.session.headers.setdefault("User-Agent", USER_AGENT)

    def _url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{API_PREFIX}/{path.lstrip('/')}"

    def browse_url(self, key: str) -> str:
        return f"{self.base_url.rstrip('/')}/browse/{key}"

    def _request(self, method: str, path: str, *, json_body: Any | None = None) -> requests.Response:
        url = self._url(path)
        try:
            return self.session.request(
                method,
                url,
                json=json_body,
                headers=self.session.headers,
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as exc:
            raise JiraAPIError(f"Jira API {method} {url} failed: {exc}") from exc

    def get_account_id(self) -> str:
        """Account id of the authenticated user (``GET .../myself``).

        Raises JiraAPIError with ``status`` set for non-2xx answers, and
        without a status for transport or decode failures.
        """
        response = self._request("GET", "myself")
        if not 200 <= response.status_code < 300:
            raise JiraAPIError(
                f"failed to get jira account id: status code {response.status_code}",
                status=response.status_code,
                response_text=response.text,
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise JiraAPIError(f"failed to decode jira account response: {exc}") from exc
        account_id = data.get("accountId") if isinstance(data, dict) else None
        if not isinstance(account_id, str) or not account_id:
            raise JiraAPIError("jira account response did not include an accountId")
        return account_id

    def create_issue(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Submit ``payload`` to the issue-create endpoint and return the body.

        On a non-2xx answer the raised JiraAPIError keeps the decoded body in
        ``payload`` so the caller can inspect a partial result.
        """
        response = self._request("POST", "issue", json_body=payload)
        try:
            data = response.json() if response.text else None
        except ValueError:
            data = None
        body = data if isinstance(data, dict) else None
        if response.status_code >= HTTP_ERROR_STATUS:
            message = f"Jira API POST {self._url('issue')} failed with {response.status_code}"
            detail = _error_detail(body)
            if detail:
                message = f"{message}: {detail}"
            raise JiraAPIError(
                message,
                status=response.status_code,
                response_text=response.text,
                payload=body,
            )
        if body is None:
            raise JiraAPIError(
                "failed to decode jira create response", response_text=response.text
            )
        return body


def _error_detail(body: dict[str, Any] | None) -> str:
    if not body:
        return ""
    messages = [str(m) for m in body.get("errorMessages") or []]
    errors = body.get("errors") or {}
    if isinstance(errors, dict):
        messages.extend(f"{k}: {v}" for k, v in errors.items())
    return "; ".join(messages)


__all__ = ["API_PREFIX", "JiraRestClient", "build_session"]
