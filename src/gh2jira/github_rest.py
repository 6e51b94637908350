from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qs, urlparse

import requests

from . import __version__
from .errors import GitHubAPIError
from .logging import get_logger

DEFAULT_API_URL = "https://api.github.com"
USER_AGENT = f"gh2jira/{__version__}"
HTTP_ERROR_STATUS = 400
REQUEST_TIMEOUT = 30


def build_session(token: str) -> requests.Session:
    """Return a session that authenticates every request with ``token``."""
    session = requests.Session()
    session.headers["Authorization"] = f"Bearer {token}"
    return session


def next_page(response: Any) -> int:
    """Page number of the ``next`` relation in the Link header, 0 when absent."""
    links = getattr(response, "links", None) or {}
    url = (links.get("next") or {}).get("url")
    if not url:
        return 0
    values = parse_qs(urlparse(url).query).get("page")
    if not values:
        return 0
    try:
        return int(values[0])
    except ValueError:
        return 0


@dataclass
class GitHubRestClient:
    """Lightweight REST client for the GitHub issue endpoints."""

    org: str
    repo: str
    session: requests.Session
    base_url: str = DEFAULT_API_URL
    _logger: Any = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.session.headers.setdefault("Accept", "application/vnd.github+json")
        self.session.headers.setdefault("User-Agent", USER_AGENT)
        self._logger = get_logger()

    @property
    def slug(self) -> str:
        return f"{self.org}/{self.repo}"

    # ---- REST helpers -------------------------------------------------
    def _send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
    ) -> Any:
        url = f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"
        response = self.session.request(
            method,
            url,
            params=params,
            headers=self.session.headers,
            timeout=REQUEST_TIMEOUT,
        )
        if response.status_code >= HTTP_ERROR_STATUS:
            raise GitHubAPIError(
                f"GitHub API {method} {url} failed with {response.status_code}",
                status=response.status_code,
                response_text=response.text,
            )
        return response

    def _paginate(self, path: str, *, params: dict[str, Any]) -> list[Any]:
        params = dict(params)
        results: list[Any] = []
        while True:
            response = self._send("GET", path, params=params)
            data = response.json()
            if not isinstance(data, list):
                raise GitHubAPIError(
                    f"GitHub API GET {path} returned {type(data).__name__}, expected a list",
                    status=response.status_code,
                    response_text=response.text,
                )
            self._logger.debug(
                "fetched issue page", repo=self.slug, page=params.get("page", 1), count=len(data)
            )
            results.extend(data)
            page = next_page(response)
            if page == 0:
                break
            params["page"] = page
        return results

    # ---- Issue operations --------------------------------------------
    def list_issues(
        self,
        *,
        state: str = "open",
        per_page: int = 50,
        milestone: str = "",
        assignee: str = "",
        labels: Iterable[str] | None = None,
    ) -> list[dict[str, Any]]:
        params: dict[str, Any] = {"state": state, "per_page": per_page}
        if milestone:
            params["milestone"] = milestone
        if assignee:
            params["assignee"] = assignee
        label_list = [lbl for lbl in labels or [] if lbl]
        if label_list:
            params["labels"] = ",".join(label_list)
        return self._paginate(f"/repos/{self.slug}/issues", params=params)

    def get_issue(self, number: int) -> dict[str, Any]:
        response = self._send("GET", f"/repos/{self.slug}/issues/{number}")
        data = response.json()
        if not isinstance(data, dict):
            raise GitHubAPIError(
                f"GitHub API returned malformed issue #{number}",
                status=response.status_code,
                response_text=response.text,
            )
        return data


__all__ = ["GitHubRestClient", "build_session", "next_page"]
