"""Pytest configuration for gh2jira tests.

Ensures the in-repo `src` directory is on `sys.path` so the package can be
imported without an editable install, and provides in-memory stand-ins for
``requests.Session`` so no test touches the network.
"""

from __future__ import annotations

import json
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


class DummyResponse:
    def __init__(
        self,
        status_code: int,
        payload: Any = None,
        *,
        next_url: str | None = None,
        raw_text: str | None = None,
    ):
        self.status_code = status_code
        self.payload = payload
        self.links: dict[str, dict[str, str]] = {}
        if next_url:
            self.links["next"] = {"url": next_url, "rel": "next"}
        self._raw_text = raw_text

    def json(self) -> Any:
        if self._raw_text is not None:
            return json.loads(self._raw_text)
        return self.payload

    @property
    def text(self) -> str:
        if self._raw_text is not None:
            return self._raw_text
        if self.payload is None:
            return ""
        return json.dumps(self.payload)


class DummySession:
    """Replays queued responses (or raises queued exceptions) in order."""

    def __init__(self, responses: list[DummyResponse | Exception]):
        self._responses = list(responses)
        self.request_log: list[tuple[str, str, dict[str, Any]]] = []
        self.headers: dict[str, str] = {}
        self.auth: Any = None

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        json: Any | None = None,
        params: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> DummyResponse:
        self.request_log.append(
            (method, url, {"headers": headers, "json": json, "params": dict(params or {})})
        )
        if not self._responses:
            raise AssertionError("No response queued for request")
        nxt = self._responses.pop(0)
        if isinstance(nxt, Exception):
            raise nxt
        return nxt

    def calls_to(self, suffix: str) -> list[tuple[str, str, dict[str, Any]]]:
        return [entry for entry in self.request_log if entry[1].endswith(suffix)]


@pytest.fixture
def make_session() -> Callable[..., DummySession]:
    def _make(*responses: DummyResponse | Exception) -> DummySession:
        return DummySession(list(responses))

    return _make


@pytest.fixture
def response() -> type[DummyResponse]:
    return DummyResponse
