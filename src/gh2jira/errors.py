"""Error taxonomy & redaction.

Every failure in gh2jira surfaces as a subclass of :class:`Gh2JiraError` so
the CLI can report it uniformly. Nothing here retries or swallows; the helpers
only describe an error for display.

Public API:
- Gh2JiraError and its subclasses
- classify_error(exc) -> ErrorInfo
- redact(text) -> str
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

import requests

_SENSITIVE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"ghp_[A-Za-z0-9]{20,40}"),  # GitHub classic tokens
    re.compile(r"github_pat_\w{20,}"),  # GitHub fine-grained tokens
    re.compile(r"ATATT[A-Za-z0-9_\-=]{20,}"),  # Atlassian API tokens
    re.compile(r"(?i)(authorization:\s*(?:basic|bearer)\s+)\S+"),
]

_REDACTION_PLACEHOLDER = "<redacted>"


class Gh2JiraError(RuntimeError):
    """Base class for all gh2jira failures."""


class ConfigError(Gh2JiraError):
    """Raised when a config or token file cannot be read or is invalid."""


class AuthenticationError(Gh2JiraError):
    """Raised when a client is configured without a token or session."""


class _APIError(Gh2JiraError):
    service = "API"

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        response_text: str | None = None,
        payload: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.status = status
        self.response_text = response_text
        self.payload = payload


class GitHubAPIError(_APIError):
    """Raised when the GitHub REST API returns an error or is unreachable."""

    service = "GitHub"


class JiraAPIError(_APIError):
    """Raised when the Jira REST API returns an error or is unreachable.

    ``status`` is set only when the service answered with a non-2xx status;
    transport and decode failures leave it ``None``.
    """

    service = "Jira"


class CloneError(Gh2JiraError):
    """Raised when creating the Jira issue fails.

    ``partial`` holds whatever the service handed back before failing (may be
    ``None``); the caller decides what to do with it.
    """

    def __init__(self, message: str, *, partial: Any = None):
        super().__init__(message)
        self.partial = partial


@dataclass
class ErrorInfo:
    category: str
    message: str
    original_type: str
    transient: bool = False
    details: dict[str, Any] | None = None


def redact(text: str) -> str:
    """Replace token-looking substrings with a placeholder."""
    if not text:
        return text
    redacted = text
    for pat in _SENSITIVE_PATTERNS:
        if pat.groups:
            redacted = pat.sub(lambda m: m.group(1) + _REDACTION_PLACEHOLDER, redacted)
        else:
            redacted = pat.sub(_REDACTION_PLACEHOLDER, redacted)
    return redacted


def classify_error(exc: BaseException) -> ErrorInfo:
    """Best-effort classification of an exception for user-facing output.

    - AuthenticationError -> 'auth'
    - ConfigError -> 'config'
    - API errors with 401/403 -> 'auth'; rate limit text -> 'github.rate_limit'
    - API errors with a status -> 'service'; without one -> 'network'
    - requests transport failures -> 'network'
    - YAML-ish messages -> 'parse'
    - Fallback -> 'generic'
    """
    msg = str(exc) if exc else ""
    low = msg.lower()
    name = exc.__class__.__name__

    if isinstance(exc, AuthenticationError):
        return ErrorInfo("auth", redact(msg), name)
    if isinstance(exc, ConfigError):
        return ErrorInfo("config", redact(msg), name)
    if "rate limit" in low or "secondary rate" in low:
        return ErrorInfo("github.rate_limit", redact(msg), name, transient=True)
    if isinstance(exc, _APIError):
        details = {"service": exc.service, "status": exc.status}
        if exc.status in (401, 403):
            return ErrorInfo("auth", redact(msg), name, details=details)
        if exc.status is None:
            return ErrorInfo("network", redact(msg), name, transient=True, details=details)
        return ErrorInfo("service", redact(msg), name, details=details)
    if isinstance(exc, requests.RequestException):
        return ErrorInfo("network", redact(msg), name, transient=True)
    if any(k in low for k in ("timeout", "connection reset", "temporarily unavailable")):
        return ErrorInfo("network", redact(msg), name, transient=True)
    if any(k in low for k in ("yaml", "scannererror", "parsererror")):
        return ErrorInfo("parse", redact(msg), name)
    return ErrorInfo("generic", redact(msg), name)


__all__ = [
    "AuthenticationError",
    "CloneError",
    "ConfigError",
    "ErrorInfo",
    "GitHubAPIError",
    "Gh2JiraError",
    "JiraAPIError",
    "classify_error",
    "redact",
]
