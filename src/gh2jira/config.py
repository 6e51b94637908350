from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

import yaml
from dotenv import load_dotenv

from .errors import ConfigError
from .logging import get_logger

SCHEMA_NAME = "gh2jira.config"
DEFAULT_CONFIG_FILE = "config.yaml"
DEFAULT_TOKEN_FILE = "tokens.yaml"
DEFAULT_JIRA_BASE_URL = "https://gh2jiratest.atlassian.net/"

Reader = Callable[[str], str]


@dataclass
class Tokens:
    github: str
    jira: str


@dataclass
class Gh2JiraConfig:
    schema: str
    jira_base_url: str
    jira_username: str
    tokens: Tokens


def _read_text(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


def _resolve_env_var(value: Any) -> Any:
    """Resolve environment variable if value starts with $."""
    if isinstance(value, str) and value.startswith("$"):
        return os.getenv(value[1:], value)
    return value


def _lookup(raw: dict[str, Any], key: str) -> Any:
    """Case-insensitive key lookup (``jiraBaseURL`` and ``jiraBaseUrl`` both match)."""
    if key in raw:
        return raw[key]
    wanted = key.lower()
    for k, v in raw.items():
        if isinstance(k, str) and k.lower() == wanted:
            return v
    return None


def _load_yaml(path: str, reader: Reader | None) -> dict[str, Any]:
    read = reader or _read_text
    try:
        text = read(path)
    except OSError as exc:
        raise ConfigError(f"cannot read {path}: {exc}") from exc
    try:
        raw = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid yaml in {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"invalid yaml in {path}: expected a mapping")
    return cast(dict[str, Any], raw)


def load_config(
    path: str | Path = DEFAULT_CONFIG_FILE,
    *,
    reader: Reader | None = None,
    load_env: bool = False,
    require_tokens: bool = True,
) -> Gh2JiraConfig:
    """Read and validate a ``gh2jira.config`` YAML file.

    ``reader`` replaces file access (tests pass a lambda returning text).
    Values written as ``$NAME`` are taken from the environment; with
    ``load_env`` a ``.env`` file is loaded first. ``require_tokens=False``
    accepts a file without ``authTokens``, for tokens supplied separately.
    """
    if load_env:
        load_dotenv()
    raw = _load_yaml(str(path), reader)
    schema = raw.get("schema")
    if schema != SCHEMA_NAME:
        raise ConfigError(f"invalid schema: {schema!r} should be {SCHEMA_NAME!r}")
    tokens = _lookup(raw, "authTokens") or {}
    if not isinstance(tokens, dict):
        raise ConfigError("authTokens must be a mapping")
    github_token = _resolve_env_var(tokens.get("github") or "")
    jira_token = _resolve_env_var(tokens.get("jira") or "")
    if require_tokens and not github_token:
        raise ConfigError("missing required github token")
    if require_tokens and not jira_token:
        raise ConfigError("missing required jira token")
    username = _resolve_env_var(_lookup(raw, "jiraUsername") or "")
    if not username:
        raise ConfigError("missing required jira username")
    base_url = _resolve_env_var(_lookup(raw, "jiraBaseUrl") or "") or DEFAULT_JIRA_BASE_URL
    get_logger().debug("loaded configuration", path=str(path), jira_base_url=base_url)
    return Gh2JiraConfig(
        schema=schema,
        jira_base_url=str(base_url),
        jira_username=str(username),
        tokens=Tokens(github=str(github_token), jira=str(jira_token)),
    )


def read_tokens(path: str | Path = DEFAULT_TOKEN_FILE, *, reader: Reader | None = None) -> Tokens:
    """Read the older standalone token file (``githubToken`` / ``jiraToken``)."""
    raw = _load_yaml(str(path), reader)
    github_token = _resolve_env_var(raw.get("githubToken") or "")
    jira_token = _resolve_env_var(raw.get("jiraToken") or "")
    if not github_token:
        raise ConfigError("missing required github token")
    if not jira_token:
        raise ConfigError("missing required jira token")
    return Tokens(github=str(github_token), jira=str(jira_token))


__all__ = [
    "DEFAULT_CONFIG_FILE",
    "DEFAULT_JIRA_BASE_URL",
    "DEFAULT_TOKEN_FILE",
    "Gh2JiraConfig",
    "SCHEMA_NAME",
    "Tokens",
    "load_config",
    "read_tokens",
]
