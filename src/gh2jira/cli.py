"""gh2jira CLI.

Subcommands:
  list   -> list open GitHub issues filtered by milestone, assignee or label
  clone  -> clone one or more GitHub issues into a Jira project (or preview with --dry-run)

Credentials come from a ``gh2jira.config`` YAML file (``--config``); the older
standalone token file is still accepted via ``--token-file``.
"""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import requests

from gh2jira import __version__
from gh2jira.cloner import ClonerConfig, clone
from gh2jira.config import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_JIRA_BASE_URL,
    SCHEMA_NAME,
    Gh2JiraConfig,
    load_config,
    read_tokens,
)
from gh2jira.errors import ConfigError, Gh2JiraError, classify_error
from gh2jira.lister import ListerConfig, get_issue, list_issues, print_github_issue
from gh2jira.logging import configure_logging
from gh2jira.ux import print_error

DEFAULT_PROJECT = "operator-framework/operator-sdk"
PROJECT_HELP = "Github project to use e.g. ORG/REPO"

_MAX_HELP_WIDTH = 100


class _HelpFormatter(argparse.HelpFormatter):
    def __init__(self, prog: str) -> None:
        super().__init__(prog, max_help_position=30, width=_MAX_HELP_WIDTH)


class _FormatterArgumentParser(argparse.ArgumentParser):
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("formatter_class", _HelpFormatter)
        super().__init__(*args, **kwargs)


class _LabelAction(argparse.Action):
    """Accept ``--label doc --label bug`` as well as ``--label doc,bug``."""

    def __call__(self, parser: Any, namespace: Any, values: Any, option_string: Any = None) -> None:
        current = list(getattr(namespace, self.dest, None) or [])
        current.extend(v.strip() for v in str(values).split(",") if v.strip())
        setattr(namespace, self.dest, current)


def _add_credentials_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--config", default=DEFAULT_CONFIG_FILE, help="gh2jira.config YAML file")
    p.add_argument(
        "--token-file",
        help="Legacy YAML file with githubToken/jiraToken (overrides tokens from --config)",
    )
    p.add_argument("--project", default=DEFAULT_PROJECT, help=PROJECT_HELP)


def _build_parser() -> argparse.ArgumentParser:
    """Construct top-level CLI parser with subcommands."""
    p = _FormatterArgumentParser(prog="gh2jira", description="Mirror GitHub issues into Jira")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--quiet", action="store_true", help="Only log errors (env: GH2JIRA_QUIET=1)")
    p.add_argument("--log-json", action="store_true", help="Emit JSON log lines on stderr")
    p.add_argument("--log-level", default="INFO", help="Logging level (default INFO)")
    sub = p.add_subparsers(
        dest="cmd",
        required=True,
        parser_class=_FormatterArgumentParser,
        metavar="<command>",
    )

    pl = sub.add_parser("list", help="List Github issues filtered by milestone, assignee, or label")
    _add_credentials_args(pl)
    pl.add_argument("--milestone", default="", help="the milestone ID from the url, not the display name")
    pl.add_argument("--assignee", default="", help="username of the issue is assigned")
    pl.add_argument(
        "--label",
        action=_LabelAction,
        default=[],
        help='label i.e. --label "documentation,bug" or --label doc --label bug',
    )

    pc = sub.add_parser("clone", help="Clone Github issues to a Jira project board")
    _add_credentials_args(pc)
    pc.add_argument("issues", nargs="+", type=int, metavar="ISSUE", help="Github issue numbers")
    pc.add_argument("--jira-project", required=True, help="Jira project key, e.g. WID")
    pc.add_argument("--jira-base-url", help="Override jiraBaseURL from the config file")
    pc.add_argument("--jira-username", help="Override jiraUsername from the config file")
    pc.add_argument("--dry-run", action="store_true", help="Print the Jira issue instead of creating it")
    return p


def _load_settings(args: argparse.Namespace) -> Gh2JiraConfig:
    if not args.token_file:
        return load_config(args.config, load_env=True)
    tokens = read_tokens(args.token_file)
    # A token file alone is enough; the config file then only adds Jira settings.
    if not Path(args.config).exists():
        return Gh2JiraConfig(
            schema=SCHEMA_NAME,
            jira_base_url=DEFAULT_JIRA_BASE_URL,
            jira_username="",
            tokens=tokens,
        )
    cfg = load_config(args.config, load_env=True, require_tokens=False)
    cfg.tokens = tokens
    return cfg


def _cmd_list(args: argparse.Namespace) -> int:
    cfg = _load_settings(args)
    issues = list_issues(
        ListerConfig(
            token=cfg.tokens.github,
            milestone=args.milestone,
            assignee=args.assignee,
            labels=list(args.label),
            project=args.project,
        )
    )
    for issue in issues:
        if issue.is_pull_request:
            continue
        print_github_issue(issue, show_labels=True, show_url=True)
    return 0


def _cmd_clone(args: argparse.Namespace) -> int:
    cfg = _load_settings(args)
    lister = ListerConfig(token=cfg.tokens.github, project=args.project)
    cloner = ClonerConfig(
        token=cfg.tokens.jira,
        dry_run=args.dry_run,
        project=args.jira_project,
        jira_base_url=args.jira_base_url or cfg.jira_base_url,
        jira_username=args.jira_username or cfg.jira_username,
    )
    if not cloner.dry_run and not cloner.jira_username:
        raise ConfigError("missing required jira username (set jiraUsername or --jira-username)")
    for number in args.issues:
        issue = get_issue(number, lister)
        if issue.is_pull_request:
            print(f"#{number} is a pull request; skipping")
            continue
        clone(issue, cloner)
    return 0


def _build_handlers(args: argparse.Namespace) -> dict[str, Callable[[], int]]:
    return {
        "list": lambda: _cmd_list(args),
        "clone": lambda: _cmd_clone(args),
    }


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if not args.quiet and os.environ.get("GH2JIRA_QUIET") == "1":
        args.quiet = True
    configure_logging(json_logging=args.log_json, level="ERROR" if args.quiet else args.log_level)
    handler = _build_handlers(args).get(args.cmd)
    if handler is None:  # pragma: no cover - argparse enforces valid choices
        parser.print_help()
        return 1
    try:
        return handler()
    except (Gh2JiraError, requests.RequestException) as exc:
        info = classify_error(exc)
        print_error(f"[{info.category}] {info.message}", stream=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
