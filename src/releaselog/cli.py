"""Command line entry point printing extracted history as JSON."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Iterable

from .config import HistoryConfig, load_config
from .errors import HistoryError
from .git.repo import GitRepo
from .history import commits, tags


def _resolve_config(args: argparse.Namespace) -> HistoryConfig:
    config = load_config(args.config)
    if args.repo is not None:
        config.repo_path = args.repo
    if args.verbose:
        config.log_level = "DEBUG"
    return config


def _print_json(payload: Any, config: HistoryConfig) -> None:
    print(json.dumps(payload, indent=config.json_indent, ensure_ascii=False))


def _commits(repo: GitRepo, config: HistoryConfig) -> Any:
    return [commit.to_dict() for commit in commits(repo)]


def _tags(repo: GitRepo, config: HistoryConfig) -> Any:
    return [tag.to_dict() for tag in tags(repo, prefix=config.strip_prefix)]


def _history(repo: GitRepo, config: HistoryConfig) -> Any:
    return {"commits": _commits(repo, config), "tags": _tags(repo, config)}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="releaselog",
        description="Extract first-parent commits and release tags from a git repository",
    )
    parser.add_argument(
        "--repo",
        type=Path,
        default=None,
        help="Repository to read (default: current directory)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON file with configuration overrides (default: releaselog.json if present)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log repository reads to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    commits_parser = subparsers.add_parser("commits", help="Print first-parent commits, oldest first")
    commits_parser.set_defaults(func=_commits)

    tags_parser = subparsers.add_parser("tags", help="Print release tags sorted by version")
    tags_parser.set_defaults(func=_tags)

    history_parser = subparsers.add_parser("history", help="Print both commits and tags")
    history_parser.set_defaults(func=_history)

    return parser


def main(argv: Iterable[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    try:
        config = _resolve_config(args)
        logging.basicConfig(
            level=config.log_level,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )
    except (OSError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    try:
        with GitRepo(config.repo_path) as repo:
            payload = args.func(repo, config)
    except HistoryError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    _print_json(payload, config)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
