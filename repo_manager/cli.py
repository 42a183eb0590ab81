"""Command-line entry point: ``repo-manager <command> [args] REPO [REPO ...]``."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from rich.console import Console
from rich.markup import escape

from . import __version__
from .config import ConfigError, load_settings, resolve_token
from .display import (
    display_assignment_report,
    display_batch_result,
    display_labels,
    display_repositories,
)
from .github_client import AsyncGitHubClient, GitHubAPIError
from .manager import RepoManager
from .repo_spec import InvalidRepoSpec

log = logging.getLogger(__name__)
console = Console(stderr=True)

REPOS_HELP = "Repositories as owner/name or owner/regex (regex must match the whole name)"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repo-manager",
        description="Act on a GitHub repository or a collection of repositories.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--token", default=None, help="GitHub token (default: $GITHUB_TOKEN, then config file)")
    parser.add_argument("--config", default=None, help="Path to the JSON config file")
    parser.add_argument("--debug", action="store_true", default=False, help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)

    p = sub.add_parser("list", help="List matching repositories")
    p.add_argument("-v", "--verbose", action="store_true", help="Print the full repository records")
    p.add_argument("repos", nargs="+", metavar="REPO", help=REPOS_HELP)

    p = sub.add_parser("list-labels", help="List the labels of matching repositories")
    p.add_argument("--group", action="store_true", help="Group labels under each repository")
    p.add_argument("repos", nargs="+", metavar="REPO", help=REPOS_HELP)

    p = sub.add_parser("add-labels", help="Create a configured label set in matching repositories")
    p.add_argument("label_set", help="Key of a label set in the config file")
    p.add_argument("repos", nargs="+", metavar="REPO", help=REPOS_HELP)

    p = sub.add_parser("add-milestone", help="Create a milestone in matching repositories")
    p.add_argument("title", help="Milestone title")
    p.add_argument("-d", "--description", default=None, help="Milestone description")
    p.add_argument("repos", nargs="+", metavar="REPO", help=REPOS_HELP)

    p = sub.add_parser("assign-all", help="Assign every open, unassigned issue to one user")
    p.add_argument("assignee", help="GitHub login to assign")
    p.add_argument("-v", "--verbose", action="store_true", help="Report every issue")
    p.add_argument("repos", nargs="+", metavar="REPO", help=REPOS_HELP)

    return parser


async def run_command(
    args: argparse.Namespace, manager: RepoManager, labels: dict[str, str] | None = None,
) -> int:
    """Execute one parsed command against ``manager``; returns the exit code."""
    if args.command == "list":
        display_repositories(await manager.list_repos(args.repos), verbose=args.verbose)
        return 0

    if args.command == "list-labels":
        display_labels(await manager.list_labels(args.repos), group=args.group)
        return 0

    if args.command == "add-labels":
        _, result = await manager.add_labels(args.repos, labels or {})
        display_batch_result(result, title=f"Labels: {args.label_set}")
        return 0 if result.ok else 1

    if args.command == "add-milestone":
        _, result = await manager.add_milestone(args.repos, args.title, args.description)
        display_batch_result(result, title=f"Milestone: {args.title}")
        return 0 if result.ok else 1

    if args.command == "assign-all":
        repos, result = await manager.assign_all(args.repos, args.assignee)
        if args.verbose:
            display_assignment_report(repos, args.assignee)
        display_batch_result(result, title=f"Assign to {args.assignee}")
        return 0 if result.ok else 1

    raise ValueError(f"Unknown command: {args.command}")


async def _main(args: argparse.Namespace) -> int:
    settings = load_settings(args.config)
    labels = settings.label_set(args.label_set) if args.command == "add-labels" else None

    token = resolve_token(args.token, settings)
    if not token:
        log.warning("No GitHub token configured; requests are unauthenticated")

    async with AsyncGitHubClient(token) as client:
        return await run_command(args, RepoManager(client), labels)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return asyncio.run(_main(args))
    except (InvalidRepoSpec, ConfigError) as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}", highlight=False)
        return 2
    except GitHubAPIError as exc:
        console.print(f"[red]GitHub error:[/red] {escape(str(exc))}", highlight=False)
        return 1


if __name__ == "__main__":
    sys.exit(main())
