"""Command line interface for git-context."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from git_context.context.analyzers.diff import get_diff_stats, get_parsed_diff
from git_context.context.analyzers.log import get_recent_commits
from git_context.context.analyzers.status import get_git_status
from git_context.context.extractor import format_context, get_git_context
from git_context.monitoring.logging import configure_logging, get_logger
from git_context.utils.exceptions import GitContextError

logger = get_logger(__name__)


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2))


def command_context(args: argparse.Namespace, console: Console) -> int:
    """Print the full context, as markdown or JSON."""
    context = get_git_context(
        cwd=args.cwd,
        max_commits=args.max_commits,
        diff_context=args.diff_context,
        include_untracked=not args.no_untracked,
        sanitize_for_ai=not args.raw,
    )
    if args.json:
        _print_json(context.to_dict())
    else:
        console.print(format_context(context, compact=args.compact), markup=False, highlight=False, soft_wrap=True)
    return 0


def command_status(args: argparse.Namespace, console: Console) -> int:
    """Show staged, modified, untracked and deleted files."""
    status = get_git_status(cwd=args.cwd)
    if args.json:
        _print_json(status.to_dict())
        return 0

    if status.is_clean and not status.untracked:
        console.print("[green]Working tree clean[/]")
        return 0

    table = Table(box=box.SIMPLE, title="Working Tree Status")
    table.add_column("Status", style="cyan")
    table.add_column("Path", style="white")
    for label, style, paths in (
        ("staged", "green", status.staged),
        ("modified", "yellow", status.modified),
        ("deleted", "red", status.deleted),
        ("untracked", "dim", status.untracked),
    ):
        for path in paths:
            table.add_row(f"[{style}]{label}[/]", escape(path))
    console.print(table)
    return 0


def command_log(args: argparse.Namespace, console: Console) -> int:
    """Show recent commits."""
    commits = get_recent_commits(limit=args.limit, branch=args.branch, cwd=args.cwd)
    if args.json:
        _print_json([commit.to_dict() for commit in commits])
        return 0

    if not commits:
        console.print("[yellow]No commits yet.[/]")
        return 0

    table = Table(box=box.SIMPLE, title="Recent Commits")
    table.add_column("Hash", style="cyan")
    table.add_column("Date", style="blue")
    table.add_column("Author", style="magenta")
    table.add_column("Subject", style="white")
    for commit in commits:
        table.add_row(commit.short_hash, commit.date.strftime("%Y-%m-%d"), escape(commit.author), escape(commit.subject))
    console.print(table)
    return 0


def command_diff(args: argparse.Namespace, console: Console) -> int:
    """Show per-file diff statistics."""
    if args.stat:
        stats = get_diff_stats(staged=args.staged, cwd=args.cwd)
        if args.json:
            _print_json(stats.to_dict())
        else:
            console.print(f"{stats.files_changed} files changed, +{stats.additions} -{stats.deletions}")
        return 0

    diff = get_parsed_diff(staged=args.staged, cwd=args.cwd)
    if args.json:
        _print_json(diff.to_dict())
        return 0

    if not diff.files:
        console.print("[green]No changes[/]")
        return 0

    table = Table(box=box.SIMPLE, title="Staged Changes" if args.staged else "Unstaged Changes")
    table.add_column("File", style="white")
    table.add_column("Change", style="cyan")
    table.add_column("+", style="green", justify="right")
    table.add_column("-", style="red", justify="right")
    for diff_file in diff.files:
        path = f"{diff_file.old_path} -> {diff_file.path}" if diff_file.old_path else diff_file.path
        table.add_row(escape(path), diff_file.status.value, str(diff_file.additions), str(diff_file.deletions))
    console.print(table)
    console.print(
        f"[dim]{diff.stats.files_changed} files, +{diff.stats.additions} -{diff.stats.deletions}[/]"
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Construct the CLI argument parser."""

    parser = argparse.ArgumentParser(
        prog="git-context", description="Sanitized git working tree context for AI agents"
    )
    parser.add_argument("-C", dest="cwd", metavar="PATH", help="Run as if started in PATH")
    parser.add_argument("--log-level", help="debug, info, warning or error (default: GIT_CONTEXT_LOG_LEVEL)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    context_parser = subparsers.add_parser("context", help="Print the full git context")
    context_parser.add_argument("--json", action="store_true", help="Output as JSON")
    context_parser.add_argument("--compact", action="store_true", help="Compact summary for constrained prompts")
    context_parser.add_argument("--max-commits", type=int, default=10, help="Recent commits to include (default: 10)")
    context_parser.add_argument("--diff-context", type=int, default=3, help="Context lines around diff changes (default: 3)")
    context_parser.add_argument("--no-untracked", action="store_true", help="Leave out untracked files")
    context_parser.add_argument("--raw", action="store_true", help="Skip sanitization")

    status_parser = subparsers.add_parser("status", help="Show working tree status")
    status_parser.add_argument("--json", action="store_true", help="Output as JSON")

    log_parser = subparsers.add_parser("log", help="Show recent commits")
    log_parser.add_argument("-n", dest="limit", type=int, default=10, help="Number of commits (default: 10)")
    log_parser.add_argument("--branch", help="Branch or commit to read from (default: HEAD)")
    log_parser.add_argument("--json", action="store_true", help="Output as JSON")

    diff_parser = subparsers.add_parser("diff", help="Show changed files with line counts")
    diff_parser.add_argument("--staged", action="store_true", help="Diff the index against HEAD")
    diff_parser.add_argument("--stat", action="store_true", help="Only aggregate counts")
    diff_parser.add_argument("--json", action="store_true", help="Output as JSON")

    return parser


COMMANDS = {
    "context": command_context,
    "status": command_status,
    "log": command_log,
    "diff": command_diff,
}


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""

    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(level=args.log_level)

    console = Console()
    try:
        return COMMANDS[args.command](args, console)
    except GitContextError as e:
        logger.debug("cli.command.failed", command=args.command, error_type=type(e).__name__)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
