"""Context aggregator: one call, one consistent snapshot of the working tree."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional, Union

from git_context.config import GitContextOptions
from git_context.context.analyzers.branch import get_current_branch
from git_context.context.analyzers.diff import get_parsed_diff
from git_context.context.analyzers.log import get_recent_commits
from git_context.context.analyzers.repository import get_repository_info
from git_context.context.analyzers.status import changed_files_from_status, get_git_status
from git_context.context.sanitize import sanitize_for_ai_context
from git_context.core.validators import validate_options
from git_context.models import GitContext
from git_context.monitoring.logging import get_logger

logger = get_logger(__name__)

OptionsLike = Union[GitContextOptions, Mapping[str, Any], None]


def get_git_context(
    options: OptionsLike = None,
    *,
    cwd: Optional[Union[str, Path]] = None,
    **overrides: Any,
) -> GitContext:
    """Extract repository, branch, status, commits and diff in one pass.

    Parsers run with sanitization off; the whole context is sanitized once at
    the end unless ``sanitize_for_ai`` is False. Any failure aborts the call.

    Args:
        options: :class:`GitContextOptions` or a mapping of option values
        cwd: Working directory (defaults to the process cwd)
        **overrides: Individual option values, e.g. ``max_commits=5``

    Returns:
        Complete :class:`GitContext`

    Raises:
        ValidationError: If an option is invalid
        PreconditionError: If cwd is not inside a git working tree
        CommandError: If a git command fails

    Example:
        context = get_git_context(max_commits=5)
        print(context.branch.current, len(context.changed_files))
    """
    opts = validate_options(options, **overrides)
    logger.debug("context.extract.start", **opts.model_dump())

    repository = get_repository_info(sanitize=False, cwd=cwd)
    branch = get_current_branch(cwd)
    status = get_git_status(include_untracked=opts.include_untracked, cwd=cwd)
    commits = get_recent_commits(limit=opts.max_commits, sanitize=False, cwd=cwd)
    diff = get_parsed_diff(context=opts.diff_context, cwd=cwd)

    context = GitContext(
        repository=repository,
        branch=branch,
        status=status,
        recent_commits=commits,
        diff=diff,
        changed_files=changed_files_from_status(status),
    )
    if opts.sanitize_for_ai:
        context = sanitize_for_ai_context(context)

    logger.debug(
        "context.extract.complete",
        branch=context.branch.current,
        commits=len(context.recent_commits),
        changed=len(context.changed_files),
        sanitized=opts.sanitize_for_ai,
    )
    return context


def format_context(
    context: GitContext,
    *,
    compact: bool = False,
    max_commits: int = 5,
    max_files: int = 10,
) -> str:
    """Format a context as a markdown section for prompt injection.

    Args:
        context: Context to format
        compact: Use the one-line-per-area variant
        max_commits: Commits to list
        max_files: Changed files to list

    Returns:
        Formatted context string
    """
    if compact:
        return format_compact(context)

    repo = context.repository
    branch = context.branch
    lines = ["## Git Context", f"  Repository: {repo.root}"]
    if repo.remote:
        lines.append(f"  Remote: {repo.remote}")

    branch_line = f"  Branch: {branch.current}"
    if branch.is_detached:
        branch_line += " (detached)"
    elif branch.tracking:
        branch_line += f" -> {branch.upstream} (ahead {branch.commits_ahead}, behind {branch.commits_behind})"
    lines.append(branch_line)

    if context.status.is_clean:
        lines.append("  Status: Clean")
    else:
        status = context.status
        lines.append(
            f"  Status: {len(status.staged)} staged, {len(status.modified)} modified, "
            f"{len(status.deleted)} deleted, {len(status.untracked)} untracked"
        )

    if context.recent_commits:
        lines.append(f"\n  Recent Commits ({len(context.recent_commits)}):")
        for commit in context.recent_commits[:max_commits]:
            date_str = commit.date.strftime("%Y-%m-%d")
            lines.append(f"    {commit.short_hash} ({date_str}) {commit.subject[:60]}")

    if context.changed_files:
        lines.append(f"\n  Changed Files ({len(context.changed_files)}):")
        for changed in context.changed_files[:max_files]:
            lines.append(f"    [{changed.status.value}] {changed.path}")
        if len(context.changed_files) > max_files:
            lines.append(f"    ... and {len(context.changed_files) - max_files} more")

    stats = context.diff.stats
    if stats.files_changed:
        lines.append(
            f"\n  Diff: {stats.files_changed} files, +{stats.additions} -{stats.deletions}"
        )

    return "\n".join(lines)


def format_compact(context: GitContext) -> str:
    """Format a compact summary for constrained prompts."""
    branch_info = [f"Branch: {context.branch.current}"]
    if context.branch.tracking:
        branch_info.append(f"ahead {context.branch.commits_ahead}")
        branch_info.append(f"behind {context.branch.commits_behind}")

    status_info = ["Clean"] if context.status.is_clean else [f"{len(context.changed_files)} changed"]
    stats = context.diff.stats
    if stats.files_changed:
        status_info.append(f"+{stats.additions} -{stats.deletions}")

    parts = [" | ".join(branch_info), " | ".join(status_info)]
    if context.recent_commits:
        latest = context.recent_commits[0]
        parts.append(f"Last commit: {latest.short_hash} {latest.subject[:60]}")
    return "\n".join(parts)


class ContextExtractor:
    """Extracts git context for one working directory.

    Holds only the directory and options; every :meth:`extract` re-reads the
    live working tree.
    """

    def __init__(
        self,
        root_path: Optional[Union[str, Path]] = None,
        options: OptionsLike = None,
    ):
        """Initialize the context extractor.

        Args:
            root_path: Directory to inspect (defaults to the current directory)
            options: Options applied to every extraction
        """
        self.root_path = Path(root_path).resolve() if root_path is not None else Path.cwd()
        self.options = validate_options(options)

    def extract(self, **overrides: Any) -> GitContext:
        """Extract context, with per-call option overrides."""
        return get_git_context(self.options, cwd=self.root_path, **overrides)

    def format(self, compact: bool = False, **overrides: Any) -> str:
        """Extract and format context in one step."""
        return format_context(self.extract(**overrides), compact=compact)
