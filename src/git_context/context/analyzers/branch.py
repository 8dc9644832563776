"""Current branch and upstream tracking state."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from git_context.core.executor import run_git, run_git_detailed
from git_context.models import DETACHED_HEAD, BranchInfo
from git_context.monitoring.logging import get_logger
from git_context.utils.exceptions import ValidationError

logger = get_logger(__name__)


def parse_ahead_behind(output: str) -> tuple[int, int]:
    """Parse ``rev-list --left-right --count upstream...HEAD`` output.

    The output is ``"<behind>\\t<ahead>"``; anything else counts as zero.

    Returns:
        (behind, ahead)
    """
    parts = output.split()
    if len(parts) != 2:
        return 0, 0
    try:
        behind, ahead = int(parts[0]), int(parts[1])
    except ValueError:
        return 0, 0
    return max(behind, 0), max(ahead, 0)


def _get_upstream(cwd: Optional[Union[str, Path]]) -> Optional[str]:
    result = run_git_detailed(["rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{u}"], cwd=cwd)
    if not result.ok:
        return None
    return result.stdout.strip() or None


def get_current_branch(cwd: Optional[Union[str, Path]] = None) -> BranchInfo:
    """Read the current branch, its upstream and the ahead/behind counts.

    A detached HEAD is reported as ``"HEAD"``. Without an upstream, the
    upstream is None and both counts are zero.
    """
    current = run_git(["branch", "--show-current"], cwd=cwd).strip() or DETACHED_HEAD

    upstream = _get_upstream(cwd) if current != DETACHED_HEAD else None
    if upstream is None:
        logger.debug("git.branch.untracked", branch=current)
        return BranchInfo(current=current)

    behind, ahead = 0, 0
    try:
        counts = run_git_detailed(["rev-list", "--left-right", "--count", f"{upstream}...HEAD"], cwd=cwd)
    except ValidationError:
        # An upstream name git accepts but we would not pass back on a command line
        logger.warning("git.branch.upstream_rejected", branch=current)
    else:
        if counts.ok:
            behind, ahead = parse_ahead_behind(counts.stdout)

    logger.debug("git.branch.complete", branch=current, upstream=upstream, ahead=ahead, behind=behind)
    return BranchInfo(
        current=current,
        upstream=upstream,
        tracking=True,
        commits_ahead=ahead,
        commits_behind=behind,
    )


def get_current_branch_name(cwd: Optional[Union[str, Path]] = None) -> str:
    return get_current_branch(cwd).current


def get_upstream_branch(cwd: Optional[Union[str, Path]] = None) -> Optional[str]:
    return get_current_branch(cwd).upstream


def is_tracking_upstream(cwd: Optional[Union[str, Path]] = None) -> bool:
    return get_current_branch(cwd).tracking
