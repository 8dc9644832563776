"""Repository-level information: root, remote and cleanliness."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from git_context.context.sanitize import sanitize_remote_url
from git_context.core.executor import ensure_repository, run_git, run_git_detailed
from git_context.core.validators import validate_branch_name
from git_context.models import RepositoryInfo
from git_context.monitoring.logging import get_logger
from git_context.utils.exceptions import CommandError, PreconditionError

logger = get_logger(__name__)

DEFAULT_REMOTE = "origin"


def find_git_root(cwd: Optional[Union[str, Path]] = None) -> str:
    """Return the absolute path of the working tree root.

    Args:
        cwd: Directory to start from (defaults to the process cwd)

    Raises:
        PreconditionError: If cwd is not inside a git working tree
    """
    try:
        output = run_git(["rev-parse", "--show-toplevel"], cwd=cwd)
    except PreconditionError:
        raise
    except CommandError as exc:
        # Bare repositories and .git directories have no working tree
        raise PreconditionError(exc.message, exit_code=exc.exit_code, stderr=exc.stderr) from exc
    root = output.strip()
    if not root:
        raise PreconditionError("Not inside a git working tree")
    return root


def is_inside_git_repo(cwd: Optional[Union[str, Path]] = None) -> bool:
    """Check whether cwd is inside a git working tree."""
    try:
        find_git_root(cwd)
    except PreconditionError:
        return False
    return True


def get_remote_url(
    *,
    remote: str = DEFAULT_REMOTE,
    sanitize: bool = True,
    cwd: Optional[Union[str, Path]] = None,
) -> Optional[str]:
    """Return the URL of a remote, or None if it is not configured.

    Args:
        remote: Remote name
        sanitize: Mask credentials embedded in the URL
        cwd: Working directory
    """
    validate_branch_name(remote)
    result = ensure_repository(run_git_detailed(["remote", "get-url", remote], cwd=cwd))
    if not result.ok:
        logger.debug("git.repository.no_remote", remote=remote)
        return None

    url = result.stdout.strip()
    if not url:
        return None
    return sanitize_remote_url(url) if sanitize else url


def is_repository_clean(cwd: Optional[Union[str, Path]] = None) -> bool:
    """True when no tracked file has staged or unstaged changes.

    Untracked files do not make a repository dirty.
    """
    output = run_git(["status", "--porcelain", "--untracked-files=no"], cwd=cwd)
    return not output.strip()


def get_repository_info(
    *,
    sanitize: bool = True,
    cwd: Optional[Union[str, Path]] = None,
) -> RepositoryInfo:
    """Collect root path, origin URL and clean flag.

    Args:
        sanitize: Mask credentials in the remote URL
        cwd: Working directory

    Raises:
        PreconditionError: If cwd is not inside a git working tree
    """
    root = find_git_root(cwd)
    remote = get_remote_url(sanitize=sanitize, cwd=cwd)
    is_clean = is_repository_clean(cwd)

    logger.debug("git.repository.complete", has_remote=remote is not None, clean=is_clean)
    return RepositoryInfo(root=root, remote=remote, is_clean=is_clean)
