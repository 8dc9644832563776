"""Commit history from ``git log`` with a delimiter-separated pretty format."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from git_context.context.sanitize import sanitize_commit_message
from git_context.core.executor import ensure_repository, run_git, run_git_detailed
from git_context.core.validators import is_commit_hash, validate_positive_int, validate_revision
from git_context.models import Commit
from git_context.monitoring.logging import get_logger
from git_context.utils.exceptions import ValidationCause, ValidationError

logger = get_logger(__name__)

# ASCII record/unit separators never appear in normal commit text
FIELD_DELIMITER = "\x1e"
RECORD_DELIMITER = "\x1f"

# hash, author, email, author date (ISO 8601), subject, body
LOG_FORMAT = "%x1e".join(["%H", "%an", "%ae", "%aI", "%s", "%b"]) + "%x1f"
FIELD_COUNT = 6

SHORT_HASH_LENGTH = 7

DEFAULT_LIMIT = 10
DEFAULT_SINCE_LIMIT = 100


def _parse_date(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        logger.debug("git.log.bad_date", value=value)
        return datetime.now(timezone.utc)


def build_commit(
    commit_hash: str,
    author: str,
    email: str,
    date: datetime,
    subject: str,
    body: str = "",
    *,
    sanitize: bool = True,
) -> Commit:
    """Assemble a :class:`Commit`, optionally sanitizing its text fields."""
    message = f"{subject}\n\n{body}" if body else subject
    clean = sanitize_commit_message if sanitize else (lambda text: text)
    return Commit(
        hash=commit_hash,
        short_hash=commit_hash[:SHORT_HASH_LENGTH],
        author=clean(author),
        email=clean(email),
        date=date,
        message=clean(message),
        subject=clean(subject),
        body=clean(body),
    )


def parse_log_output(output: str, *, sanitize: bool = True) -> tuple[Commit, ...]:
    """Parse ``git log`` output produced with :data:`LOG_FORMAT`.

    Records with missing fields or a malformed hash are skipped.
    """
    commits = []
    for record in output.split(RECORD_DELIMITER):
        record = record.lstrip("\r\n")
        if not record.strip():
            continue

        fields = record.split(FIELD_DELIMITER, FIELD_COUNT - 1)
        if len(fields) < FIELD_COUNT:
            logger.debug("git.log.skipped_record", fields=len(fields))
            continue

        commit_hash, author, email, date_str, subject, body = fields
        if not is_commit_hash(commit_hash):
            logger.debug("git.log.skipped_record", reason="hash")
            continue

        commits.append(
            build_commit(
                commit_hash,
                author,
                email,
                _parse_date(date_str),
                subject,
                body.strip(),
                sanitize=sanitize,
            )
        )
    return tuple(commits)


def _has_commits(cwd: Optional[Union[str, Path]]) -> bool:
    return ensure_repository(run_git_detailed(["rev-parse", "--verify", "--quiet", "HEAD"], cwd=cwd)).ok


def _as_aware(value: datetime) -> datetime:
    # Naive datetimes are local time, as git reads a zone-less --since
    return value if value.tzinfo is not None else value.astimezone()


def get_recent_commits(
    *,
    limit: int = DEFAULT_LIMIT,
    branch: Optional[str] = None,
    since: Optional[datetime] = None,
    sanitize: bool = True,
    cwd: Optional[Union[str, Path]] = None,
) -> tuple[Commit, ...]:
    """Read recent commits, newest first.

    Args:
        limit: Maximum number of commits
        branch: Branch or commit to read from (defaults to HEAD)
        since: Only commits dated at or after this moment
        sanitize: Filter prompt-injection content from text fields
        cwd: Working directory

    Returns:
        Commits, or an empty tuple for a repository without commits

    Raises:
        ValidationError: If limit or branch is invalid
        CommandError: If git log fails, e.g. for an unknown branch
    """
    validate_positive_int(limit)
    args = ["log", f"--pretty=format:{LOG_FORMAT}", f"--max-count={limit}", "--no-color"]

    since_at = None
    if since is not None:
        if not isinstance(since, datetime):
            raise ValidationError("since must be a datetime", ValidationCause.INVALID_TYPE)
        since_at = _as_aware(since)
        args.append(f"--since={since_at.isoformat()}")

    if branch is not None:
        args.append(validate_revision(branch))
    elif not _has_commits(cwd):
        logger.debug("git.log.no_commits")
        return ()

    commits = parse_log_output(run_git(args, cwd=cwd), sanitize=sanitize)
    if since_at is not None:
        commits = tuple(commit for commit in commits if commit.date >= since_at)

    logger.debug("git.log.complete", commits=len(commits), branch=branch)
    return commits


def get_latest_commit(
    *,
    sanitize: bool = True,
    cwd: Optional[Union[str, Path]] = None,
) -> Optional[Commit]:
    """Return the HEAD commit, or None if the repository has no commits."""
    commits = get_recent_commits(limit=1, sanitize=sanitize, cwd=cwd)
    return commits[0] if commits else None


def get_commits_since(
    since: datetime,
    *,
    limit: int = DEFAULT_SINCE_LIMIT,
    sanitize: bool = True,
    cwd: Optional[Union[str, Path]] = None,
) -> tuple[Commit, ...]:
    """Return commits dated at or after ``since``, newest first."""
    return get_recent_commits(limit=limit, since=since, sanitize=sanitize, cwd=cwd)
