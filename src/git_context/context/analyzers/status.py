"""Working tree status from ``git status --porcelain``.

Porcelain v1 lines are ``XY path`` where X is the index (staged) state and Y
the working tree state. Each entry is classified into exactly one list, first
match wins:

==========================  ==========
code                        list
==========================  ==========
``??``                      untracked
``!!``                      (skipped)
unmerged (``UU``, ``AA``..)  modified
X is not a space            staged
Y is ``D``                  deleted
any other Y                 modified
==========================  ==========
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from git_context.core.executor import run_git
from git_context.models import ChangedFile, FileStatus, GitStatus
from git_context.monitoring.logging import get_logger

logger = get_logger(__name__)

UNMERGED_CODES = frozenset({"DD", "AU", "UD", "UA", "DU", "AA", "UU"})

_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    '"': '"',
    "\\": "\\",
}


def unquote_path(path: str) -> str:
    """Undo git's C-style quoting of unusual paths (``"caf\\303\\251.txt"``)."""
    if len(path) < 2 or not (path.startswith('"') and path.endswith('"')):
        return path

    body = path[1:-1]
    out = bytearray()
    i = 0
    while i < len(body):
        char = body[i]
        if char != "\\" or i + 1 >= len(body):
            out.extend(char.encode("utf-8"))
            i += 1
            continue
        nxt = body[i + 1]
        octal = body[i + 1 : i + 4]
        if len(octal) == 3 and all(c in "01234567" for c in octal):
            out.append(int(octal, 8) & 0xFF)
            i += 4
        else:
            out.extend(_ESCAPES.get(nxt, nxt).encode("utf-8"))
            i += 2
    return out.decode("utf-8", errors="replace")


def _entry_path(code: str, raw: str) -> str:
    # Renames and copies read "old -> new"
    if (code[0] in "RC" or code[1] in "RC") and " -> " in raw:
        raw = raw.split(" -> ", 1)[1]
    return unquote_path(raw)


def classify_status_code(code: str) -> Optional[FileStatus]:
    """Map a two-letter porcelain code to its status, or None to skip it."""
    index_status, worktree_status = code[0], code[1]
    if code == "??":
        return FileStatus.UNTRACKED
    if code == "!!":
        return None
    if code in UNMERGED_CODES:
        return FileStatus.MODIFIED
    if index_status not in (" ", "?"):
        return FileStatus.STAGED
    if worktree_status == "D":
        return FileStatus.DELETED
    if worktree_status != " ":
        return FileStatus.MODIFIED
    return None


def parse_porcelain_status(output: str, *, include_untracked: bool = True) -> GitStatus:
    """Parse ``git status --porcelain`` output into a :class:`GitStatus`."""
    buckets: dict[FileStatus, list[str]] = {status: [] for status in FileStatus}
    seen: set[str] = set()

    for line in output.splitlines():
        if len(line) < 4 or line[2] != " ":
            continue

        code = line[:2]
        status = classify_status_code(code)
        if status is None:
            continue
        if status is FileStatus.UNTRACKED and not include_untracked:
            continue

        path = _entry_path(code, line[3:])
        if path in seen:
            continue
        seen.add(path)
        buckets[status].append(path)

    return GitStatus(
        staged=tuple(buckets[FileStatus.STAGED]),
        modified=tuple(buckets[FileStatus.MODIFIED]),
        untracked=tuple(buckets[FileStatus.UNTRACKED]),
        deleted=tuple(buckets[FileStatus.DELETED]),
    )


def get_git_status(
    *,
    include_untracked: bool = True,
    cwd: Optional[Union[str, Path]] = None,
) -> GitStatus:
    """Read the working tree status.

    Args:
        include_untracked: Populate the untracked list; when False it stays empty
        cwd: Working directory
    """
    args = ["status", "--porcelain"]
    if not include_untracked:
        args.append("--untracked-files=no")

    status = parse_porcelain_status(run_git(args, cwd=cwd), include_untracked=include_untracked)
    logger.debug(
        "git.status.complete",
        staged=len(status.staged),
        modified=len(status.modified),
        untracked=len(status.untracked),
        deleted=len(status.deleted),
    )
    return status


def changed_files_from_status(status: GitStatus) -> tuple[ChangedFile, ...]:
    """Flatten a status into changed files: staged, modified, untracked, deleted."""
    return (
        *(ChangedFile(path, FileStatus.STAGED) for path in status.staged),
        *(ChangedFile(path, FileStatus.MODIFIED) for path in status.modified),
        *(ChangedFile(path, FileStatus.UNTRACKED) for path in status.untracked),
        *(ChangedFile(path, FileStatus.DELETED) for path in status.deleted),
    )


def get_changed_files(
    *,
    include_untracked: bool = True,
    cwd: Optional[Union[str, Path]] = None,
) -> tuple[ChangedFile, ...]:
    return changed_files_from_status(get_git_status(include_untracked=include_untracked, cwd=cwd))


def is_working_directory_clean(cwd: Optional[Union[str, Path]] = None) -> bool:
    """True when nothing is staged, modified or deleted; untracked files are ignored."""
    return get_git_status(include_untracked=False, cwd=cwd).is_clean
