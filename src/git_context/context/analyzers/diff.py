"""Unified diff parsing.

Example input::

    diff --git a/file.txt b/file.txt
    index abc123..def456 100644
    --- a/file.txt
    +++ b/file.txt
    @@ -1,3 +1,4 @@
     line1
    +line2
     line3
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from git_context.context.analyzers.status import unquote_path
from git_context.core.executor import run_git
from git_context.core.validators import validate_non_negative_int, validate_revision
from git_context.models import DiffFile, DiffFileStatus, DiffHunk, DiffStats, ParsedDiff
from git_context.monitoring.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CONTEXT_LINES = 3

# Either side may be C-quoted when the path has non-ASCII or special characters
QUOTED_PATH = r'"(?:[^"\\]|\\.)*"'
FILE_HEADER = re.compile(rf"^diff --git ({QUOTED_PATH}|a/.+?) ({QUOTED_PATH}|b/.+)$")
HUNK_HEADER = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")


@dataclass
class _FileBuilder:
    """Mutable accumulator for one file while its section is being read."""

    path: str
    old_path: Optional[str] = None
    status: DiffFileStatus = DiffFileStatus.MODIFIED
    additions: int = 0
    deletions: int = 0
    hunks: list[DiffHunk] = field(default_factory=list)
    hunk: Optional[DiffHunk] = None
    hunk_lines: list[str] = field(default_factory=list)

    def close_hunk(self) -> None:
        if self.hunk is not None:
            self.hunks.append(
                DiffHunk(
                    old_start=self.hunk.old_start,
                    old_lines=self.hunk.old_lines,
                    new_start=self.hunk.new_start,
                    new_lines=self.hunk.new_lines,
                    lines=tuple(self.hunk_lines),
                )
            )
        self.hunk = None
        self.hunk_lines = []

    def build(self) -> DiffFile:
        self.close_hunk()
        return DiffFile(
            path=self.path,
            old_path=self.old_path if self.status is DiffFileStatus.RENAMED else None,
            status=self.status,
            additions=self.additions,
            deletions=self.deletions,
            hunks=tuple(self.hunks),
        )


def _header_path(token: str, prefix: str) -> str:
    path = unquote_path(token)
    return path[len(prefix) :] if path.startswith(prefix) else path


def parse_diff_output(output: str) -> tuple[DiffFile, ...]:
    """Parse ``git diff --patch`` output into files and hunks.

    Added, deleted, renamed, modified and binary files are recognised;
    binary files have no hunks. Additions and deletions are counted from the
    ``+``/``-`` lines inside hunks only, so the ``---``/``+++`` headers never
    count.
    """
    files: list[DiffFile] = []
    current: Optional[_FileBuilder] = None

    for line in output.splitlines():
        header = FILE_HEADER.match(line)
        if header:
            if current is not None:
                files.append(current.build())
            old_path = _header_path(header.group(1), "a/")
            new_path = _header_path(header.group(2), "b/")
            current = _FileBuilder(path=new_path, old_path=old_path if old_path != new_path else None)
            continue

        if current is None:
            continue

        if current.hunk is None:
            if line.startswith("new file mode"):
                current.status = DiffFileStatus.ADDED
            elif line.startswith("deleted file mode"):
                current.status = DiffFileStatus.DELETED
            elif line.startswith("rename from "):
                current.status = DiffFileStatus.RENAMED
                current.old_path = unquote_path(line[len("rename from ") :])
            elif line.startswith("rename to "):
                current.status = DiffFileStatus.RENAMED
                current.path = unquote_path(line[len("rename to ") :])

        hunk = HUNK_HEADER.match(line)
        if hunk:
            current.close_hunk()
            current.hunk = DiffHunk(
                old_start=int(hunk.group(1)),
                old_lines=int(hunk.group(2) if hunk.group(2) is not None else 1),
                new_start=int(hunk.group(3)),
                new_lines=int(hunk.group(4) if hunk.group(4) is not None else 1),
            )
            continue

        if current.hunk is None or not line or line[0] not in "+- ":
            # "\ No newline at end of file" and section metadata
            continue

        current.hunk_lines.append(line)
        if line[0] == "+":
            current.additions += 1
        elif line[0] == "-":
            current.deletions += 1

    if current is not None:
        files.append(current.build())

    return tuple(files)


def parse_numstat(output: str) -> DiffStats:
    """Parse ``git diff --numstat`` output (``added<TAB>deleted<TAB>path``).

    Binary files report ``-`` for both counts and add nothing.
    """
    files_changed = additions = deletions = 0
    for line in output.splitlines():
        parts = line.split("\t")
        if len(parts) < 3:
            continue
        files_changed += 1
        if parts[0].isdigit():
            additions += int(parts[0])
        if parts[1].isdigit():
            deletions += int(parts[1])
    return DiffStats(files_changed=files_changed, additions=additions, deletions=deletions)


def get_parsed_diff(
    *,
    context: int = DEFAULT_CONTEXT_LINES,
    staged: bool = False,
    base: Optional[str] = None,
    target: Optional[str] = None,
    cwd: Optional[Union[str, Path]] = None,
) -> ParsedDiff:
    """Read and parse the working tree (or staged) diff.

    Args:
        context: Context lines around each change
        staged: Diff the index against HEAD instead of the working tree
        base: Revision to diff against
        target: Second revision; with ``base`` diffs ``base..target``
        cwd: Working directory

    Returns:
        Parsed diff; empty when there are no changes
    """
    validate_non_negative_int(context)
    args = [
        "diff",
        "--no-color",
        "--no-ext-diff",
        "--find-renames",
        f"--unified={context}",
        "--patch",
        # diff.noprefix and diff.mnemonicPrefix would change the header shape
        "--src-prefix=a/",
        "--dst-prefix=b/",
    ]
    if staged:
        args.append("--cached")
    if base is not None and target is not None:
        args.append(f"{validate_revision(base)}..{validate_revision(target)}")
    elif base is not None:
        args.append(validate_revision(base))

    output = run_git(args, cwd=cwd)
    if not output.strip():
        return ParsedDiff.empty()

    diff = ParsedDiff.from_files(parse_diff_output(output))
    logger.debug(
        "git.diff.complete",
        files=diff.stats.files_changed,
        additions=diff.stats.additions,
        deletions=diff.stats.deletions,
    )
    return diff


def get_diff_stats(
    *,
    staged: bool = False,
    cwd: Optional[Union[str, Path]] = None,
) -> DiffStats:
    """Aggregate diff counts without parsing hunks."""
    args = ["diff", "--numstat", "--no-color", "--no-ext-diff", "--find-renames"]
    if staged:
        args.append("--cached")
    return parse_numstat(run_git(args, cwd=cwd))


def get_diff_file_count(
    *,
    staged: bool = False,
    cwd: Optional[Union[str, Path]] = None,
) -> int:
    return get_diff_stats(staged=staged, cwd=cwd).files_changed
