"""Value types produced by git_context queries.

Every value is a frozen dataclass built fresh for each query. Sequences are
tuples, so two snapshots of an unchanged working tree compare equal and no
caller can mutate a snapshot another caller holds.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Optional

# Branch name reported when HEAD is detached
DETACHED_HEAD = "HEAD"


class FileStatus(str, Enum):
    """Working tree state of a changed file."""

    STAGED = "staged"
    MODIFIED = "modified"
    UNTRACKED = "untracked"
    DELETED = "deleted"


class DiffFileStatus(str, Enum):
    """Kind of change a file undergoes in a diff."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: _to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(item) for item in value]
    return value


class _Serializable:
    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready dict (ISO dates, enum values, lists)."""
        return _to_jsonable(asdict(self))  # type: ignore[call-overload]


@dataclass(frozen=True)
class RepositoryInfo(_Serializable):
    """Repository-level information."""

    root: str
    remote: Optional[str] = None
    is_clean: bool = True


@dataclass(frozen=True)
class BranchInfo(_Serializable):
    """Current branch and its upstream tracking state."""

    current: str
    upstream: Optional[str] = None
    tracking: bool = False
    commits_ahead: int = 0
    commits_behind: int = 0

    def __post_init__(self) -> None:
        if not self.tracking and (self.upstream is not None or self.commits_ahead or self.commits_behind):
            raise ValueError("untracked branch cannot carry an upstream or ahead/behind counts")
        if self.commits_ahead < 0 or self.commits_behind < 0:
            raise ValueError("ahead/behind counts must be non-negative")

    @property
    def is_detached(self) -> bool:
        return self.current == DETACHED_HEAD


@dataclass(frozen=True)
class GitStatus(_Serializable):
    """Working tree status split into four disjoint path lists."""

    staged: tuple[str, ...] = ()
    modified: tuple[str, ...] = ()
    untracked: tuple[str, ...] = ()
    deleted: tuple[str, ...] = ()

    @property
    def is_clean(self) -> bool:
        """True when nothing is staged, modified or deleted (untracked files ignored)."""
        return not (self.staged or self.modified or self.deleted)


@dataclass(frozen=True)
class Commit(_Serializable):
    """Single commit metadata."""

    hash: str
    short_hash: str
    author: str
    email: str
    date: datetime
    message: str
    subject: str
    body: str = ""


@dataclass(frozen=True)
class ChangedFile(_Serializable):
    """A path paired with its working tree status."""

    path: str
    status: FileStatus


@dataclass(frozen=True)
class DiffHunk(_Serializable):
    """Contiguous changed region of a file."""

    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    lines: tuple[str, ...] = ()


@dataclass(frozen=True)
class DiffFile(_Serializable):
    """One file of a unified diff."""

    path: str
    old_path: Optional[str] = None
    status: DiffFileStatus = DiffFileStatus.MODIFIED
    additions: int = 0
    deletions: int = 0
    hunks: tuple[DiffHunk, ...] = ()


@dataclass(frozen=True)
class DiffStats(_Serializable):
    """Aggregate counts over a diff."""

    files_changed: int = 0
    additions: int = 0
    deletions: int = 0

    @classmethod
    def from_files(cls, files: Iterable[DiffFile]) -> "DiffStats":
        files = tuple(files)
        return cls(
            files_changed=len(files),
            additions=sum(f.additions for f in files),
            deletions=sum(f.deletions for f in files),
        )


@dataclass(frozen=True)
class ParsedDiff(_Serializable):
    """Parsed diff with its files and aggregate statistics."""

    files: tuple[DiffFile, ...] = ()
    stats: DiffStats = field(default_factory=DiffStats)

    @classmethod
    def from_files(cls, files: Iterable[DiffFile]) -> "ParsedDiff":
        files = tuple(files)
        return cls(files=files, stats=DiffStats.from_files(files))

    @classmethod
    def empty(cls) -> "ParsedDiff":
        return cls()


@dataclass(frozen=True)
class GitContext(_Serializable):
    """Complete working tree snapshot for injection into an agent's context."""

    repository: RepositoryInfo
    branch: BranchInfo
    status: GitStatus
    recent_commits: tuple[Commit, ...]
    diff: ParsedDiff
    changed_files: tuple[ChangedFile, ...]


@dataclass(frozen=True)
class GitCommandResult:
    """Raw outcome of a git invocation."""

    stdout: str
    stderr: str
    exit_code: int

    @property
    def ok(self) -> bool:
        return self.exit_code == 0
