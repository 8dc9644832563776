"""Tests for branch and upstream tracking state."""

from __future__ import annotations

from pathlib import Path

import pytest

from git_context.context.analyzers.branch import (
    get_current_branch,
    get_current_branch_name,
    get_upstream_branch,
    is_tracking_upstream,
    parse_ahead_behind,
)
from git_context.models import DETACHED_HEAD, BranchInfo
from git_context.utils.exceptions import PreconditionError


# -----------------------------------------------------------------------------
# Tests for parse_ahead_behind()
# -----------------------------------------------------------------------------


class TestParseAheadBehind:
    """Tests for parse_ahead_behind()."""

    @pytest.mark.parametrize(
        "output,expected",
        [
            ("3\t5\n", (3, 5)),
            ("0\t0", (0, 0)),
            ("", (0, 0)),
            ("garbage", (0, 0)),
            ("1\tx", (0, 0)),
            ("1\t2\t3", (0, 0)),
        ],
    )
    def test_parses_behind_then_ahead(self, output: str, expected: tuple[int, int]) -> None:
        """Verify the left column is behind and the right is ahead."""
        assert parse_ahead_behind(output) == expected


# -----------------------------------------------------------------------------
# Tests for BranchInfo
# -----------------------------------------------------------------------------


class TestBranchInfo:
    """Tests for the BranchInfo invariants."""

    def test_untracked_defaults(self) -> None:
        info = BranchInfo(current="main")
        assert info.upstream is None
        assert (info.commits_ahead, info.commits_behind) == (0, 0)
        assert not info.is_detached

    def test_untracked_cannot_carry_counts(self) -> None:
        with pytest.raises(ValueError):
            BranchInfo(current="main", commits_ahead=1)

    def test_negative_counts_rejected(self) -> None:
        with pytest.raises(ValueError):
            BranchInfo(current="main", upstream="origin/main", tracking=True, commits_behind=-1)


# -----------------------------------------------------------------------------
# Tests against real repositories
# -----------------------------------------------------------------------------


class TestGetCurrentBranch:
    """Tests for get_current_branch() and friends."""

    def test_branch_without_upstream(self, git_repo: Path) -> None:
        assert get_current_branch(git_repo) == BranchInfo(current="main")
        assert get_current_branch_name(git_repo) == "main"
        assert get_upstream_branch(git_repo) is None
        assert not is_tracking_upstream(git_repo)

    def test_unborn_branch(self, empty_repo: Path) -> None:
        """Verify a repository without commits still reports its branch."""
        assert get_current_branch(empty_repo) == BranchInfo(current="main")

    def test_detached_head(self, git_repo: Path, git) -> None:
        git(git_repo, "checkout", "-q", "--detach")

        info = get_current_branch(git_repo)

        assert info.current == DETACHED_HEAD
        assert info.is_detached
        assert not info.tracking

    def test_tracking_in_sync(self, tracked_repo: Path) -> None:
        info = get_current_branch(tracked_repo)
        assert info == BranchInfo(current="main", upstream="origin/main", tracking=True)
        assert is_tracking_upstream(tracked_repo)

    def test_ahead_and_behind(self, tracked_repo: Path, git, commit) -> None:
        commit(tracked_repo, "remote.txt", "r\n", "Remote change")
        git(tracked_repo, "push", "-q", "origin", "main")
        git(tracked_repo, "reset", "-q", "--hard", "HEAD~1")
        commit(tracked_repo, "one.txt", "1\n", "Local one")
        commit(tracked_repo, "two.txt", "2\n", "Local two")

        info = get_current_branch(tracked_repo)

        assert info.upstream == "origin/main"
        assert info.commits_ahead == 2
        assert info.commits_behind == 1

    def test_outside_repository(self, not_a_repo: Path) -> None:
        with pytest.raises(PreconditionError):
            get_current_branch(not_a_repo)
