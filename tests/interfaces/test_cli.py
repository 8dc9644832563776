"""Tests for the git-context command line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from git_context.interfaces.cli import build_parser, main

# main() configures structlog against the captured stderr
pytestmark = pytest.mark.usefixtures("restore_logging")


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def dirty_repo(git_repo: Path, git) -> Path:
    """Repository with one staged and one modified file."""
    (git_repo / "staged.txt").write_text("new\n")
    git(git_repo, "add", "staged.txt")
    (git_repo / "README.md").write_text("# Test Repo\nEdited\n")
    return git_repo


# -----------------------------------------------------------------------------
# Tests for build_parser()
# -----------------------------------------------------------------------------


class TestBuildParser:
    """Tests for argument parsing."""

    def test_context_defaults(self) -> None:
        args = build_parser().parse_args(["context"])
        assert args.max_commits == 10
        assert args.diff_context == 3
        assert not args.json and not args.raw and not args.no_untracked

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


# -----------------------------------------------------------------------------
# Tests for main()
# -----------------------------------------------------------------------------


class TestMain:
    """Tests for the CLI entry point."""

    def test_context_json(self, dirty_repo: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["-C", str(dirty_repo), "context", "--json", "--max-commits", "1"]) == 0

        data = json.loads(capsys.readouterr().out)

        assert data["branch"]["current"] == "main"
        assert data["status"]["staged"] == ["staged.txt"]
        assert data["status"]["modified"] == ["README.md"]
        assert len(data["recent_commits"]) == 1
        assert data["diff"]["stats"]["files_changed"] == 1

    def test_context_markdown(self, dirty_repo: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["-C", str(dirty_repo), "context"]) == 0
        out = capsys.readouterr().out
        assert "## Git Context" in out
        assert "[staged] staged.txt" in out

    def test_status_json(self, dirty_repo: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["-C", str(dirty_repo), "status", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data == {"staged": ["staged.txt"], "modified": ["README.md"], "untracked": [], "deleted": []}

    def test_status_table(self, dirty_repo: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["-C", str(dirty_repo), "status"]) == 0
        out = capsys.readouterr().out
        assert "staged.txt" in out
        assert "README.md" in out

    def test_log(self, git_repo: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["-C", str(git_repo), "log", "-n", "5", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert [c["subject"] for c in data] == ["Initial commit"]
        assert data[0]["date"].startswith("2024-01-15T10:00:00")

    def test_diff_stat(self, dirty_repo: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["-C", str(dirty_repo), "diff", "--staged", "--stat", "--json"]) == 0
        assert json.loads(capsys.readouterr().out) == {"files_changed": 1, "additions": 1, "deletions": 0}

    def test_diff_table(self, dirty_repo: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["-C", str(dirty_repo), "diff"]) == 0
        assert "README.md" in capsys.readouterr().out

    def test_error_exit_code(self, not_a_repo: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Verify library errors become exit code 1 with a message on stderr."""
        assert main(["-C", str(not_a_repo), "status"]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_validation_error_exit_code(self, git_repo: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["-C", str(git_repo), "log", "--branch=-x"]) == 1
        assert "flag injection" in capsys.readouterr().err
