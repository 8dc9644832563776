"""Shared fixtures: throwaway git repositories built with the real git binary."""

from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path
from typing import Callable, Optional

import pytest
import structlog

DEFAULT_DATE = "2024-01-15T10:00:00+00:00"

GitRunner = Callable[..., str]
Committer = Callable[..., str]


def _git(repo: Path, *args: str, env: Optional[dict[str, str]] = None) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=repo,
        capture_output=True,
        text=True,
        check=True,
        env={**os.environ, **(env or {})},
    )
    return result.stdout


def _commit_file(repo: Path, name: str, content: str, message: str, date: str = DEFAULT_DATE) -> str:
    path = repo / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    _git(repo, "add", "--", name)
    _git(repo, "commit", "-q", "-m", message, env={"GIT_AUTHOR_DATE": date, "GIT_COMMITTER_DATE": date})
    return _git(repo, "rev-parse", "HEAD").strip()


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip repository-backed tests when git is not installed."""
    if shutil.which("git") is not None:
        return
    skip = pytest.mark.skip(reason="git executable not available")
    for item in items:
        if {"git", "commit", "empty_repo", "git_repo", "tracked_repo"} & set(getattr(item, "fixturenames", ())):
            item.add_marker(skip)


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_git_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep user and system git config out of the tests."""
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", os.devnull)
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    # Stop repository discovery from walking above the test directory
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))


@pytest.fixture
def restore_logging():
    """Put back the structlog configuration, or its unconfigured state, after a test."""
    was_configured = structlog.is_configured()
    saved = structlog.get_config()
    yield
    if was_configured:
        structlog.configure(**saved)
    else:
        structlog.reset_defaults()


@pytest.fixture
def git() -> GitRunner:
    """Run git for test setup: ``git(repo, "add", "x")`` returns stdout."""
    return _git


@pytest.fixture
def commit() -> Committer:
    """Write, stage and commit one file: ``commit(repo, name, content, message)`` returns the hash."""
    return _commit_file


@pytest.fixture
def empty_repo(tmp_path: Path) -> Path:
    """Initialized repository on branch main with no commits."""
    repo = tmp_path / "repo"
    repo.mkdir()
    _git(repo, "init", "-q")
    _git(repo, "symbolic-ref", "HEAD", "refs/heads/main")
    _git(repo, "config", "user.email", "test@example.com")
    _git(repo, "config", "user.name", "Test User")
    _git(repo, "config", "commit.gpgsign", "false")
    return repo


@pytest.fixture
def git_repo(empty_repo: Path) -> Path:
    """Repository with one commit containing README.md."""
    _commit_file(empty_repo, "README.md", "# Test Repo\n", "Initial commit")
    return empty_repo


@pytest.fixture
def not_a_repo(tmp_path: Path) -> Path:
    """Plain directory outside any repository."""
    path = tmp_path / "plain"
    path.mkdir()
    return path


@pytest.fixture
def tracked_repo(tmp_path: Path, git_repo: Path) -> Path:
    """Repository whose main branch tracks origin/main on a local bare remote."""
    remote = tmp_path / "remote.git"
    _git(tmp_path, "init", "-q", "--bare", str(remote))
    _git(git_repo, "remote", "add", "origin", str(remote))
    _git(git_repo, "push", "-q", "-u", "origin", "main")
    return git_repo
