"""Parsers for repository, branch, status, log and diff output."""

from git_context.context.analyzers.branch import (
    get_current_branch,
    get_current_branch_name,
    get_upstream_branch,
    is_tracking_upstream,
)
from git_context.context.analyzers.diff import get_diff_file_count, get_diff_stats, get_parsed_diff
from git_context.context.analyzers.log import get_commits_since, get_latest_commit, get_recent_commits
from git_context.context.analyzers.repository import (
    find_git_root,
    get_remote_url,
    get_repository_info,
    is_inside_git_repo,
)
from git_context.context.analyzers.status import (
    get_changed_files,
    get_git_status,
    is_working_directory_clean,
)

__all__ = [
    "find_git_root",
    "get_changed_files",
    "get_commits_since",
    "get_current_branch",
    "get_current_branch_name",
    "get_diff_file_count",
    "get_diff_stats",
    "get_git_status",
    "get_latest_commit",
    "get_parsed_diff",
    "get_recent_commits",
    "get_remote_url",
    "get_repository_info",
    "get_upstream_branch",
    "is_inside_git_repo",
    "is_tracking_upstream",
    "is_working_directory_clean",
]
