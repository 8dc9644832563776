"""Sanitized git working tree context for AI agents.

Reads repository, branch, status, commit and diff state through validated,
shell-free git invocations and returns immutable snapshots with credentials
and prompt-injection content filtered out.

Example usage:
    from git_context import get_git_context, format_context

    context = get_git_context(max_commits=5)
    prompt_section = format_context(context)
"""

from git_context.config import GitContextOptions
from git_context.context.analyzers import (
    find_git_root,
    get_changed_files,
    get_commits_since,
    get_current_branch,
    get_current_branch_name,
    get_diff_file_count,
    get_diff_stats,
    get_git_status,
    get_latest_commit,
    get_parsed_diff,
    get_recent_commits,
    get_remote_url,
    get_repository_info,
    get_upstream_branch,
    is_inside_git_repo,
    is_tracking_upstream,
    is_working_directory_clean,
)
from git_context.context.extractor import ContextExtractor, format_compact, format_context, get_git_context
from git_context.context.sanitize import (
    sanitize_commit_message,
    sanitize_file_path,
    sanitize_for_ai_context,
    sanitize_remote_url,
)
from git_context.core.executor import run_git, run_git_detailed, sanitize_error
from git_context.core.validators import (
    validate_branch_name,
    validate_commit_hash,
    validate_file_path,
    validate_git_args,
    validate_non_negative_int,
    validate_options,
    validate_positive_int,
    validate_remote_url,
    validate_revision,
    validate_short_commit_hash,
)
from git_context.models import (
    BranchInfo,
    ChangedFile,
    Commit,
    DiffFile,
    DiffFileStatus,
    DiffHunk,
    DiffStats,
    FileStatus,
    GitCommandResult,
    GitContext,
    GitStatus,
    ParsedDiff,
    RepositoryInfo,
)
from git_context.utils.exceptions import (
    CommandError,
    GitContextError,
    PreconditionError,
    ValidationCause,
    ValidationError,
)

__version__ = "0.1.0"

__all__ = [
    # Aggregation
    "ContextExtractor",
    "GitContextOptions",
    "format_compact",
    "format_context",
    "get_git_context",
    # Queries
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
    # Sanitization
    "sanitize_commit_message",
    "sanitize_error",
    "sanitize_file_path",
    "sanitize_for_ai_context",
    "sanitize_remote_url",
    # Execution and validation
    "run_git",
    "run_git_detailed",
    "validate_branch_name",
    "validate_commit_hash",
    "validate_file_path",
    "validate_git_args",
    "validate_non_negative_int",
    "validate_options",
    "validate_positive_int",
    "validate_remote_url",
    "validate_revision",
    "validate_short_commit_hash",
    # Models
    "BranchInfo",
    "ChangedFile",
    "Commit",
    "DiffFile",
    "DiffFileStatus",
    "DiffHunk",
    "DiffStats",
    "FileStatus",
    "GitCommandResult",
    "GitContext",
    "GitStatus",
    "ParsedDiff",
    "RepositoryInfo",
    # Errors
    "CommandError",
    "GitContextError",
    "PreconditionError",
    "ValidationCause",
    "ValidationError",
]
