"""Input validation and safe git command execution."""

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

__all__ = [
    "run_git",
    "run_git_detailed",
    "sanitize_error",
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
]
