"""Git context extraction for prompt injection.

Example usage:
    from git_context.context import ContextExtractor, get_git_context

    # One call with defaults
    context = get_git_context(max_commits=5)

    # Bound to a directory
    extractor = ContextExtractor(project_path)
    print(extractor.format(compact=True))
"""

from git_context.context.extractor import ContextExtractor, format_compact, format_context, get_git_context
from git_context.context.sanitize import (
    sanitize_commit_message,
    sanitize_file_path,
    sanitize_for_ai_context,
    sanitize_remote_url,
)

__all__ = [
    "ContextExtractor",
    "format_compact",
    "format_context",
    "get_git_context",
    "sanitize_commit_message",
    "sanitize_file_path",
    "sanitize_for_ai_context",
    "sanitize_remote_url",
]
