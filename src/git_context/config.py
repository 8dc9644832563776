"""Option bundle accepted by the context aggregator."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt

DEFAULT_MAX_COMMITS = 10
DEFAULT_DIFF_CONTEXT = 3


class GitContextOptions(BaseModel):
    """Options for :func:`git_context.get_git_context`.

    Field names are snake_case; the camelCase spellings used by JSON callers
    (``maxCommits``, ``sanitizeForAI`` ...) are accepted as aliases.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    include_untracked: StrictBool = Field(
        True, alias="includeUntracked", description="Populate the untracked file list"
    )
    max_commits: StrictInt = Field(
        DEFAULT_MAX_COMMITS, alias="maxCommits", gt=0, description="Number of recent commits to read"
    )
    diff_context: StrictInt = Field(
        DEFAULT_DIFF_CONTEXT, alias="diffContext", ge=0, description="Context lines around diff changes"
    )
    sanitize_for_ai: StrictBool = Field(
        True, alias="sanitizeForAI", description="Apply prompt-injection and credential sanitization"
    )
