"""Error types raised by git_context."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ValidationCause(str, Enum):
    """Why a value was rejected by a validator."""

    EMPTY = "empty"
    LENGTH_EXCEEDED = "length exceeded"
    INVALID_FORMAT = "invalid format"
    INVALID_TYPE = "invalid type"
    OUT_OF_RANGE = "out of range"
    ABSOLUTE_PATH = "absolute path"
    PATH_TRAVERSAL = "path traversal"
    FLAG_INJECTION = "flag injection"
    NULL_BYTE = "null byte"
    SHELL_METACHARACTER = "shell metacharacter"
    UNSUPPORTED_PROTOCOL = "unsupported protocol"
    INVALID_OPTION = "invalid option"


class GitContextError(Exception):
    """Base class for all git_context errors."""


class ValidationError(GitContextError, ValueError):
    """Raised when an identifier or option is rejected before any git process runs."""

    def __init__(self, message: str, cause: ValidationCause = ValidationCause.INVALID_FORMAT):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        return f"{self.message} ({self.cause.value})"


class CommandError(GitContextError):
    """Raised when a git process exits non-zero or cannot be run.

    The message and stderr are always sanitized before they reach this object.
    """

    def __init__(self, message: str, exit_code: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code
        self.stderr = stderr


class PreconditionError(CommandError):
    """Raised when a query runs outside of a git working tree."""
