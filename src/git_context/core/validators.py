"""Input validation at the security boundary.

Every identifier that ends up on a git command line passes through one of
these functions first. A validator returns its input unchanged or raises
:class:`ValidationError` with the reason; it never coerces.

Example:
    validate_file_path("src/index.py")     # "src/index.py"
    validate_file_path("../etc/passwd")    # ValidationError (path traversal)
    validate_file_path("--upload-pack")    # ValidationError (flag injection)
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from pathlib import PurePosixPath, PureWindowsPath
from typing import Any, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from git_context.config import GitContextOptions
from git_context.utils.exceptions import ValidationCause, ValidationError

MAX_BRANCH_NAME_LENGTH = 255

BRANCH_NAME_PATTERN = re.compile(r"[a-zA-Z0-9/_.-]+")
COMMIT_HASH_PATTERN = re.compile(r"[a-f0-9]{40}|[a-f0-9]{64}")
HEX_PATTERN = re.compile(r"[a-f0-9]+")
REMOTE_URL_PATTERN = re.compile(
    r"^(?:https?://|ssh://|file://"
    r"|[A-Za-z0-9._-]+@[A-Za-z0-9.-]+:(?!//))"
)

# ; | & $ ` > < ( )
SHELL_METACHARACTERS = re.compile(r"[;|&$`><()]")


def validate_branch_name(name: Any) -> str:
    """Validate a git branch name.

    Allowed characters are ASCII letters, digits, ``/``, ``_``, ``-`` and ``.``.
    Consecutive dots and a ``.lock`` suffix are rejected as git rejects them.
    """
    if not isinstance(name, str):
        raise ValidationError("Branch name must be a string", ValidationCause.INVALID_TYPE)
    if not name:
        raise ValidationError("Branch name cannot be empty", ValidationCause.EMPTY)
    if len(name) > MAX_BRANCH_NAME_LENGTH:
        raise ValidationError("Branch name too long", ValidationCause.LENGTH_EXCEEDED)
    if not BRANCH_NAME_PATTERN.fullmatch(name):
        raise ValidationError(
            "Invalid branch name (only alphanumeric, /, _, -, . allowed)",
            ValidationCause.INVALID_FORMAT,
        )
    if ".." in name:
        raise ValidationError('Branch name cannot contain ".."', ValidationCause.INVALID_FORMAT)
    if name.endswith(".lock"):
        raise ValidationError('Branch name cannot end with ".lock"', ValidationCause.INVALID_FORMAT)
    return name


def _is_absolute(path: str) -> bool:
    if path.startswith(("/", "\\")):
        return True
    return PurePosixPath(path).is_absolute() or PureWindowsPath(path).is_absolute()


def validate_file_path(path: Any) -> str:
    """Validate a repository-relative file path.

    Rejects absolute paths, ``..`` segments, a leading ``-`` and NUL bytes.
    """
    if not isinstance(path, str):
        raise ValidationError("File path must be a string", ValidationCause.INVALID_TYPE)
    if not path:
        raise ValidationError("File path cannot be empty", ValidationCause.EMPTY)
    if "\0" in path:
        raise ValidationError("Null byte injection detected", ValidationCause.NULL_BYTE)
    if path.startswith("-"):
        raise ValidationError("Flag injection detected", ValidationCause.FLAG_INJECTION)
    if _is_absolute(path):
        raise ValidationError("Absolute paths not allowed", ValidationCause.ABSOLUTE_PATH)
    if ".." in re.split(r"[\\/]", path):
        raise ValidationError("Path traversal detected", ValidationCause.PATH_TRAVERSAL)
    return path


def is_commit_hash(value: Any) -> bool:
    return isinstance(value, str) and COMMIT_HASH_PATTERN.fullmatch(value) is not None


def validate_commit_hash(value: Any) -> str:
    """Validate a full SHA-1 (40 hex) or SHA-256 (64 hex) commit hash."""
    if not is_commit_hash(value):
        raise ValidationError(
            "Invalid commit hash (must be 40-character SHA-1 or 64-character SHA-256)",
            ValidationCause.INVALID_FORMAT,
        )
    return value


def validate_short_commit_hash(value: Any) -> str:
    """Validate an abbreviated commit hash of 7 to 40 lowercase hex characters."""
    if not isinstance(value, str):
        raise ValidationError("Short commit hash must be a string", ValidationCause.INVALID_TYPE)
    if len(value) < 7:
        raise ValidationError("Short commit hash must be at least 7 characters", ValidationCause.INVALID_FORMAT)
    if len(value) > 40:
        raise ValidationError("Short commit hash too long", ValidationCause.LENGTH_EXCEEDED)
    if not HEX_PATTERN.fullmatch(value):
        raise ValidationError(
            "Invalid short commit hash (must be hexadecimal)", ValidationCause.INVALID_FORMAT
        )
    return value


def validate_remote_url(url: Any) -> str:
    """Validate a remote URL.

    Accepts ``https://``, ``http://``, ``ssh://``, ``file://`` and the SCP
    form ``user@host:path``. Anything else, ``javascript:`` or ``ext::`` for
    instance, is rejected.
    """
    if not isinstance(url, str):
        raise ValidationError("Remote URL must be a string", ValidationCause.INVALID_TYPE)
    if not url:
        raise ValidationError("Remote URL cannot be empty", ValidationCause.EMPTY)
    if not REMOTE_URL_PATTERN.match(url):
        raise ValidationError(
            "Invalid remote URL protocol (must be https://, http://, ssh://, file:// or user@host:path)",
            ValidationCause.UNSUPPORTED_PROTOCOL,
        )
    return url


def _validate_int(value: Any, minimum: int, label: str) -> int:
    # bool is an int subclass; True is not a count
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"Must be a {label} integer", ValidationCause.INVALID_TYPE)
    if value < minimum:
        raise ValidationError(f"Must be a {label} integer", ValidationCause.OUT_OF_RANGE)
    return value


def validate_positive_int(value: Any) -> int:
    return _validate_int(value, 1, "positive")


def validate_non_negative_int(value: Any) -> int:
    return _validate_int(value, 0, "non-negative")


def validate_git_args(args: Any) -> list[str]:
    """Validate a git argument vector.

    Every element must be a string free of shell metacharacters and NUL
    bytes. One bad element fails the whole vector.
    """
    if isinstance(args, (str, bytes)) or not isinstance(args, Sequence):
        raise ValidationError("Git arguments must be a sequence of strings", ValidationCause.INVALID_TYPE)
    for arg in args:
        if not isinstance(arg, str):
            raise ValidationError("Git arguments must be strings", ValidationCause.INVALID_TYPE)
        if "\0" in arg:
            raise ValidationError("Null byte detected in git argument", ValidationCause.NULL_BYTE)
        if SHELL_METACHARACTERS.search(arg):
            raise ValidationError(
                "Shell metacharacter detected in git argument", ValidationCause.SHELL_METACHARACTER
            )
    return list(args)


def validate_revision(revision: Any) -> str:
    """Validate a revision passed positionally to git (branch name or hash).

    Branch names that start with ``-`` are rejected here since git would
    read them as options.
    """
    if isinstance(revision, str) and HEX_PATTERN.fullmatch(revision) and 7 <= len(revision) <= 64:
        return revision
    name = validate_branch_name(revision)
    if name.startswith("-"):
        raise ValidationError("Flag injection detected", ValidationCause.FLAG_INJECTION)
    return name


def validate_options(
    options: Optional[Union[GitContextOptions, Mapping[str, Any]]] = None, **overrides: Any
) -> GitContextOptions:
    """Validate a context option bundle.

    Accepts None (all defaults), a :class:`GitContextOptions`, or a mapping
    using either snake_case or camelCase keys. Keyword overrides win.
    """
    if options is None:
        data: dict[str, Any] = {}
    elif isinstance(options, GitContextOptions):
        if not overrides:
            return options
        data = options.model_dump()
    elif isinstance(options, Mapping):
        data = dict(options)
    else:
        raise ValidationError("Options must be a mapping or GitContextOptions", ValidationCause.INVALID_TYPE)
    data.update(overrides)

    try:
        return GitContextOptions.model_validate(data)
    except PydanticValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'options'}: {error['msg']}"
            for error in exc.errors()
        )
        raise ValidationError(f"Invalid git context options: {details}", ValidationCause.INVALID_OPTION) from exc
