"""Safe git command execution.

Security measures, each independent of the others:

1. Arguments are re-checked for shell metacharacters, even when the caller
   already validated them.
2. git is spawned from an argument list with ``shell=False``; nothing is ever
   joined into a shell string.
3. Path arguments are passed separately and always follow a ``--``
   separator, so a path can never be read as an option.
4. stdout is capped at ``MAX_OUTPUT_BYTES``; the child is killed beyond it.
5. Error text is sanitized before it is raised or returned.
"""

from __future__ import annotations

import os
import re
import subprocess
import threading
from collections.abc import Sequence
from pathlib import Path
from typing import IO, Optional, Union

from git_context.core.validators import validate_file_path, validate_git_args
from git_context.models import GitCommandResult
from git_context.monitoring.logging import get_logger
from git_context.utils.exceptions import (
    CommandError,
    PreconditionError,
    ValidationCause,
    ValidationError,
)

logger = get_logger(__name__)

GIT_BINARY = "git"

# Maximum stdout captured from a single invocation
MAX_OUTPUT_BYTES: int = 10 * 1024 * 1024  # 10MB

# stderr only feeds error messages
MAX_STDERR_BYTES: int = 64 * 1024

_READ_CHUNK = 64 * 1024

# Commands that accept paths after a -- separator
SEPARATOR_COMMANDS = frozenset({"diff", "log", "show", "grep", "blame"})

# Read-only, non-interactive, locale-stable environment overlay
GIT_ENV = {
    "LC_ALL": "C",
    "GIT_TERMINAL_PROMPT": "0",
    "GIT_OPTIONAL_LOCKS": "0",
    "GIT_PAGER": "cat",
}

NOT_A_REPOSITORY = "not a git repository"

_ERROR_REDACTIONS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"/Users/[^/\s]+"), "~"),
    (re.compile(r"/home/[^/\s]+"), "~"),
    (re.compile(r"[A-Za-z]:\\Users\\[^\\\s]+"), "~"),
    (re.compile(r"/var/tmp/[^/\s]+"), "/var/tmp/***"),
    (re.compile(r"(?<![\w/])/tmp/[^/\s]+"), "/tmp/***"),
)

_URL_CREDENTIALS = re.compile(r"\b(https?|ssh)://([^@/\s]+)@", re.IGNORECASE)

PathLike = Union[str, Path]


def _redact_credentials(match: re.Match[str]) -> str:
    scheme, credentials = match.group(1), match.group(2)
    if ":" in credentials and scheme.lower() != "ssh":
        return f"{scheme}://***:***@"
    return f"{scheme}://***@"


def sanitize_error(message: str) -> str:
    """Redact home paths, temp session paths and URL credentials from error text.

    Example:
        sanitize_error("/Users/alice/repo/file.txt not found")
        # "~/repo/file.txt not found"
    """
    if not message:
        return ""
    sanitized = _URL_CREDENTIALS.sub(_redact_credentials, message)
    for pattern, replacement in _ERROR_REDACTIONS:
        sanitized = pattern.sub(replacement, sanitized)
    return sanitized


def build_argv(args: Sequence[str], paths: Sequence[str] = ()) -> list[str]:
    """Build the full argv for a git invocation.

    Args:
        args: Subcommand and options, e.g. ``["diff", "--cached"]``
        paths: Repository-relative paths, emitted after ``--``

    Returns:
        Argument list starting with the git binary

    Raises:
        ValidationError: If an argument or path fails validation
    """
    validated = validate_git_args(args)
    if not validated:
        raise ValidationError("Git subcommand is required", ValidationCause.EMPTY)

    argv = [GIT_BINARY, *validated]
    if paths:
        subcommand = validated[0]
        if subcommand not in SEPARATOR_COMMANDS:
            raise ValidationError(
                f"git {subcommand} does not take path arguments", ValidationCause.INVALID_FORMAT
            )
        validated_paths = [validate_file_path(path) for path in validate_git_args(paths)]
        argv.extend(["--", *validated_paths])
    return argv


def _drain(stream: IO[bytes], sink: bytearray, limit: int) -> None:
    """Read a stream to EOF, keeping at most ``limit`` bytes."""
    while True:
        chunk = stream.read(_READ_CHUNK)
        if not chunk:
            return
        room = limit - len(sink)
        if room > 0:
            sink.extend(chunk[:room])


def _spawn(argv: list[str], cwd: Optional[PathLike]) -> GitCommandResult:
    env = {**os.environ, **GIT_ENV}
    try:
        process = subprocess.Popen(  # noqa: S603
            argv,
            cwd=str(cwd) if cwd is not None else None,
            env=env,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            shell=False,
        )
    except FileNotFoundError as exc:
        # Either git is not installed or cwd does not exist
        if cwd is not None and not Path(cwd).is_dir():
            raise PreconditionError("Working directory does not exist") from exc
        raise CommandError("Git command failed: git executable not found") from exc
    except OSError as exc:
        raise CommandError(f"Git command failed: {sanitize_error(str(exc))}") from exc

    with process:
        if process.stdout is None or process.stderr is None:
            process.kill()
            raise CommandError("Git command failed: output pipes unavailable")
        stderr = bytearray()
        reader = threading.Thread(
            target=_drain, args=(process.stderr, stderr, MAX_STDERR_BYTES), daemon=True
        )
        reader.start()

        stdout = bytearray()
        while True:
            chunk = process.stdout.read(_READ_CHUNK)
            if not chunk:
                break
            stdout.extend(chunk)
            if len(stdout) > MAX_OUTPUT_BYTES:
                process.kill()
                process.wait()
                reader.join()
                logger.warning("git.exec.output_limit", command=argv[1], limit=MAX_OUTPUT_BYTES)
                raise CommandError(
                    f"Git command output exceeded {MAX_OUTPUT_BYTES} bytes"
                )

        exit_code = process.wait()
        reader.join()

    return GitCommandResult(
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
        exit_code=exit_code,
    )


def ensure_repository(result: GitCommandResult) -> GitCommandResult:
    """Raise :class:`PreconditionError` if a detailed result failed for lack of a repository."""
    if not result.ok and NOT_A_REPOSITORY in result.stderr.lower():
        raise PreconditionError(
            f"Git command failed with exit code {result.exit_code}: {result.stderr.strip()}",
            exit_code=result.exit_code,
            stderr=result.stderr.strip(),
        )
    return result


def run_git_detailed(
    args: Sequence[str],
    *,
    paths: Sequence[str] = (),
    cwd: Optional[PathLike] = None,
) -> GitCommandResult:
    """Run git and return stdout, sanitized stderr and the exit code.

    Unlike :func:`run_git` a non-zero exit is not an error here, which lets
    callers tell "no result" apart from "command failed".

    Raises:
        ValidationError: If an argument fails validation
        CommandError: If git cannot be spawned or output exceeds the limit
    """
    argv = build_argv(args, paths)
    logger.debug("git.exec.start", args=argv[1:])
    result = _spawn(argv, cwd)
    logger.debug("git.exec.complete", command=argv[1], exit_code=result.exit_code, bytes=len(result.stdout))
    return GitCommandResult(
        stdout=result.stdout,
        stderr=sanitize_error(result.stderr),
        exit_code=result.exit_code,
    )


def run_git(
    args: Sequence[str],
    *,
    paths: Sequence[str] = (),
    cwd: Optional[PathLike] = None,
    allow_nonzero_exit: bool = False,
) -> str:
    """Run git safely and return its stdout.

    Args:
        args: Subcommand and options, e.g. ``["status", "--porcelain"]``
        paths: Repository-relative paths, passed after ``--``
        cwd: Working directory (defaults to the process cwd)
        allow_nonzero_exit: Return stdout instead of raising on failure

    Returns:
        Raw standard output

    Raises:
        ValidationError: If an argument fails validation
        PreconditionError: If cwd is not inside a git working tree
        CommandError: If git exits non-zero, cannot be run, or output is too large

    Example:
        run_git(["status", "; rm -rf /"])  # ValidationError (shell metacharacter)
        run_git(["log", "-5"], paths=["src/app.py"])  # git log -5 -- src/app.py
    """
    result = run_git_detailed(args, paths=paths, cwd=cwd)
    if result.exit_code == 0 or allow_nonzero_exit:
        return result.stdout

    logger.debug("git.exec.failed", command=args[0], exit_code=result.exit_code)
    ensure_repository(result)
    stderr = result.stderr.strip()
    raise CommandError(
        f"Git command failed with exit code {result.exit_code}: {stderr or 'No error message'}",
        exit_code=result.exit_code,
        stderr=stderr,
    )
