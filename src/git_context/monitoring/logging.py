"""Structured logging for git_context.

Library code never touches the global structlog configuration. Loggers
returned by :func:`get_logger` follow whatever structlog configuration is in
place when an event is emitted: the host application's, or the one set by
:func:`configure_logging` (the CLI calls it). While nothing is configured,
events go through a standalone logger that writes warnings and above to
stderr.

The level and format come from the environment:

- ``GIT_CONTEXT_LOG_LEVEL``: debug, info, warning (default) or error
- ``GIT_CONTEXT_LOG_FORMAT``: text (default) or json
"""

from __future__ import annotations

import logging
import sys
from os import getenv
from typing import Any, Literal, Optional, cast

import structlog

LogFormatType = Literal["json", "text"]

DEFAULT_LOG_LEVEL = "warning"


def _log_level_from_string(level: Optional[str]) -> int:
    """Convert a level name to a logging level, falling back to WARNING."""
    if not level:
        return logging.WARNING
    return logging.getLevelNamesMapping().get(level.upper(), logging.WARNING)


def _build_processors(log_format: str) -> list[structlog.typing.Processor]:
    processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if log_format == "json":
        processors.append(structlog.processors.dict_tracebacks)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    return processors


def configure_logging(level: Optional[str] = None, fmt: Optional[LogFormatType] = None) -> None:
    """Configure structlog globally to write events to stderr.

    Meant for entry points such as the CLI; library imports never call it.

    Args:
        level: Level name; defaults to ``GIT_CONTEXT_LOG_LEVEL`` or warning
        fmt: "text" or "json"; defaults to ``GIT_CONTEXT_LOG_FORMAT`` or text
    """
    effective_level = _log_level_from_string(level or getenv("GIT_CONTEXT_LOG_LEVEL", DEFAULT_LOG_LEVEL))
    log_format = fmt or getenv("GIT_CONTEXT_LOG_FORMAT", "text")

    structlog.configure(
        processors=_build_processors(log_format),
        wrapper_class=structlog.make_filtering_bound_logger(effective_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def _standalone_logger() -> structlog.typing.FilteringBoundLogger:
    # wrap_logger builds a self-contained logger; the global config is untouched
    effective_level = _log_level_from_string(getenv("GIT_CONTEXT_LOG_LEVEL", DEFAULT_LOG_LEVEL))
    return cast(
        structlog.typing.FilteringBoundLogger,
        structlog.wrap_logger(
            structlog.PrintLogger(file=sys.stderr),
            processors=_build_processors(getenv("GIT_CONTEXT_LOG_FORMAT", "text")),
            wrapper_class=structlog.make_filtering_bound_logger(effective_level),
            context_class=dict,
        ),
    )


class _DeferredLogger:
    """Module-level logger that picks its backing logger on every call."""

    def __init__(self, name: str) -> None:
        self._name = name

    def _resolve(self) -> Any:
        if structlog.is_configured():
            return structlog.get_logger(self._name)
        return _standalone_logger()

    def __getattr__(self, attr: str) -> Any:
        return getattr(self._resolve(), attr)


def get_logger(name: str) -> structlog.typing.FilteringBoundLogger:
    """Return a logger for ``name`` without configuring structlog."""
    return cast(structlog.typing.FilteringBoundLogger, _DeferredLogger(name))
