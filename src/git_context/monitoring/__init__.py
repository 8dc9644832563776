"""Logging for git_context."""

from git_context.monitoring.logging import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
