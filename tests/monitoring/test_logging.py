"""Tests for structlog configuration and library loggers."""

from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest
import structlog
from structlog.testing import capture_logs

import git_context
from git_context.monitoring.logging import configure_logging, get_logger

pytestmark = pytest.mark.usefixtures("restore_logging")


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_json_format(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(level="debug", fmt="json")

        get_logger("git_context.test").info("git.test.event", command="status")

        entry = json.loads(capsys.readouterr().err.strip())
        assert entry["event"] == "git.test.event"
        assert entry["command"] == "status"
        assert entry["level"] == "info"

    def test_level_filters(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(level="warning", fmt="text")

        logger = get_logger("git_context.test")
        logger.debug("git.test.hidden")
        logger.warning("git.test.shown")

        err = capsys.readouterr().err
        assert "git.test.hidden" not in err
        assert "git.test.shown" in err

    def test_environment_defaults(self, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GIT_CONTEXT_LOG_LEVEL", "error")
        configure_logging()

        get_logger("git_context.test").warning("git.test.quiet")

        assert capsys.readouterr().err == ""

    def test_applies_to_loggers_created_earlier(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Verify module-level loggers pick up configuration done after import."""
        logger = get_logger("git_context.test")
        configure_logging(level="debug", fmt="json")

        logger.debug("git.test.late")

        assert json.loads(capsys.readouterr().err.strip())["event"] == "git.test.late"


class TestGetLogger:
    """Tests for get_logger() without global configuration."""

    def test_leaves_structlog_unconfigured(self) -> None:
        structlog.reset_defaults()

        get_logger("git_context.test").warning("git.test.event")

        assert not structlog.is_configured()

    def test_unconfigured_writes_warnings_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        structlog.reset_defaults()

        logger = get_logger("git_context.test")
        logger.info("git.test.hidden")
        logger.warning("git.test.shown")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "git.test.hidden" not in captured.err
        assert "git.test.shown" in captured.err

    def test_follows_host_configuration(self) -> None:
        structlog.reset_defaults()
        with capture_logs() as logs:
            get_logger("git_context.test").info("git.test.host", files=2)

        assert logs == [{"event": "git.test.host", "files": 2, "log_level": "info"}]

    def test_import_does_not_configure_structlog(self) -> None:
        """Verify importing the package in a fresh interpreter leaves the host's structlog alone."""
        src = Path(git_context.__file__).resolve().parents[1]
        env = {**os.environ, "PYTHONPATH": os.pathsep.join(filter(None, [str(src), os.environ.get("PYTHONPATH")]))}
        code = "import structlog, git_context; print(structlog.is_configured())"

        result = subprocess.run([sys.executable, "-c", code], capture_output=True, text=True, env=env, check=True)

        assert result.stdout.strip() == "False"
