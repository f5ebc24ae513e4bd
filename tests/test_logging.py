"""Tests for cce.utils.logging module."""

import importlib
import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest

import cce.utils.logging as logging_module


@pytest.fixture(autouse=True)
def reset_logging_module():
    """Reload the module afterwards so other tests see the default state."""
    yield
    with patch.dict(os.environ, {}, clear=False):
        os.environ.pop("CCE_LOG", None)
        os.environ.pop("CCE_LOG_FILE", None)
        logging_module._logger = None
        importlib.reload(logging_module)


class TestLogging:
    """Tests for logging functionality."""

    def test_log_disabled_by_default(self):
        """Logging is disabled when CCE_LOG is not set."""
        with patch.dict(os.environ, {}, clear=True):
            logging_module._logger = None
            importlib.reload(logging_module)

            assert logging_module.LOG_ENABLED is False

    def test_log_enabled_with_env_var(self):
        """Logging is enabled when CCE_LOG=true."""
        with patch.dict(os.environ, {"CCE_LOG": "true"}):
            logging_module._logger = None
            importlib.reload(logging_module)

            assert logging_module.LOG_ENABLED is True

    def test_log_file_default_path(self):
        with patch.dict(os.environ, {}, clear=True):
            importlib.reload(logging_module)

            assert logging_module.LOG_FILE == Path.home() / ".cce.log"

    def test_log_file_custom_path(self):
        custom_path = "/tmp/custom-cce.log"
        with patch.dict(os.environ, {"CCE_LOG_FILE": custom_path}):
            logging_module._logger = None
            importlib.reload(logging_module)

            assert str(logging_module.LOG_FILE) == custom_path

    def test_disabled_logger_uses_null_handler(self):
        with patch.dict(os.environ, {}, clear=True):
            logging_module._logger = None
            importlib.reload(logging_module)

            logger = logging_module.setup_logging()
            assert isinstance(logger, logging.Logger)
            assert any(isinstance(h, logging.NullHandler) for h in logger.handlers)

    def test_setup_logging_is_cached(self):
        first = logging_module.setup_logging()
        assert logging_module.get_logger() is first

    def test_enabled_logging_writes_file(self, tmp_path):
        log_file = tmp_path / "logs" / "cce.log"
        with patch.dict(os.environ, {"CCE_LOG": "true", "CCE_LOG_FILE": str(log_file)}):
            logging_module._logger = None
            importlib.reload(logging_module)

            logging_module.log_message("hello from test")
            logging_module.log_command("claude --version", 0)
            for handler in logging_module.get_logger().handlers:
                handler.flush()

        content = log_file.read_text()
        assert "hello from test" in content
        assert "COMMAND: claude --version | EXIT_CODE: 0" in content

    def test_debug_messages_kept_only_when_verbose(self, tmp_path):
        log_file = tmp_path / "cce.log"
        with patch.dict(os.environ, {"CCE_LOG": "true", "CCE_LOG_FILE": str(log_file)}):
            logging_module._logger = None
            importlib.reload(logging_module)

            logging_module.set_verbose(False)
            logging_module.log_debug("hidden detail")
            logging_module.set_verbose(True)
            logging_module.log_debug("verbose detail")
            for handler in logging_module.get_logger().handlers:
                handler.flush()

        content = log_file.read_text()
        assert "hidden detail" not in content
        assert "verbose detail" in content
