"""Tests for cce.integrations.claude module."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from cce.integrations.claude import (
    ClaudeLauncher,
    check_claude_installed,
    find_claude_executable,
)
from cce.parser.delegation import build_delegation_plan
from cce.utils.errors import ClaudeNotFoundError, LaunchError


def _which(available):
    return lambda name: f"/usr/bin/{name}" if name in available else None


class TestFindClaudeExecutable:
    """Tests for find_claude_executable."""

    def test_prefers_claude_code(self):
        with patch("cce.integrations.claude.shutil.which", side_effect=_which({"claude-code", "claude"})):
            assert find_claude_executable() == "/usr/bin/claude-code"

    def test_falls_back_to_claude(self):
        with patch("cce.integrations.claude.shutil.which", side_effect=_which({"claude", "claude_code"})):
            assert find_claude_executable() == "/usr/bin/claude"

    def test_not_found(self):
        with patch("cce.integrations.claude.shutil.which", return_value=None):
            assert find_claude_executable() is None


class TestCheckClaudeInstalled:
    """Tests for check_claude_installed."""

    @patch("cce.integrations.claude.subprocess.run")
    @patch("cce.integrations.claude.shutil.which", return_value="/usr/bin/claude")
    def test_installed(self, mock_which, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout="1.0.3 (Claude Code)\n", stderr="")

        is_valid, message = check_claude_installed()

        assert is_valid is True
        assert message == "1.0.3 (Claude Code)"

    @patch("cce.integrations.claude.shutil.which", return_value=None)
    def test_not_installed(self, mock_which):
        is_valid, message = check_claude_installed()

        assert is_valid is False
        assert "not installed" in message

    @patch("cce.integrations.claude.subprocess.run", side_effect=subprocess.TimeoutExpired("claude", 10))
    @patch("cce.integrations.claude.shutil.which", return_value="/usr/bin/claude")
    def test_timeout(self, mock_which, mock_run):
        is_valid, message = check_claude_installed()

        assert is_valid is False
        assert "Error checking" in message


class TestClaudeLauncher:
    """Tests for ClaudeLauncher."""

    @pytest.fixture
    def mock_popen(self):
        with patch("cce.integrations.claude.subprocess.Popen") as popen:
            popen.return_value.wait.return_value = 0
            yield popen

    def test_missing_executable(self):
        with patch("cce.integrations.claude.shutil.which", return_value=None):
            with pytest.raises(ClaudeNotFoundError, match="not found in PATH"):
                ClaudeLauncher().get_executable()

    def test_executable_cached(self):
        with patch("cce.integrations.claude.shutil.which", return_value="/usr/bin/claude") as which:
            launcher = ClaudeLauncher()
            launcher.get_executable()
            launcher.get_executable()
        assert which.call_count == 1

    def test_execute_plan(self, mock_popen, production_env, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("CCE_TEST_INHERITED", "yes")
        monkeypatch.setenv("ANTHROPIC_BASE_URL", "https://overridden.example.com")
        plan = build_delegation_plan(production_env, ["-r", "You are a helpful assistant"])

        exit_code = ClaudeLauncher("/usr/bin/claude").execute(plan)

        assert exit_code == 0
        args, kwargs = mock_popen.call_args
        assert args[0] == ["/usr/bin/claude", "-r", "You are a helpful assistant"]
        env = kwargs["env"]
        assert env["CCE_TEST_INHERITED"] == "yes"
        assert env["ANTHROPIC_BASE_URL"] == production_env.base_url
        assert env["ANTHROPIC_API_KEY"] == production_env.api_key
        assert env["ANTHROPIC_HEADER_X-Team"] == "platform"
        assert kwargs["cwd"] == plan.working_dir

    def test_exit_code_propagated(self, mock_popen, production_env):
        mock_popen.return_value.wait.return_value = 42
        plan = build_delegation_plan(production_env, ["-r", "x"])

        assert ClaudeLauncher("/usr/bin/claude").execute(plan) == 42

    def test_signal_exit_code(self, mock_popen):
        mock_popen.return_value.wait.return_value = -2

        assert ClaudeLauncher("/usr/bin/claude").run(["chat"], {}) == 130

    def test_empty_working_dir_inherits(self, mock_popen):
        ClaudeLauncher("/usr/bin/claude").run(["chat"], {}, working_dir="")

        assert mock_popen.call_args.kwargs["cwd"] is None

    def test_launch_without_environment(self, mock_popen, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)

        ClaudeLauncher("/usr/bin/claude").launch(None, ["--json"])

        args, kwargs = mock_popen.call_args
        assert args[0] == ["/usr/bin/claude", "--json"]
        assert "ANTHROPIC_API_KEY" not in kwargs["env"]

    def test_launch_with_environment(self, mock_popen, staging_env):
        ClaudeLauncher("/usr/bin/claude").launch(staging_env, [])

        env = mock_popen.call_args.kwargs["env"]
        assert env["ANTHROPIC_BASE_URL"] == staging_env.base_url

    def test_show_help(self, mock_popen):
        ClaudeLauncher("/usr/bin/claude").show_help()

        assert mock_popen.call_args.args[0] == ["/usr/bin/claude", "--help"]

    def test_start_failure(self):
        with patch("cce.integrations.claude.subprocess.Popen", side_effect=PermissionError("denied")):
            with pytest.raises(LaunchError, match="Failed to start") as exc_info:
                ClaudeLauncher("/usr/bin/claude").run(["-r", "x"], {})
        assert exc_info.value.forwarded_args == ["-r", "x"]

    def test_interrupt_waits_for_child(self, mock_popen):
        mock_popen.return_value.wait.side_effect = [KeyboardInterrupt(), 130]

        assert ClaudeLauncher("/usr/bin/claude").run(["chat"], {}) == 130
        assert mock_popen.return_value.wait.call_count == 2
