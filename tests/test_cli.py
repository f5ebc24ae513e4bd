"""Tests for cce.cli.router module."""

from unittest.mock import MagicMock, patch

import pytest

from cce.cli import run
from cce.integrations.claude import ClaudeLauncher
from cce.parser.delegation import DelegationStrategy
from cce.utils.errors import ClaudeNotFoundError, ExitCode, UserCancelledError


@pytest.fixture
def launcher() -> MagicMock:
    launcher = MagicMock(spec=ClaudeLauncher)
    launcher.execute.return_value = 0
    launcher.launch.return_value = 0
    launcher.show_help.return_value = 0
    return launcher


class TestVersionAndHelp:
    """Tests for version and combined help."""

    @pytest.mark.parametrize("flag", ["--version", "-v"])
    def test_version(self, flag, launcher, capsys):
        assert run([flag], launcher=launcher) == ExitCode.SUCCESS

        assert "Claude Code Environment Switcher v1.1.0" in capsys.readouterr().out
        launcher.execute.assert_not_called()

    def test_version_ignores_forwarded_flags(self, launcher, capsys):
        assert run(["-r", "x", "--version"], launcher=launcher) == ExitCode.SUCCESS
        launcher.execute.assert_not_called()

    @patch("cce.cli.router.check_claude_installed", return_value=(True, "1.0.0 (Claude Code)"))
    def test_combined_help(self, mock_check, launcher, capsys):
        assert run(["-r", "x", "--help"], launcher=launcher) == ExitCode.SUCCESS

        out = capsys.readouterr().out
        assert "--env" in out
        assert "passed through to the Claude CLI" in out
        assert "Claude CLI options (1.0.0 (Claude Code))" in out
        launcher.show_help.assert_called_once()
        launcher.execute.assert_not_called()

    @patch(
        "cce.cli.router.check_claude_installed",
        return_value=(False, "Claude Code CLI is not installed or not in PATH"),
    )
    def test_help_without_claude(self, mock_check, launcher, capsys):
        assert run(["-h"], launcher=launcher) == ExitCode.SUCCESS

        assert "not installed or not in PATH" in " ".join(capsys.readouterr().err.split())
        launcher.show_help.assert_not_called()

    @patch("cce.cli.router.check_claude_installed", return_value=(False, "missing"))
    def test_help_in_value_position(self, mock_check, launcher):
        assert run(["--env", "--help"], launcher=launcher) == ExitCode.SUCCESS
        launcher.launch.assert_not_called()
        launcher.execute.assert_not_called()

    def test_help_does_not_need_config(self, launcher, isolated_config):
        isolated_config.parent.mkdir(parents=True)
        isolated_config.write_text("{corrupted")

        with patch("cce.cli.router.check_claude_installed", return_value=(False, "missing")):
            assert run(["--help"], launcher=launcher) == ExitCode.SUCCESS


class TestDelegation:
    """Tests for commands delegated with environment injection."""

    def test_named_environment(self, launcher, write_config, production_env, staging_env):
        write_config(production_env, staging_env, default_env="staging")
        launcher.execute.return_value = 7

        exit_code = run(["--env", "production", "-r", "instruction"], launcher=launcher)

        assert exit_code == 7
        plan = launcher.execute.call_args.args[0]
        assert plan.strategy is DelegationStrategy.DELEGATE_WITH_ENVIRONMENT
        assert plan.environment.name == "production"
        assert plan.forwarded_args == ("-r", "instruction")
        assert plan.env_vars["ANTHROPIC_BASE_URL"] == production_env.base_url

    def test_default_environment(self, launcher, write_config, production_env, staging_env):
        write_config(production_env, staging_env, default_env="staging")

        run(["-r", "x"], launcher=launcher)

        assert launcher.execute.call_args.args[0].environment.name == "staging"

    def test_single_environment_without_default(self, launcher, write_config, production_env):
        write_config(production_env)

        run(["chat"], launcher=launcher)

        assert launcher.execute.call_args.args[0].environment.name == "production"

    def test_inline_env_flag(self, launcher, write_config, production_env, staging_env):
        write_config(production_env, staging_env)

        run(["--env=staging", "-r", "x"], launcher=launcher)

        plan = launcher.execute.call_args.args[0]
        assert plan.environment.name == "staging"
        assert plan.forwarded_args == ("-r", "x")

    def test_no_environment_fails_validation(self, launcher, capsys):
        exit_code = run(["-r", "x"], launcher=launcher)

        assert exit_code == ExitCode.PLAN_INVALID
        assert "environment is required" in " ".join(capsys.readouterr().err.split())
        launcher.execute.assert_not_called()

    def test_ambiguous_environment_fails_validation(
        self, launcher, write_config, production_env, staging_env
    ):
        write_config(production_env, staging_env)

        assert run(["-r", "x"], launcher=launcher) == ExitCode.PLAN_INVALID

    def test_unknown_environment(self, launcher, write_config, production_env, capsys):
        write_config(production_env)

        exit_code = run(["--env", "nope", "-r", "x"], launcher=launcher)

        assert exit_code == ExitCode.CONFIG_ERROR
        assert "environment 'nope' not found" in capsys.readouterr().err

    def test_markup_in_environment_name(self, launcher, capsys):
        exit_code = run(["--env", "[/x]", "-r", "hi"], launcher=launcher)

        assert exit_code == ExitCode.CONFIG_ERROR
        assert "[/x]" in capsys.readouterr().err

    def test_config_flag(self, launcher, tmp_path, production_env):
        from cce.config.manager import ConfigManager

        path = tmp_path / "other.json"
        ConfigManager(path).add_environment(production_env)

        run(["--config", str(path), "-r", "x"], launcher=launcher)

        assert launcher.execute.call_args.args[0].environment.name == "production"

    def test_corrupted_config(self, launcher, isolated_config):
        isolated_config.parent.mkdir(parents=True)
        isolated_config.write_text("{corrupted")

        assert run(["-r", "x"], launcher=launcher) == ExitCode.CONFIG_ERROR

    def test_claude_not_installed(self, launcher, write_config, production_env):
        write_config(production_env)
        launcher.execute.side_effect = ClaudeNotFoundError("Claude CLI executable not found")

        assert run(["-r", "x"], launcher=launcher) == ExitCode.CLAUDE_NOT_INSTALLED

    def test_verbose_masks_secrets(self, launcher, write_config, production_env, capsys):
        write_config(production_env)

        run(["--verbose", "-r", "x"], launcher=launcher)

        # Collapse rich's line wrapping
        err = " ".join(capsys.readouterr().err.split())
        assert production_env.api_key not in err
        assert "ANTHROPIC_API_KEY=sk-a***-key" in err
        assert DelegationStrategy.DELEGATE_WITH_ENVIRONMENT.reason in err
        assert "Flag --verbose: cce verbose flag takes precedence" in err


class TestInternalHandling:
    """Tests for the wrapper's own interactive flow."""

    def test_no_environments_launches_directly(self, launcher):
        assert run([], launcher=launcher) == ExitCode.SUCCESS

        launcher.launch.assert_called_once_with(None, [])

    def test_default_environment(self, launcher, write_config, production_env, staging_env):
        write_config(production_env, staging_env, default_env="production")

        run(["--verbose"], launcher=launcher)

        environment, args = launcher.launch.call_args.args
        assert environment.name == "production"
        assert args == []

    def test_named_environment(self, launcher, write_config, production_env, staging_env):
        write_config(production_env, staging_env)

        run(["-e", "staging"], launcher=launcher)

        assert launcher.launch.call_args.args[0].name == "staging"

    @patch("cce.cli.router.select_environment")
    def test_menu_when_ambiguous(
        self, mock_select, launcher, write_config, production_env, staging_env
    ):
        write_config(production_env, staging_env)
        mock_select.return_value = staging_env

        run([], launcher=launcher)

        mock_select.assert_called_once()
        assert launcher.launch.call_args.args[0] is staging_env

    @patch("cce.cli.router.select_environment")
    def test_no_interactive(self, mock_select, launcher, write_config, production_env, staging_env):
        write_config(production_env, staging_env)

        assert run(["--no-interactive"], launcher=launcher) == ExitCode.CONFIG_ERROR
        mock_select.assert_not_called()

    @patch("cce.cli.router.select_environment", side_effect=UserCancelledError("cancelled"))
    def test_menu_cancelled(self, mock_select, launcher, write_config, production_env, staging_env):
        write_config(production_env, staging_env)

        assert run([], launcher=launcher) == ExitCode.USER_CANCELLED
        launcher.launch.assert_not_called()

    def test_keyboard_interrupt(self, launcher, write_config, production_env):
        write_config(production_env)
        launcher.launch.side_effect = KeyboardInterrupt

        assert run([], launcher=launcher) == ExitCode.USER_CANCELLED

    def test_named_environment_without_config(self, launcher):
        assert run(["--env", "prod"], launcher=launcher) == ExitCode.CONFIG_ERROR
        launcher.launch.assert_not_called()


class TestInvalidArguments:
    """Malformed argument lists surface as errors."""

    def test_non_string_argument(self, launcher, capsys):
        assert run(["-r", 1], launcher=launcher) == ExitCode.GENERAL_ERROR
        assert "must be a string" in capsys.readouterr().err


class TestEnvDispatch:
    """`cce env ...` goes to the typer command group."""

    def test_env_list(self, launcher):
        assert run(["env", "list"], launcher=launcher) == ExitCode.SUCCESS
        launcher.execute.assert_not_called()
        launcher.launch.assert_not_called()

    def test_env_error_exit_code(self, launcher):
        assert run(["env", "show", "nope"], launcher=launcher) == ExitCode.CONFIG_ERROR
