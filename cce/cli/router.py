"""Top-level command routing for CCE.

The wrapper accepts any Claude CLI command line, so it cannot declare its
options to typer up front. The raw argv is analyzed instead, and the
chosen strategy decides between showing help or version, launching
Claude with an environment, or delegating the command line unchanged.
Only ``cce env ...`` is handed to typer.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence

from rich.markup import escape

from cce import SCRIPT_NAME
from cce.config.manager import ConfigManager
from cce.config.models import Environment
from cce.integrations.claude import ClaudeLauncher, check_claude_installed
from cce.parser.analyzer import ArgumentAnalysis, ArgumentAnalyzer, WrapperFlags
from cce.parser.delegation import DelegationEngine, DelegationPlan, DelegationStrategy
from cce.parser.registry import FlagRegistry
from cce.ui.menus import select_environment
from cce.utils.console import (
    console,
    print_error,
    print_info,
    print_warning,
    show_version,
    show_wrapper_help,
)
from cce.utils.env_utils import mask_env_vars
from cce.utils.errors import (
    CceError,
    ConfigError,
    ExitCode,
    PlanValidationError,
    UserCancelledError,
)
from cce.utils.logging import log_debug, log_message, set_verbose, setup_logging

ENV_COMMAND = "env"


def run(
    argv: Sequence[str] | None = None,
    *,
    launcher: ClaudeLauncher | None = None,
    registry: FlagRegistry | None = None,
) -> int:
    """Run CCE for one command line and return the process exit code.

    Args:
        argv: Arguments without the program name; defaults to sys.argv[1:]
        launcher: Claude launcher, injectable for testing
        registry: Flag vocabulary; the default one when omitted
    """
    setup_logging()
    args = list(sys.argv[1:] if argv is None else argv)
    log_message(f"cce invoked with {len(args)} argument(s)")

    if args and args[0] == ENV_COMMAND:
        return _run_env_command(args[1:])

    engine = DelegationEngine(ArgumentAnalyzer(registry or FlagRegistry.default()))
    launcher = launcher or ClaudeLauncher()

    try:
        return _dispatch(args, engine, launcher)

    except UserCancelledError as e:
        print_info(str(e))
        return ExitCode.USER_CANCELLED

    except PlanValidationError as e:
        print_error(str(e))
        if e.field == "environment":
            print_info(
                f"Use --env NAME, or set a default with '{SCRIPT_NAME} env default NAME'"
            )
        return e.exit_code

    except CceError as e:
        print_error(str(e))
        return e.exit_code

    except KeyboardInterrupt:
        print_info("Operation cancelled by user")
        return ExitCode.USER_CANCELLED


def main() -> None:
    """Console script entry point."""
    sys.exit(run())


def _run_env_command(args: list[str]) -> int:
    from cce.cli.env import env_app

    try:
        env_app(args=args, prog_name=f"{SCRIPT_NAME} {ENV_COMMAND}")
    except SystemExit as e:
        if e.code is None:
            return ExitCode.SUCCESS
        return e.code if isinstance(e.code, int) else ExitCode.GENERAL_ERROR
    return ExitCode.SUCCESS


def _dispatch(args: list[str], engine: DelegationEngine, launcher: ClaudeLauncher) -> int:
    analysis = engine.analyzer.analyze(args)
    strategy = engine.choose_strategy(analysis)
    flags, forwarded = engine.analyzer.extract_wrapper_flags(args)
    set_verbose(flags.verbose)
    log_debug(f"Strategy: {strategy.key} ({strategy.reason})")

    if strategy is DelegationStrategy.SHOW_COMBINED_HELP:
        return _show_combined_help(engine.registry, launcher)

    if strategy is DelegationStrategy.SHOW_VERSION:
        show_version()
        return ExitCode.SUCCESS

    if flags.verbose:
        _print_analysis(analysis, strategy)
        for rule in engine.analyzer.classify_flags(args).conflicts:
            print_info(f"Flag {rule.flag}: {rule.message}")

    manager = ConfigManager(flags.config or None)
    manager.load()

    if engine.is_passthrough_strategy(strategy):
        environment = _resolve_noninteractive(manager, flags)
        if environment is None and not manager.config.environments:
            print_warning(
                f"No environments configured. Run '{SCRIPT_NAME} {ENV_COMMAND} add' to create one"
            )
        plan = engine.build_plan(environment, args)
        if flags.verbose:
            _print_plan(plan)
        return launcher.execute(plan)

    return _handle_internally(manager, flags, forwarded, launcher)


def _handle_internally(
    manager: ConfigManager,
    flags: WrapperFlags,
    forwarded: list[str],
    launcher: ClaudeLauncher,
) -> int:
    """Launch Claude after the wrapper picked an environment itself."""
    if not manager.config.environments:
        if flags.environment:
            # Raises EnvironmentNotFoundError
            manager.get_environment(flags.environment)
        print_info("No environments configured, launching Claude CLI with the current environment")
        return launcher.launch(None, forwarded)

    environment = _resolve_noninteractive(manager, flags)
    if environment is None:
        if flags.no_interactive:
            raise ConfigError(
                "several environments are configured and none was chosen; "
                "use --env NAME or set a default environment"
            )
        environment = select_environment(manager.list_environments(), manager.config.default_env)

    if flags.verbose:
        _print_environment(environment)
    return launcher.launch(environment, forwarded)


def _resolve_noninteractive(manager: ConfigManager, flags: WrapperFlags) -> Environment | None:
    """Pick an environment without asking: --env, the only one, then the default.

    Raises:
        EnvironmentNotFoundError: If --env names an unknown environment
    """
    if flags.environment:
        return manager.get_environment(flags.environment)

    environments = manager.list_environments()
    if len(environments) == 1:
        return environments[0]
    return manager.resolve_environment(None)


def _show_combined_help(registry: FlagRegistry, launcher: ClaudeLauncher) -> int:
    show_wrapper_help(registry)

    installed, message = check_claude_installed()
    if not installed:
        print_warning(f"{message}; install it to see its options")
        return ExitCode.SUCCESS

    console.print(f"[highlight]Claude CLI options ({escape(message)}):[/highlight]")
    console.print()
    launcher.show_help()
    return ExitCode.SUCCESS


def _print_analysis(analysis: ArgumentAnalysis, strategy: DelegationStrategy) -> None:
    print_info(
        f"Arguments: {analysis.argument_count} total, "
        f"wrapper flags: {', '.join(analysis.wrapper_flags) or 'none'}, "
        f"forwarded: {len(analysis.forwarded_args)}"
    )
    print_info(f"Strategy: {strategy.description} ({strategy.reason})")
    if analysis.environment_hints:
        print_info(f"Environment hints: {', '.join(analysis.environment_hints)}")


def _print_environment(environment: Environment) -> None:
    print_info(f"Environment: {environment.name} ({environment.base_url})")
    print_info(f"Model: {environment.model or 'default'}")


def _print_plan(plan: DelegationPlan) -> None:
    if plan.environment is not None:
        _print_environment(plan.environment)
    for key, value in sorted(mask_env_vars(plan.env_vars).items()):
        print_info(f"  {key}={value}")
    print_info(f"Working directory: {plan.working_dir or '(inherited)'}")


__all__ = [
    "ENV_COMMAND",
    "main",
    "run",
]
