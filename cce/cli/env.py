"""``cce env`` commands for managing configured environments."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Annotated

import typer

from cce.config.manager import ConfigManager
from cce.config.models import (
    Environment,
    validate_api_key,
    validate_base_url,
    validate_environment_name,
    validate_model_name,
)
from cce.integrations.network import validate_endpoint
from cce.ui.menus import show_environment_details, show_environment_list
from cce.ui.prompts import prompt_confirm, prompt_input, prompt_password
from cce.utils.console import print_error, print_info, print_success
from cce.utils.errors import CceError, ExitCode, UserCancelledError

env_app = typer.Typer(
    name="env",
    help="Manage Claude Code environments",
    add_completion=False,
    no_args_is_help=True,
)

ConfigOption = Annotated[
    str | None,
    typer.Option("--config", help="Path to the configuration file"),
]


@env_app.callback()
def env_callback(ctx: typer.Context, config: ConfigOption = None) -> None:
    """Manage Claude Code environments."""
    ctx.obj = config


@contextmanager
def _handle_errors() -> Iterator[None]:
    try:
        yield
    except UserCancelledError as e:
        print_info(str(e))
        raise typer.Exit(ExitCode.USER_CANCELLED) from e
    except CceError as e:
        print_error(str(e))
        raise typer.Exit(e.exit_code) from e


def _load_manager(ctx: typer.Context, config: str | None) -> ConfigManager:
    manager = ConfigManager(config or ctx.obj or None)
    manager.load()
    return manager


def _as_validator(check: Callable[[str], None]) -> Callable[[str], bool | str]:
    """Adapt a raising config validator to questionary's validate protocol."""

    def validate(value: str) -> bool | str:
        try:
            check(value)
        except CceError as e:
            return str(e)
        return True

    return validate


def parse_headers(values: list[str]) -> dict[str, str]:
    """Parse repeated ``KEY=VALUE`` options into a header mapping.

    Raises:
        typer.BadParameter: If an entry has no '=' or an empty key
    """
    headers: dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        key = key.strip()
        if not sep or not key:
            raise typer.BadParameter(f"Invalid header '{item}', expected KEY=VALUE")
        headers[key] = value.strip()
    return headers


@env_app.command("add")
def add_command(
    ctx: typer.Context,
    name: Annotated[str | None, typer.Argument(help="Environment name")] = None,
    url: Annotated[str | None, typer.Option("--url", help="API base URL")] = None,
    key: Annotated[str | None, typer.Option("--key", help="API key")] = None,
    model: Annotated[
        str | None, typer.Option("--model", help="Model to use (empty for default)")
    ] = None,
    description: Annotated[
        str | None, typer.Option("--description", help="Description shown in menus")
    ] = None,
    header: Annotated[
        list[str] | None,
        typer.Option("--header", help="Custom header as KEY=VALUE (repeatable)"),
    ] = None,
    make_default: Annotated[
        bool, typer.Option("--default", help="Make this the default environment")
    ] = False,
    config: ConfigOption = None,
) -> None:
    """Add a new environment, prompting for anything not given."""
    headers = parse_headers(header or [])

    with _handle_errors():
        manager = _load_manager(ctx, config)
        interactive = name is None or url is None or key is None

        if name is None:
            name = prompt_input("Environment name:", validate=_as_validator(validate_environment_name))
        if url is None:
            url = prompt_input(
                "Base URL:",
                default="https://api.anthropic.com",
                validate=_as_validator(validate_base_url),
            )
        if key is None:
            key = prompt_password("API key:", validate=_as_validator(validate_api_key))
        if model is None and interactive:
            model = prompt_input(
                "Model (leave empty for default):", validate=_as_validator(validate_model_name)
            )
        if description is None and interactive:
            description = prompt_input("Description (optional):")

        env = Environment(
            name=name.strip(),
            base_url=url.strip(),
            api_key=key.strip(),
            model=(model or "").strip(),
            headers=headers,
            description=(description or "").strip(),
        )
        manager.add_environment(env)
        if make_default or len(manager.config.environments) == 1:
            manager.set_default(env.name)

        print_success(f"Environment '{env.name}' added")


@env_app.command("edit")
def edit_command(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Environment name")],
    url: Annotated[str | None, typer.Option("--url", help="New API base URL")] = None,
    key: Annotated[str | None, typer.Option("--key", help="New API key")] = None,
    model: Annotated[
        str | None, typer.Option("--model", help="New model (empty for default)")
    ] = None,
    description: Annotated[
        str | None, typer.Option("--description", help="New description")
    ] = None,
    header: Annotated[
        list[str] | None,
        typer.Option("--header", help="Replace headers with KEY=VALUE (repeatable)"),
    ] = None,
    config: ConfigOption = None,
) -> None:
    """Edit an environment; with no options, prompt with the current values."""
    headers = parse_headers(header) if header is not None else None

    with _handle_errors():
        manager = _load_manager(ctx, config)
        current = manager.get_environment(name)

        if all(value is None for value in (url, key, model, description, headers)):
            url = prompt_input(
                "Base URL:", default=current.base_url, validate=_as_validator(validate_base_url)
            )
            # Empty answer keeps the stored key.
            key = prompt_password("API key (leave empty to keep):") or None
            if key is not None:
                validate_api_key(key)
            model = prompt_input(
                "Model (leave empty for default):",
                default=current.model,
                validate=_as_validator(validate_model_name),
            )
            description = prompt_input("Description (optional):", default=current.description)

        env = Environment(
            name=current.name,
            base_url=(url if url is not None else current.base_url).strip(),
            api_key=(key if key is not None else current.api_key).strip(),
            model=(model if model is not None else current.model).strip(),
            headers=headers if headers is not None else dict(current.headers),
            description=(description if description is not None else current.description).strip(),
        )
        manager.update_environment(env)

        print_success(f"Environment '{name}' updated")


@env_app.command("list")
def list_command(ctx: typer.Context, config: ConfigOption = None) -> None:
    """List configured environments."""
    with _handle_errors():
        manager = _load_manager(ctx, config)
        environments = manager.list_environments()
        if not environments:
            print_info("No environments configured. Run 'cce env add' to create one")
            return
        show_environment_list(environments, manager.config.default_env)


@env_app.command("show")
def show_command(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Environment name")],
    config: ConfigOption = None,
) -> None:
    """Show one environment with its API key masked."""
    with _handle_errors():
        manager = _load_manager(ctx, config)
        env = manager.get_environment(name)
        show_environment_details(env, is_default=manager.config.default_env == name)


@env_app.command("remove")
def remove_command(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Environment name")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
    config: ConfigOption = None,
) -> None:
    """Remove an environment."""
    with _handle_errors():
        manager = _load_manager(ctx, config)
        manager.get_environment(name)

        if not yes and not prompt_confirm(f"Remove environment '{name}'?", default=False):
            print_info("Removal cancelled")
            return

        manager.remove_environment(name)
        print_success(f"Environment '{name}' removed")


@env_app.command("default")
def default_command(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Environment name")],
    config: ConfigOption = None,
) -> None:
    """Set the default environment."""
    with _handle_errors():
        manager = _load_manager(ctx, config)
        manager.set_default(name)
        print_success(f"Default environment set to '{name}'")


@env_app.command("check")
def check_command(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Environment name")],
    timeout: Annotated[
        float, typer.Option("--timeout", min=0.1, help="Request timeout in seconds")
    ] = 10.0,
    config: ConfigOption = None,
) -> None:
    """Check that an environment's endpoint is reachable."""
    with _handle_errors():
        manager = _load_manager(ctx, config)
        env = manager.get_environment(name)

    print_info(f"Checking {env.base_url} ...")
    result = validate_endpoint(env.base_url, timeout=timeout)

    if not result.success:
        print_error(f"Environment '{name}' is not reachable: {result.error}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    ssl_note = ", TLS ok" if result.ssl_valid else ""
    print_success(
        f"Environment '{name}' is reachable "
        f"(HTTP {result.status_code}, {result.response_time * 1000:.0f} ms{ssl_note})"
    )


__all__ = [
    "env_app",
    "parse_headers",
]
