"""Interactive menus for CCE.

This module provides the environment selection menu and the
environment details view.
"""

from __future__ import annotations

import questionary
from rich.markup import escape
from rich.table import Table

from cce.config.models import Environment
from cce.ui.prompts import prompt_select
from cce.utils.console import console
from cce.utils.env_utils import is_sensitive_key, mask_secret
from cce.utils.errors import CceError
from cce.utils.logging import log_message


def select_environment(
    environments: list[Environment],
    default: str | None = None,
) -> Environment:
    """Let the user pick one environment.

    Args:
        environments: Environments to choose from
        default: Name of the environment to preselect

    Returns:
        The selected Environment

    Raises:
        CceError: If there is nothing to choose from
        UserCancelledError: If user cancels
    """
    if not environments:
        raise CceError("no environments configured. Run 'cce env add' to create one")

    choices = [
        questionary.Choice(
            title=f"{env.name} - {env.display_description}",
            value=env.name,
        )
        for env in environments
    ]
    names = {env.name for env in environments}
    selected = prompt_select(
        "Select Claude Code environment",
        choices=choices,
        default=default if default in names else None,
    )

    log_message(f"Environment selection: {selected}")
    return next(env for env in environments if env.name == selected)


def show_environment_details(env: Environment, *, is_default: bool = False) -> None:
    """Print one environment as a table, with secrets masked."""
    table = Table(title=f"Environment: {env.name}", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("Name", env.name + (" (default)" if is_default else ""))
    if env.description:
        table.add_row("Description", escape(env.description))
    table.add_row("Base URL", escape(env.base_url))
    table.add_row("API Key", mask_secret(env.api_key))
    table.add_row("Model", escape(env.model) or "Default model")
    for key, value in sorted(env.headers.items()):
        shown = mask_secret(value) if is_sensitive_key(key) else value
        table.add_row(escape(f"Header {key}"), escape(shown))
    if env.created_at:
        table.add_row("Created", env.created_at.strftime("%Y-%m-%d %H:%M:%S"))
    if env.updated_at:
        table.add_row("Updated", env.updated_at.strftime("%Y-%m-%d %H:%M:%S"))

    console.print(table)


def show_environment_list(environments: list[Environment], default: str = "") -> None:
    """Print all environments as a table."""
    table = Table(title="Environments")
    table.add_column("", width=1)
    table.add_column("Name", style="bold")
    table.add_column("Base URL")
    table.add_column("Model")
    table.add_column("Description")

    for env in environments:
        table.add_row(
            "*" if env.name == default else "",
            env.name,
            escape(env.base_url),
            escape(env.model) or "default",
            escape(env.description),
        )

    console.print(table)


__all__ = [
    "select_environment",
    "show_environment_details",
    "show_environment_list",
]
