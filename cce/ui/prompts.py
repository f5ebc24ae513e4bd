"""Interactive prompts for CCE.

This module provides Questionary-based user input prompts with
consistent styling and error handling.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import questionary
from questionary import Style

from cce.utils.errors import UserCancelledError
from cce.utils.logging import log_message

# Custom style matching the application theme
custom_style = Style(
    [
        ("qmark", "fg:cyan bold"),
        ("question", "bold"),
        ("answer", "fg:green bold"),
        ("pointer", "fg:cyan bold"),
        ("highlighted", "fg:cyan bold"),
        ("selected", "fg:green"),
        ("separator", "fg:cyan"),
        ("instruction", "fg:white"),
        ("text", ""),
        ("disabled", "fg:gray italic"),
    ]
)

Validator = Callable[[str], bool | str]


def prompt_confirm(message: str, default: bool = True) -> bool:
    """Prompt for yes/no confirmation.

    Raises:
        UserCancelledError: If user presses Ctrl+C
    """
    log_message(f"Prompt confirm: {message}")

    try:
        result = questionary.confirm(
            message,
            default=default,
            style=custom_style,
        ).ask()

        if result is None:
            raise UserCancelledError("User cancelled confirmation prompt")

        log_message(f"User response: {result}")
        return result

    except KeyboardInterrupt as e:
        raise UserCancelledError("User cancelled with Ctrl+C") from e


def prompt_input(
    message: str,
    default: str = "",
    *,
    validate: Validator | None = None,
) -> str:
    """Prompt for text input.

    Args:
        message: Prompt message
        default: Default value
        validate: Optional validation function returning True or an error message

    Returns:
        User input string

    Raises:
        UserCancelledError: If user presses Ctrl+C
    """
    log_message(f"Prompt input: {message}")

    try:
        result = questionary.text(
            message,
            default=default,
            validate=validate,
            style=custom_style,
        ).ask()

        if result is None:
            raise UserCancelledError("User cancelled input prompt")

        return result

    except KeyboardInterrupt as e:
        raise UserCancelledError("User cancelled with Ctrl+C") from e


def prompt_password(message: str, *, validate: Validator | None = None) -> str:
    """Prompt for a secret without echoing it.

    The answer is never logged.

    Raises:
        UserCancelledError: If user presses Ctrl+C
    """
    log_message(f"Prompt password: {message}")

    try:
        result = questionary.password(
            message,
            validate=validate,
            style=custom_style,
        ).ask()

        if result is None:
            raise UserCancelledError("User cancelled password prompt")

        return result

    except KeyboardInterrupt as e:
        raise UserCancelledError("User cancelled with Ctrl+C") from e


def prompt_select(
    message: str,
    choices: list[questionary.Choice],
    default: Any = None,
) -> Any:
    """Prompt for single selection from a list of choices.

    Args:
        message: Prompt message
        choices: questionary choices; the value of the chosen one is returned
        default: Value of the choice to preselect

    Returns:
        Value of the selected choice

    Raises:
        UserCancelledError: If user presses Ctrl+C
    """
    log_message(f"Prompt select: {message}")

    try:
        result = questionary.select(
            message,
            choices=choices,
            default=default,
            style=custom_style,
        ).ask()

        if result is None:
            raise UserCancelledError("User cancelled selection prompt")

        return result

    except KeyboardInterrupt as e:
        raise UserCancelledError("User cancelled with Ctrl+C") from e


__all__ = [
    "custom_style",
    "prompt_confirm",
    "prompt_input",
    "prompt_password",
    "prompt_select",
]
