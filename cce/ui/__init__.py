"""User interface components for CCE.

This package contains:
- prompts: Questionary-based user input prompts
- menus: Environment selection menu and environment views
"""

from cce.ui.menus import (
    select_environment,
    show_environment_details,
    show_environment_list,
)
from cce.ui.prompts import (
    custom_style,
    prompt_confirm,
    prompt_input,
    prompt_password,
    prompt_select,
)

__all__ = [
    # Menus
    "select_environment",
    "show_environment_details",
    "show_environment_list",
    # Prompts
    "custom_style",
    "prompt_confirm",
    "prompt_input",
    "prompt_password",
    "prompt_select",
]
