"""Rich-based console output utilities.

This module provides colored terminal output functions shared by the
CLI shell, the environment commands and the interactive menus.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

from cce import DISPLAY_NAME, SCRIPT_NAME, __version__

if TYPE_CHECKING:
    from cce.parser.registry import FlagRegistry

custom_theme = Theme(
    {
        "error": "bold red",
        "success": "bold green",
        "warning": "bold yellow",
        "info": "bold blue",
        "header": "bold magenta",
        "step": "bold cyan",
        "highlight": "bold white",
    }
)

# Global console instances
console = Console(theme=custom_theme)
console_err = Console(theme=custom_theme, stderr=True)


def print_error(message: str) -> None:
    """Print error message in red."""
    from cce.utils.logging import log_message

    console_err.print(f"[error][[ERROR]][/error] [red]{escape(message)}[/red]")
    log_message(f"ERROR: {message}")


def print_success(message: str) -> None:
    """Print success message in green."""
    from cce.utils.logging import log_message

    console.print(f"[success][[SUCCESS]][/success] [green]{escape(message)}[/green]")
    log_message(f"SUCCESS: {message}")


def print_warning(message: str) -> None:
    """Print warning message in yellow."""
    from cce.utils.logging import log_message

    console_err.print(f"[warning][[WARNING]][/warning] [yellow]{escape(message)}[/yellow]")
    log_message(f"WARNING: {message}")


def print_info(message: str) -> None:
    """Print info message in blue/cyan.

    Info goes to stderr so it never mixes with forwarded command output.
    """
    from cce.utils.logging import log_message

    console_err.print(f"[info][[INFO]][/info] [cyan]{escape(message)}[/cyan]")
    log_message(f"INFO: {message}")


def show_version() -> None:
    """Display version information."""
    console.print(f"{DISPLAY_NAME} v{__version__}", highlight=False)


def show_wrapper_help(registry: FlagRegistry) -> None:
    """Display the wrapper's own part of the combined help.

    Flags and their short aliases are read from the registry so that
    flags registered at startup show up here too.
    """
    console.print(f"[header]{DISPLAY_NAME} ({SCRIPT_NAME.upper()})[/header]")
    console.print()
    console.print(
        f"{SCRIPT_NAME} is a drop-in replacement for the Claude CLI that adds "
        "environment management while preserving all Claude CLI functionality."
    )
    console.print()

    aliases_by_flag: dict[str, list[str]] = {}
    for short, canonical in registry.aliases().items():
        aliases_by_flag.setdefault(canonical, []).append(short)

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Flag", style="step", no_wrap=True)
    table.add_column("Description")
    for name, info in sorted(registry.wrapper_flags().items()):
        label = ", ".join([name, *sorted(aliases_by_flag.get(name, []))])
        if info.takes_value:
            label += " VALUE"
        table.add_row(label, info.description)

    console.print("[highlight]Wrapper flags:[/highlight]")
    console.print(table)
    console.print()
    console.print("All other flags and arguments are passed through to the Claude CLI.")
    console.print()
    console.print("[highlight]Commands:[/highlight]")
    console.print(f"  {SCRIPT_NAME} env add|edit|list|show|remove|default|check")
    console.print()
    console.print("[highlight]Examples:[/highlight]")
    console.print(f"  {SCRIPT_NAME}                                  # Interactive environment selection")
    console.print(f"  {SCRIPT_NAME} --env production                 # Use a specific environment")
    console.print(f'  {SCRIPT_NAME} -r "You are a helpful assistant"  # Pass-through to Claude CLI')
    console.print(f'  {SCRIPT_NAME} --env staging -r "Debug this"     # Environment + Claude flags')
    console.print()


__all__ = [
    "console",
    "console_err",
    "custom_theme",
    "print_error",
    "print_success",
    "print_warning",
    "print_info",
    "show_version",
    "show_wrapper_help",
]
