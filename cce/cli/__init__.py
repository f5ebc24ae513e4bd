"""Command-line entry points for CCE.

This package contains:
- router: Argument analysis driven top-level dispatch
- env: Typer command group for environment management
"""

from cce.cli.router import main, run

__all__ = [
    "main",
    "run",
]
