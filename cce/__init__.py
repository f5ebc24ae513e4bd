"""CCE - Claude Code Environment Switcher.

This package provides a CLI wrapper around the Claude Code CLI that manages
named API endpoint configurations and forwards everything it does not
understand to ``claude``.
"""

__version__ = "1.1.0"
SCRIPT_NAME = "cce"
DISPLAY_NAME = "Claude Code Environment Switcher"

__all__ = [
    "__version__",
    "SCRIPT_NAME",
    "DISPLAY_NAME",
]
