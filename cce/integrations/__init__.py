"""External integrations for CCE.

This package contains:
- claude: Claude Code CLI discovery and launching
- network: Endpoint reachability check
"""

from cce.integrations.claude import (
    CLAUDE_CLI_NAMES,
    ClaudeLauncher,
    check_claude_installed,
    find_claude_executable,
)
from cce.integrations.network import NetworkValidationResult, validate_endpoint

__all__ = [
    # Claude CLI
    "CLAUDE_CLI_NAMES",
    "ClaudeLauncher",
    "check_claude_installed",
    "find_claude_executable",
    # Network
    "NetworkValidationResult",
    "validate_endpoint",
]
