"""Claude Code CLI integration for CCE.

This module locates the Claude Code executable and runs it, either from a
validated DelegationPlan or directly with an environment. The child
inherits the terminal; the wrapper only adds variables to its environment
and returns its exit code unchanged.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING

from cce.parser.delegation import build_environment_variables
from cce.utils.env_utils import mask_env_vars
from cce.utils.errors import ClaudeNotFoundError, LaunchError
from cce.utils.logging import log_command, log_message

if TYPE_CHECKING:
    from cce.config.models import Environment
    from cce.parser.delegation import DelegationPlan

# Looked up on PATH in this order.
CLAUDE_CLI_NAMES = ("claude-code", "claude", "claude_code")


def find_claude_executable() -> str | None:
    """Return the path of the first Claude CLI found on PATH, or None."""
    for name in CLAUDE_CLI_NAMES:
        path = shutil.which(name)
        if path:
            return path
    return None


def check_claude_installed() -> tuple[bool, str]:
    """Check if Claude Code CLI is installed and accessible.

    Returns:
        (is_valid, message) tuple where message is the version string
        if installed, or an error message if not.
    """
    path = find_claude_executable()
    if path is None:
        return False, "Claude Code CLI is not installed or not in PATH"

    try:
        result = subprocess.run(
            [path, "--version"],
            capture_output=True,
            text=True,
            stdin=subprocess.DEVNULL,
            timeout=10,
        )
        log_command(f"{path} --version", result.returncode)

        version_output = result.stdout.strip() or result.stderr.strip()
        if result.returncode == 0 and version_output:
            return True, version_output

        return False, "Claude Code CLI found but could not determine version"
    except (OSError, subprocess.SubprocessError) as e:
        log_message(f"Failed to check Claude Code CLI: {e}")
        return False, f"Error checking Claude Code CLI: {e}"


class ClaudeLauncher:
    """Runs the Claude Code CLI.

    Attributes:
        executable: Explicit executable path; discovered on PATH when empty
    """

    def __init__(self, executable: str = "") -> None:
        self.executable = executable

    def get_executable(self) -> str:
        """Return the Claude CLI path, discovering and caching it on first use.

        Raises:
            ClaudeNotFoundError: If no Claude CLI is on PATH
        """
        if not self.executable:
            path = find_claude_executable()
            if path is None:
                raise ClaudeNotFoundError(
                    "Claude CLI executable not found in PATH. Install Claude Code "
                    f"and make sure one of {', '.join(CLAUDE_CLI_NAMES)} is on PATH"
                )
            self.executable = path
        return self.executable

    def execute(self, plan: DelegationPlan) -> int:
        """Run the forwarded command described by a validated plan.

        Returns:
            The forwarded process's exit code

        Raises:
            ClaudeNotFoundError: If no Claude CLI is on PATH
            LaunchError: If the process could not be started
        """
        return self.run(plan.forwarded_args, plan.env_vars, plan.working_dir)

    def launch(self, environment: Environment | None, args: Sequence[str]) -> int:
        """Run Claude with an environment's variables, or none when it is None."""
        env_vars = build_environment_variables(environment) if environment else {}
        return self.run(args, env_vars)

    def show_help(self) -> int:
        """Run ``claude --help`` with the inherited environment."""
        return self.run(["--help"], {})

    def run(
        self,
        args: Sequence[str],
        env_vars: Mapping[str, str],
        working_dir: str = "",
    ) -> int:
        """Start Claude and wait for it.

        env_vars are merged over the inherited process environment. Ctrl+C
        reaches the child through the terminal; the wrapper keeps waiting so
        the child's own exit code is returned.

        Raises:
            ClaudeNotFoundError: If no Claude CLI is on PATH
            LaunchError: If the process could not be started
        """
        executable = self.get_executable()
        command = [executable, *args]
        env = {**os.environ, **env_vars}

        log_message(f"Launching {executable} with {len(args)} argument(s)")
        if env_vars:
            log_message(f"  injected variables: {mask_env_vars(env_vars)}")

        try:
            process = subprocess.Popen(command, env=env, cwd=working_dir or None)
        except OSError as e:
            raise LaunchError(f"Failed to start Claude CLI process: {e}", list(args)) from e

        while True:
            try:
                returncode = process.wait()
                break
            except KeyboardInterrupt:
                log_message("Interrupt received, waiting for Claude CLI to exit")

        log_command(executable, returncode)
        if returncode < 0:
            # Killed by a signal: report it the way a shell would.
            return 128 - returncode
        return returncode


__all__ = [
    "CLAUDE_CLI_NAMES",
    "ClaudeLauncher",
    "check_claude_installed",
    "find_claude_executable",
]
