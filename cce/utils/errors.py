"""Custom exceptions and exit codes for CCE.

This module defines the exit codes and exception hierarchy used throughout
the application. The CLI shell is the only place these are turned into
user-facing messages and process exit statuses.
"""

from enum import IntEnum
from typing import ClassVar


class ExitCode(IntEnum):
    """Exit codes returned by the ``cce`` wrapper itself.

    When a command is forwarded, the forwarded process's exit code is
    returned unchanged instead.
    """

    SUCCESS = 0
    GENERAL_ERROR = 1
    CLAUDE_NOT_INSTALLED = 2
    CONFIG_ERROR = 3
    USER_CANCELLED = 4
    PLAN_INVALID = 5


class CceError(Exception):
    """Base exception for CCE errors.

    Each exception type has an associated exit code for proper error reporting.
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.GENERAL_ERROR

    def __init__(self, message: str, exit_code: ExitCode | None = None) -> None:
        """Initialize the exception."""
        super().__init__(message)
        self._exit_code = exit_code

    @property
    def exit_code(self) -> ExitCode:
        """Get the exit code for this exception."""
        if self._exit_code is not None:
            return self._exit_code
        return self.__class__._default_exit_code


class InvalidArgumentsError(CceError):
    """The raw argument vector is malformed.

    Raised when:
    - The argument list is None
    - The argument list is a bare string instead of a sequence
    - The argument list contains a non-string element
    """


class ArgumentAnalysisError(CceError):
    """Argument analysis failed while building a delegation plan."""


class PlanValidationError(CceError):
    """A delegation plan failed validation.

    Attributes:
        field: Name of the missing or empty field (e.g. "base_url")
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.PLAN_INVALID

    def __init__(
        self,
        message: str,
        field: str = "",
        exit_code: ExitCode | None = None,
    ) -> None:
        super().__init__(message, exit_code)
        self.field = field


class ConfigError(CceError):
    """Configuration could not be read, parsed, validated or written.

    Attributes:
        field: Offending config field, if known
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.CONFIG_ERROR

    def __init__(
        self,
        message: str,
        field: str = "",
        exit_code: ExitCode | None = None,
    ) -> None:
        super().__init__(message, exit_code)
        self.field = field


class EnvironmentNotFoundError(ConfigError):
    """A named environment does not exist in the configuration."""

    def __init__(self, name: str) -> None:
        super().__init__(f"environment '{name}' not found", field="environments")
        self.name = name


class ClaudeNotFoundError(CceError):
    """The Claude Code CLI executable is not on PATH."""

    _default_exit_code: ClassVar[ExitCode] = ExitCode.CLAUDE_NOT_INSTALLED


class LaunchError(CceError):
    """The forwarded process could not be started.

    Attributes:
        args: Arguments the process was started with
    """

    def __init__(self, message: str, args: list[str] | None = None) -> None:
        super().__init__(message)
        self.forwarded_args = list(args or [])


class UserCancelledError(CceError):
    """User cancelled the operation.

    Raised when:
    - User presses Ctrl+C
    - User aborts an interactive prompt
    - User answers 'no' to a required confirmation
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.USER_CANCELLED


__all__ = [
    "ExitCode",
    "CceError",
    "InvalidArgumentsError",
    "ArgumentAnalysisError",
    "PlanValidationError",
    "ConfigError",
    "EnvironmentNotFoundError",
    "ClaudeNotFoundError",
    "LaunchError",
    "UserCancelledError",
]
