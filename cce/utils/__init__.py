"""Utility modules for CCE.

This package contains:
- console: Rich-based terminal output utilities
- env_utils: Secret masking for logs and verbose output
- errors: Custom exceptions and exit codes
- logging: Logging configuration
"""

from cce.utils.console import (
    console,
    print_error,
    print_info,
    print_success,
    print_warning,
    show_version,
)
from cce.utils.env_utils import (
    SENSITIVE_KEY_PATTERNS,
    is_sensitive_key,
    mask_env_vars,
    mask_secret,
)
from cce.utils.errors import (
    ArgumentAnalysisError,
    CceError,
    ClaudeNotFoundError,
    ConfigError,
    EnvironmentNotFoundError,
    ExitCode,
    InvalidArgumentsError,
    LaunchError,
    PlanValidationError,
    UserCancelledError,
)
from cce.utils.logging import (
    log_command,
    log_debug,
    log_message,
    set_verbose,
    setup_logging,
)

__all__ = [
    # Console
    "console",
    "print_error",
    "print_success",
    "print_warning",
    "print_info",
    "show_version",
    # Env Utils
    "SENSITIVE_KEY_PATTERNS",
    "is_sensitive_key",
    "mask_secret",
    "mask_env_vars",
    # Errors
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
    # Logging
    "setup_logging",
    "log_message",
    "log_debug",
    "log_command",
    "set_verbose",
]
