"""Environment variable utilities for CCE.

Helpers for keeping credentials out of logs and verbose output.
"""

from __future__ import annotations

from collections.abc import Mapping

# Keys containing these substrings are considered sensitive and should not be logged
SENSITIVE_KEY_PATTERNS = ("TOKEN", "KEY", "SECRET", "PASSWORD", "CREDENTIAL", "AUTH")


def is_sensitive_key(key: str) -> bool:
    """Check if a variable or header name refers to sensitive data.

    Args:
        key: The variable name

    Returns:
        True if the key is considered sensitive
    """
    key_upper = key.upper()
    return any(pattern in key_upper for pattern in SENSITIVE_KEY_PATTERNS)


def mask_secret(value: str) -> str:
    """Mask a secret, keeping the first and last four characters.

    Values of eight characters or fewer are fully masked.
    """
    if len(value) > 8:
        return f"{value[:4]}***{value[-4:]}"
    return "***"


def mask_env_vars(env_vars: Mapping[str, str]) -> dict[str, str]:
    """Return a copy of env_vars safe for logging and display."""
    return {
        key: mask_secret(value) if is_sensitive_key(key) else value
        for key, value in env_vars.items()
    }


__all__ = [
    "SENSITIVE_KEY_PATTERNS",
    "is_sensitive_key",
    "mask_secret",
    "mask_env_vars",
]
