"""Configuration locations and constants for CCE.

Environment Variables:
    CCE_CONFIG: Path to the config file (overrides the default location)
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_VERSION = "1.1.0"
CONFIG_DIR = Path.home() / ".claude-code-env"
CONFIG_FILE = CONFIG_DIR / "config.json"
CONFIG_ENV_VAR = "CCE_CONFIG"
BACKUP_SUFFIX = ".backup"

# Environment record limits
MAX_ENV_NAME_LENGTH = 50
MIN_API_KEY_LENGTH = 10
MAX_MODEL_LENGTH = 100


def resolve_config_path(override: str | Path | None = None) -> Path:
    """Return the config file path.

    Precedence: explicit override (the --config flag), then CCE_CONFIG,
    then ~/.claude-code-env/config.json.
    """
    if override:
        return Path(override).expanduser()
    env_path = os.environ.get(CONFIG_ENV_VAR, "").strip()
    if env_path:
        return Path(env_path).expanduser()
    return CONFIG_FILE


__all__ = [
    "CONFIG_VERSION",
    "CONFIG_DIR",
    "CONFIG_FILE",
    "CONFIG_ENV_VAR",
    "BACKUP_SUFFIX",
    "MAX_ENV_NAME_LENGTH",
    "MIN_API_KEY_LENGTH",
    "MAX_MODEL_LENGTH",
    "resolve_config_path",
]
