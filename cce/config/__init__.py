"""Configuration management for CCE.

This package contains:
- settings: Config file location and limits
- models: Environment and Config records with validation
- manager: JSON config store
"""

from cce.config.manager import ConfigManager
from cce.config.models import Config, Environment, validate_config, validate_environment
from cce.config.settings import CONFIG_FILE, CONFIG_VERSION, resolve_config_path

__all__ = [
    "ConfigManager",
    "Config",
    "Environment",
    "validate_config",
    "validate_environment",
    "CONFIG_FILE",
    "CONFIG_VERSION",
    "resolve_config_path",
]
