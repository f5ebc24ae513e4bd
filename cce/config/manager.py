"""Configuration manager for CCE.

This module provides the ConfigManager class that loads and saves the JSON
file holding all environments:

    {
      "version": "1.1.0",
      "default_env": "production",
      "environments": {
        "production": {"name": "production", "base_url": "...", "api_key": "...",
                       "model": "...", "headers": {"X-Team": "core"}}
      }
    }

Security features:
- Atomic file writes (temp file + replace)
- Secure file permissions (600) and directory permissions (700)
- A backup of the previous file is kept next to it on every save
"""

from __future__ import annotations

import json
import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path

from cce.config.models import Config, Environment, validate_config, validate_environment
from cce.config.settings import BACKUP_SUFFIX, CONFIG_VERSION, resolve_config_path
from cce.utils.errors import ConfigError, EnvironmentNotFoundError
from cce.utils.logging import log_message


class ConfigManager:
    """Loads, validates and saves the environment configuration.

    Attributes:
        config_path: Path to the JSON config file
        config: Config loaded by the last load() call
    """

    def __init__(self, config_path: str | Path | None = None) -> None:
        """Initialize the configuration manager.

        Args:
            config_path: Optional explicit config path (the --config flag).
                         Falls back to CCE_CONFIG, then the default location.
        """
        self.config_path = resolve_config_path(config_path)
        self.config = Config()

    @property
    def backup_path(self) -> Path:
        return self.config_path.with_name(self.config_path.name + BACKUP_SUFFIX)

    def load(self) -> Config:
        """Load the configuration file.

        A missing file yields an empty config at the current version.

        Raises:
            ConfigError: If the file cannot be read, is not valid JSON, or
                         does not validate
        """
        if not self.config_path.exists():
            log_message(f"No configuration at {self.config_path}, using empty config")
            now = datetime.now()
            self.config = Config(version=CONFIG_VERSION, created_at=now, updated_at=now)
            return self.config

        try:
            raw = self.config_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"failed to read configuration file {self.config_path}: {e}") from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigError(
                f"configuration file {self.config_path} is corrupted or invalid JSON: {e}"
            ) from e

        config = Config.from_dict(data)
        validate_config(config)
        self.config = config
        log_message(
            f"Configuration loaded from {self.config_path} "
            f"({len(config.environments)} environments)"
        )
        return config

    def save(self, config: Config | None = None) -> None:
        """Validate and atomically write the configuration.

        Args:
            config: Config to save; defaults to the currently loaded one

        Raises:
            ConfigError: If validation fails or the file cannot be written
        """
        config = config if config is not None else self.config
        validate_config(config)

        now = datetime.now()
        config.updated_at = now
        if config.created_at is None:
            config.created_at = now

        try:
            if self.config_path.exists():
                self.backup()
            self._ensure_config_dir()
            self._atomic_write(json.dumps(config.to_dict(), indent=2) + "\n")
        except OSError as e:
            raise ConfigError(f"failed to write configuration file {self.config_path}: {e}") from e

        self.config = config
        log_message(f"Configuration saved to {self.config_path}")

    def backup(self) -> Path:
        """Copy the current config file next to itself with a .backup suffix."""
        shutil.copy2(self.config_path, self.backup_path)
        os.chmod(self.backup_path, 0o600)
        return self.backup_path

    def _ensure_config_dir(self) -> None:
        directory = self.config_path.parent
        if not directory.exists():
            directory.mkdir(parents=True, exist_ok=True)
            os.chmod(directory, 0o700)

    def _atomic_write(self, content: str) -> None:
        fd, temp_path = tempfile.mkstemp(
            dir=self.config_path.parent,
            prefix=".cce-config-",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)

            # Set secure permissions before moving
            os.chmod(temp_path, 0o600)
            Path(temp_path).replace(self.config_path)
        except Exception:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise

    # Environment operations

    def list_environments(self) -> list[Environment]:
        """Return all environments sorted by name."""
        return [self.config.environments[name] for name in sorted(self.config.environments)]

    def get_environment(self, name: str) -> Environment:
        """Return the named environment.

        Raises:
            EnvironmentNotFoundError: If no environment has that name
        """
        try:
            return self.config.environments[name]
        except KeyError:
            raise EnvironmentNotFoundError(name) from None

    def resolve_environment(self, name: str | None) -> Environment | None:
        """Look up an environment by name, falling back to the default.

        Returns None when name is empty and no default is configured.

        Raises:
            EnvironmentNotFoundError: If a non-empty name does not exist
        """
        if name:
            return self.get_environment(name)
        if self.config.default_env:
            return self.config.environments.get(self.config.default_env)
        return None

    def add_environment(self, env: Environment) -> None:
        """Add a new environment and save.

        Raises:
            ConfigError: If the environment is invalid or the name is taken
        """
        validate_environment(env)
        if env.name in self.config.environments:
            raise ConfigError(f"environment '{env.name}' already exists", field="name")
        now = datetime.now()
        env.created_at = env.created_at or now
        env.updated_at = now
        self.config.environments[env.name] = env
        self.save()

    def update_environment(self, env: Environment) -> None:
        """Replace an existing environment and save.

        Raises:
            EnvironmentNotFoundError: If the environment does not exist
            ConfigError: If the environment is invalid
        """
        existing = self.get_environment(env.name)
        validate_environment(env)
        env.created_at = existing.created_at
        env.updated_at = datetime.now()
        self.config.environments[env.name] = env
        self.save()

    def remove_environment(self, name: str) -> Environment:
        """Remove an environment and save, clearing the default if it pointed there.

        Raises:
            EnvironmentNotFoundError: If the environment does not exist
        """
        env = self.get_environment(name)
        del self.config.environments[name]
        if self.config.default_env == name:
            self.config.default_env = ""
        self.save()
        return env

    def set_default(self, name: str) -> None:
        """Make an existing environment the default and save.

        Raises:
            EnvironmentNotFoundError: If the environment does not exist
        """
        self.get_environment(name)
        self.config.default_env = name
        self.save()


__all__ = [
    "ConfigManager",
]
