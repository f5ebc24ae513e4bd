"""Environment and config records for CCE.

An Environment is a named set of API endpoint settings. It is mapped onto
ANTHROPIC_* process variables when a command is forwarded to Claude Code,
but the records here know nothing about that mapping.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from urllib.parse import urlparse

from cce.config.settings import (
    CONFIG_VERSION,
    MAX_ENV_NAME_LENGTH,
    MAX_MODEL_LENGTH,
    MIN_API_KEY_LENGTH,
)
from cce.utils.errors import ConfigError

_ENV_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


def _parse_timestamp(value: Any) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None


def _format_timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


@dataclass
class Environment:
    """A named API endpoint configuration.

    Attributes:
        name: Unique environment name
        base_url: API base URL
        api_key: API key for the endpoint
        model: Model identifier; empty means the forwarded CLI's default
        headers: Custom headers, name -> value
        description: Free-form description shown in menus
        created_at: When the environment was added
        updated_at: When the environment was last changed
    """

    name: str
    base_url: str
    api_key: str
    model: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    description: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any], name: str = "") -> Environment:
        """Build an Environment from its JSON form.

        Raises:
            ConfigError: If a field has the wrong type
        """
        if not isinstance(data, dict):
            raise ConfigError(f"environment '{name}' must be an object", field=name)
        headers = data.get("headers") or {}
        if not isinstance(headers, dict):
            raise ConfigError(f"environment '{name}' headers must be an object", field="headers")
        for key in ("name", "base_url", "api_key", "model", "description"):
            value = data.get(key, "")
            if value is not None and not isinstance(value, str):
                raise ConfigError(f"environment '{name}' {key} must be a string", field=key)
        return cls(
            name=data.get("name") or name,
            base_url=data.get("base_url") or "",
            api_key=data.get("api_key") or "",
            model=data.get("model") or "",
            headers={str(k): str(v) for k, v in headers.items()},
            description=data.get("description") or "",
            created_at=_parse_timestamp(data.get("created_at")),
            updated_at=_parse_timestamp(data.get("updated_at")),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "base_url": self.base_url,
            "api_key": self.api_key,
        }
        if self.description:
            data["description"] = self.description
        if self.model:
            data["model"] = self.model
        if self.headers:
            data["headers"] = dict(self.headers)
        data["created_at"] = _format_timestamp(self.created_at)
        data["updated_at"] = _format_timestamp(self.updated_at)
        return data

    @property
    def display_description(self) -> str:
        """Description for menus: description or URL, plus the model."""
        description = self.description or self.base_url
        if self.model:
            return f"{description} (Model: {self.model})"
        return f"{description} (Default model)"


@dataclass
class Config:
    """The whole configuration file."""

    version: str = CONFIG_VERSION
    default_env: str = ""
    environments: dict[str, Environment] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """Build a Config from its JSON form.

        Raises:
            ConfigError: If the structure is not what a config file holds
        """
        if not isinstance(data, dict):
            raise ConfigError("configuration must be a JSON object")
        raw_environments = data.get("environments") or {}
        if not isinstance(raw_environments, dict):
            raise ConfigError("'environments' must be an object", field="environments")
        return cls(
            version=str(data.get("version") or ""),
            default_env=str(data.get("default_env") or ""),
            environments={
                name: Environment.from_dict(raw, name=name)
                for name, raw in raw_environments.items()
            },
            created_at=_parse_timestamp(data.get("created_at")),
            updated_at=_parse_timestamp(data.get("updated_at")),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"version": self.version}
        if self.default_env:
            data["default_env"] = self.default_env
        data["environments"] = {
            name: env.to_dict() for name, env in sorted(self.environments.items())
        }
        data["created_at"] = _format_timestamp(self.created_at)
        data["updated_at"] = _format_timestamp(self.updated_at)
        return data


# Validation


def validate_environment_name(name: str) -> None:
    """Raises ConfigError if name is not a usable environment name."""
    if not name:
        raise ConfigError("environment name is required", field="name")
    if len(name) > MAX_ENV_NAME_LENGTH:
        raise ConfigError(
            f"environment name too long (maximum {MAX_ENV_NAME_LENGTH} characters)",
            field="name",
        )
    if not _ENV_NAME_PATTERN.match(name):
        raise ConfigError(
            "environment name may only contain letters, numbers, hyphens and underscores",
            field="name",
        )


def validate_base_url(url: str) -> None:
    """Raises ConfigError unless url is an absolute http(s) URL."""
    if not url:
        raise ConfigError("base URL is required", field="base_url")
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise ConfigError("base URL must use http or https", field="base_url")
    if not parsed.netloc:
        raise ConfigError("base URL must include a host", field="base_url")


def validate_api_key(api_key: str) -> None:
    if not api_key:
        raise ConfigError("API key is required", field="api_key")
    if len(api_key) < MIN_API_KEY_LENGTH:
        raise ConfigError(
            f"API key too short (minimum {MIN_API_KEY_LENGTH} characters)",
            field="api_key",
        )


def validate_model_name(model: str) -> None:
    """Basic format checks; an empty model is valid and means 'default'."""
    if not model:
        return
    if len(model) > MAX_MODEL_LENGTH:
        raise ConfigError(
            f"model name too long (maximum {MAX_MODEL_LENGTH} characters)", field="model"
        )
    if any(ch in model for ch in "\n\r\t"):
        raise ConfigError("model name cannot contain newlines or tabs", field="model")
    if model != model.strip():
        raise ConfigError("model name has leading or trailing whitespace", field="model")


def validate_headers(headers: dict[str, str]) -> None:
    for key in headers:
        if not key or any(ch.isspace() for ch in key) or "=" in key:
            raise ConfigError(f"invalid header name '{key}'", field="headers")


def validate_environment(env: Environment) -> None:
    """Validate every field of an environment.

    Raises:
        ConfigError: For the first invalid field
    """
    validate_environment_name(env.name)
    validate_base_url(env.base_url)
    validate_api_key(env.api_key)
    validate_model_name(env.model)
    validate_headers(env.headers)


def validate_config(config: Config) -> None:
    """Validate a whole config.

    Raises:
        ConfigError: For the first problem found
    """
    if not config.version:
        raise ConfigError("version is required", field="version")
    for name, env in config.environments.items():
        if env.name != name:
            raise ConfigError(
                f"environment key '{name}' does not match its name '{env.name}'",
                field="environments",
            )
        try:
            validate_environment(env)
        except ConfigError as e:
            raise ConfigError(f"environment '{name}': {e}", field=e.field) from e
    if config.default_env and config.default_env not in config.environments:
        raise ConfigError(
            f"default environment '{config.default_env}' does not exist",
            field="default_env",
        )


__all__ = [
    "Environment",
    "Config",
    "validate_environment_name",
    "validate_base_url",
    "validate_api_key",
    "validate_model_name",
    "validate_headers",
    "validate_environment",
    "validate_config",
]
