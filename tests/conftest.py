"""Shared pytest fixtures for CCE tests."""

import json
from pathlib import Path

import pytest

from cce.config.models import Environment
from cce.parser.analyzer import ArgumentAnalyzer
from cce.parser.delegation import DelegationEngine
from cce.parser.registry import FlagRegistry


@pytest.fixture
def registry() -> FlagRegistry:
    """Default flag vocabulary."""
    return FlagRegistry.default()


@pytest.fixture
def analyzer(registry: FlagRegistry) -> ArgumentAnalyzer:
    return ArgumentAnalyzer(registry)


@pytest.fixture
def engine(analyzer: ArgumentAnalyzer) -> DelegationEngine:
    return DelegationEngine(analyzer)


@pytest.fixture
def production_env() -> Environment:
    """A complete environment with a model and one header."""
    return Environment(
        name="production",
        base_url="https://api.anthropic.com",
        api_key="sk-ant-REDACTED",
        model="claude-3-5-sonnet-20241022",
        headers={"X-Team": "platform"},
        description="Production API",
    )


@pytest.fixture
def staging_env() -> Environment:
    """A minimal environment without model or headers."""
    return Environment(
        name="staging",
        base_url="https://staging.example.com/v1",
        api_key="sk-staging-key-123456",
    )


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point CCE_CONFIG at a temp file so tests never touch the real config."""
    config_path = tmp_path / "cce" / "config.json"
    monkeypatch.setenv("CCE_CONFIG", str(config_path))
    return config_path


@pytest.fixture
def write_config(isolated_config: Path):
    """Write a config file holding the given environments."""

    def _write(*environments: Environment, default_env: str = "") -> Path:
        isolated_config.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "version": "1.1.0",
            "default_env": default_env,
            "environments": {env.name: env.to_dict() for env in environments},
        }
        isolated_config.write_text(json.dumps(data, indent=2))
        return isolated_config

    return _write
