"""Tests for cce.utils.env_utils module."""

import pytest

from cce.utils.env_utils import is_sensitive_key, mask_env_vars, mask_secret


class TestIsSensitiveKey:
    """Tests for is_sensitive_key."""

    @pytest.mark.parametrize(
        "key",
        ["ANTHROPIC_API_KEY", "ANTHROPIC_HEADER_Authorization", "x-auth-token", "DB_PASSWORD"],
    )
    def test_sensitive(self, key):
        assert is_sensitive_key(key) is True

    @pytest.mark.parametrize("key", ["ANTHROPIC_BASE_URL", "ANTHROPIC_MODEL", "X-Team"])
    def test_not_sensitive(self, key):
        assert is_sensitive_key(key) is False


class TestMaskSecret:
    """Tests for mask_secret."""

    def test_long_value_keeps_ends(self):
        assert mask_secret("sk-ant-1234567890") == "sk-a***7890"

    def test_short_value_fully_masked(self):
        assert mask_secret("12345678") == "***"

    def test_empty_value(self):
        assert mask_secret("") == "***"


class TestMaskEnvVars:
    """Tests for mask_env_vars."""

    def test_masks_only_sensitive_values(self):
        env_vars = {
            "ANTHROPIC_BASE_URL": "https://api.anthropic.com",
            "ANTHROPIC_API_KEY": "sk-ant-1234567890",
        }
        assert mask_env_vars(env_vars) == {
            "ANTHROPIC_BASE_URL": "https://api.anthropic.com",
            "ANTHROPIC_API_KEY": "sk-a***7890",
        }

    def test_input_not_modified(self):
        env_vars = {"ANTHROPIC_API_KEY": "sk-ant-1234567890"}
        mask_env_vars(env_vars)
        assert env_vars["ANTHROPIC_API_KEY"] == "sk-ant-1234567890"
