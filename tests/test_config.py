"""Tests for settings loading and client initialization."""

import logging

import pytest

from lunorest.config import load_settings
from lunorest.exchanges.init import create_client_from_settings
from lunorest.exchanges.luno import LunoClient
from lunorest.exchanges.markets import MarketCache
from lunorest.logging import RedactAuthFilter
from lunorest.settings import Settings


CONFIG_YAML = """
env: prod
luno:
  timeout: 10
  credentials:
    api_key_id: file-key
    api_secret: file-secret
  currency_aliases:
    ZAR: RAND
"""


class TestLoadSettings:
    """Tests for load_settings."""

    def test_missing_file_gives_defaults(self, tmp_path):
        """Test defaults when no config file exists."""
        settings = load_settings(tmp_path / "absent.yml", environ={})

        assert settings.env == "dev"
        assert settings.luno.base_url == "https://api.mybitx.com/api"
        assert settings.luno.version == "1"
        assert settings.luno.credentials is None

    def test_yaml_file(self, tmp_path):
        """Test loading settings from a YAML file."""
        path = tmp_path / "config.yml"
        path.write_text(CONFIG_YAML, encoding="utf-8")

        settings = load_settings(path, environ={})

        assert settings.env == "prod"
        assert settings.luno.timeout == 10
        assert settings.luno.credentials.api_key_id.get_secret_value() == "file-key"
        assert settings.luno.currency_aliases == {"ZAR": "RAND"}

    def test_env_overrides(self, tmp_path):
        """Test that environment variables override the file."""
        path = tmp_path / "config.yml"
        path.write_text(CONFIG_YAML, encoding="utf-8")
        environ = {
            "LUNOREST_LUNO__TIMEOUT": "5.5",
            "LUNOREST_ENV": "staging",
            "LUNO_API_KEY_ID": "env-key",
            "LUNO_API_SECRET": "env-secret",
        }

        settings = load_settings(path, environ=environ)

        assert settings.luno.timeout == 5.5
        assert settings.env == "staging"
        assert settings.luno.credentials.api_key_id.get_secret_value() == "env-key"
        assert settings.luno.credentials.api_secret.get_secret_value() == "env-secret"

    def test_config_path_from_env(self, tmp_path):
        """Test selecting the config file through the environment."""
        path = tmp_path / "other.yml"
        path.write_text("env: from-env-path\n", encoding="utf-8")

        settings = load_settings(environ={"LUNOREST_CONFIG": str(path)})

        assert settings.env == "from-env-path"

    def test_invalid_root(self, tmp_path):
        """Test that a non-mapping YAML root is rejected."""
        path = tmp_path / "config.yml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError, match="mapping"):
            load_settings(path, environ={})

    def test_unknown_key_rejected(self, tmp_path):
        """Test that unknown settings keys are rejected."""
        path = tmp_path / "config.yml"
        path.write_text("luno:\n  sandbox: true\n", encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid configuration"):
            load_settings(path, environ={})

    def test_redacted(self, tmp_path):
        """Test that credentials are masked in the redacted view."""
        path = tmp_path / "config.yml"
        path.write_text(CONFIG_YAML, encoding="utf-8")

        data = load_settings(path, environ={}).redacted()

        assert data["luno"]["credentials"] == {"api_key_id": "***", "api_secret": "***"}


class TestCreateClient:
    """Tests for create_client_from_settings."""

    def test_with_credentials(self):
        """Test building a fully configured client."""
        settings = Settings.model_validate({
            "luno": {
                "base_url": "https://api.luno.com/api",
                "timeout": 12,
                "credentials": {"api_key_id": "k", "api_secret": "s"},
                "currency_aliases": {"ZAR": "RAND"},
            },
            "proxy": {"enabled": True, "url": "http://127.0.0.1:8080", "username": "u", "password": "p"},
        })
        cache = MarketCache()

        client = create_client_from_settings(settings, cache)

        assert isinstance(client, LunoClient)
        assert client.api_key == "k"
        assert client.api_secret == "s"
        assert client.get_base_url() == "https://api.luno.com/api/1"
        assert client.timeout == 12
        assert client.markets is cache
        assert client.currencies.normalize("ZAR") == "RAND"
        assert client.proxy.proxy_url == "http://u:p@127.0.0.1:8080"

    def test_without_credentials(self, caplog):
        """Test building a public-only client."""
        with caplog.at_level(logging.WARNING):
            client = create_client_from_settings(Settings())

        assert client.api_key == ""
        assert client.proxy.proxy_url is None
        assert "no credentials" in caplog.text


def test_redact_filter_masks_basic_auth():
    """Test that log records never show the Basic token."""
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "headers=%s", ({"Authorization": "Basic a2V5OnNlY3JldA=="},), None)

    assert RedactAuthFilter().filter(record) is True
    assert "a2V5OnNlY3JldA" not in record.getMessage()
    assert "Basic ***" in record.getMessage()
