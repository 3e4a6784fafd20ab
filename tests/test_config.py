"""Tests for configuration module."""

import pytest
import yaml
from pydantic import ValidationError

from telegram_botapi.core import BotSettings
from telegram_botapi.core.config import (
    API_ENDPOINT,
    LoggingConfig,
    PollingConfig,
    WebhookServerConfig,
)


class TestConfigModels:
    """Tests for individual Pydantic config models and their validation."""

    def test_logging_level_is_normalised(self):
        assert LoggingConfig(level="debug").level == "DEBUG"
        with pytest.raises(ValidationError, match="Unsupported log level"):
            LoggingConfig(level="chatty")

    def test_polling_limits(self):
        assert PollingConfig().timeout == 60
        assert PollingConfig().retry_delay == 3.0
        with pytest.raises(ValidationError):
            PollingConfig(limit=101)

    def test_webhook_path_gets_leading_slash(self):
        assert WebhookServerConfig(path="hook").path == "/hook"


class TestBotSettings:
    """Tests for the main settings class."""

    def test_defaults(self):
        settings = BotSettings(token="123:abc")
        assert settings.api_endpoint == API_ENDPOINT
        assert settings.debug is False
        assert settings.buffer == 100
        assert settings.http.timeout > settings.polling.timeout
        assert settings.webhook.enabled is False

    def test_token_is_required(self):
        with pytest.raises(ValidationError):
            BotSettings()
        with pytest.raises(ValidationError, match="token cannot be empty"):
            BotSettings(token="   ")

    def test_endpoint_needs_placeholders(self):
        with pytest.raises(ValidationError, match="placeholders"):
            BotSettings(token="t", api_endpoint="https://example.com/bot")

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "env-token")
        monkeypatch.setenv("TELEGRAM_BOT_DEBUG", "true")
        monkeypatch.setenv("TELEGRAM_BOT_POLLING__TIMEOUT", "15")
        monkeypatch.setenv("TELEGRAM_BOT_WEBHOOK__PORT", "9000")

        settings = BotSettings.from_env()

        assert settings.token == "env-token"
        assert settings.debug is True
        assert settings.polling.timeout == 15
        assert settings.webhook.port == 9000

    def test_from_yaml_expands_variables(self, tmp_path, monkeypatch):
        monkeypatch.setenv("MY_BOT_TOKEN", "yaml-token")
        config_path = tmp_path / "bot.yaml"
        config_path.write_text(
            yaml.dump(
                {
                    "token": "${MY_BOT_TOKEN}",
                    "buffer": 10,
                    "polling": {"limit": 50, "allowed_updates": ["message"]},
                    "logging": {"level": "warning"},
                }
            )
        )

        settings = BotSettings.from_yaml(config_path)

        assert settings.token == "yaml-token"
        assert settings.buffer == 10
        assert settings.polling.limit == 50
        assert settings.polling.allowed_updates == ["message"]
        assert settings.logging.level == "WARNING"

    def test_from_yaml_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            BotSettings.from_yaml(tmp_path / "missing.yaml")

    def test_from_yaml_rejects_non_mapping(self, tmp_path):
        config_path = tmp_path / "bot.yaml"
        config_path.write_text("- just\n- a list\n")
        with pytest.raises(ValueError, match="must be a mapping"):
            BotSettings.from_yaml(config_path)

    def test_to_yaml_round_trip(self, tmp_path):
        settings = BotSettings(token="123:abc", debug=True)
        path = tmp_path / "out" / "bot.yaml"

        settings.to_yaml(path)
        loaded = BotSettings.from_yaml(path)

        assert loaded.token == "123:abc"
        assert loaded.debug is True
        assert loaded.webhook.path == settings.webhook.path
