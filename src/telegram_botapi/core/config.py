"""Configuration management for the Telegram Bot API client.

This module provides configuration models and loading functionality using Pydantic
for validation and type safety. Settings are read from ``TELEGRAM_BOT_*``
environment variables, a ``.env`` file, or a YAML file.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

API_ENDPOINT = "https://api.telegram.org/bot{token}/{method}"
FILE_ENDPOINT = "https://api.telegram.org/file/bot{token}/{path}"

_DOTENV_LOADED = False


def _load_env_once() -> None:
    """Load environment variables from a .env file exactly once."""

    global _DOTENV_LOADED
    if not _DOTENV_LOADED:
        load_dotenv()
        _DOTENV_LOADED = True


def _expand_env_vars(data: Any) -> Any:
    """Recursively expand environment variables in configuration data."""

    if isinstance(data, str):
        return os.path.expandvars(data)
    if isinstance(data, dict):
        return {key: _expand_env_vars(value) for key, value in data.items()}
    if isinstance(data, list):
        return [_expand_env_vars(item) for item in data]
    return data


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )
    log_file: str | None = Field(default=None, description="Log file path")
    max_bytes: int = Field(default=10485760, description="Max log file size (10MB)")
    backup_count: int = Field(default=5, description="Number of backup files")

    @field_validator("level")
    @classmethod
    def normalise_level(cls, value: str) -> str:
        level = (value or "INFO").strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported log level: {value}")
        return level


class HTTPClientConfig(BaseModel):
    """HTTP client configuration.

    The timeout must exceed the long-poll timeout, otherwise every idle
    ``getUpdates`` call ends in a client-side timeout.
    """

    timeout: float = Field(default=90.0, gt=0.0, description="HTTP timeout in seconds")


class PollingConfig(BaseModel):
    """Configuration for long polling."""

    offset: int = Field(default=0, description="Initial update offset")
    limit: int = Field(default=0, ge=0, le=100, description="Updates per request (0: server default)")
    timeout: int = Field(default=60, ge=0, description="Long-poll timeout sent to the server")
    allowed_updates: list[str] = Field(
        default_factory=list, description="Update types to receive (empty: all)"
    )
    retry_delay: float = Field(
        default=3.0, ge=0.0, description="Fixed delay before retrying a failed fetch"
    )


class WebhookServerConfig(BaseModel):
    """Configuration for the inbound webhook server."""

    enabled: bool = Field(default=False, description="Enable inbound webhook server")
    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=8443, description="Bind port")
    path: str = Field(default="/telegram/webhook", description="Webhook route path")
    url: str | None = Field(
        default=None, description="Public URL registered with setWebhook"
    )
    secret_token: str | None = Field(
        default=None,
        description="Expected X-Telegram-Bot-Api-Secret-Token header value",
    )

    @field_validator("path")
    @classmethod
    def normalise_path(cls, value: str) -> str:
        if not value.startswith("/"):
            return f"/{value}"
        return value


class BotSettings(BaseSettings):
    """Main configuration for a bot instance."""

    model_config = SettingsConfigDict(
        env_prefix="TELEGRAM_BOT_",
        env_nested_delimiter="__",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    token: str = Field(..., description="Bot access token issued by @BotFather")
    api_endpoint: str = Field(
        default=API_ENDPOINT,
        description="API URL template with {token} and {method} placeholders",
    )
    debug: bool = Field(default=False, description="Log raw requests and responses")
    buffer: int = Field(default=100, ge=1, description="Update channel capacity")

    http: HTTPClientConfig = Field(
        default_factory=HTTPClientConfig, description="HTTP client settings"
    )
    polling: PollingConfig = Field(default_factory=PollingConfig, description="Long polling")
    webhook: WebhookServerConfig = Field(
        default_factory=WebhookServerConfig, description="Webhook server settings"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    @field_validator("token")
    @classmethod
    def validate_token(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Bot token cannot be empty")
        return value

    @field_validator("api_endpoint")
    @classmethod
    def validate_endpoint(cls, value: str) -> str:
        if "{token}" not in value or "{method}" not in value:
            raise ValueError("api_endpoint must contain {token} and {method} placeholders")
        return value

    @classmethod
    def from_yaml(cls, path: str | Path) -> BotSettings:
        """Load configuration from a YAML file.

        Environment variables referenced as ``${VAR}`` are expanded. Values
        missing from the file still fall back to ``TELEGRAM_BOT_*`` variables.
        """
        _load_env_once()
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Configuration root must be a mapping: {config_path}")

        return cls(**_expand_env_vars(data))

    @classmethod
    def from_env(cls) -> BotSettings:
        """Load configuration from environment variables only."""
        _load_env_once()
        return cls()

    def to_yaml(self, path: str | Path) -> None:
        """Save configuration to a YAML file."""
        config_path = Path(path)
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self.model_dump(mode="json"), f, sort_keys=False, allow_unicode=True)
