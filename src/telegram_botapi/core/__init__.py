"""Core modules: configuration and logging."""

from .config import (
    API_ENDPOINT,
    FILE_ENDPOINT,
    BotSettings,
    HTTPClientConfig,
    LoggingConfig,
    PollingConfig,
    WebhookServerConfig,
)
from .logger import get_logger, log_exception, setup_logging

__all__ = [
    "API_ENDPOINT",
    "FILE_ENDPOINT",
    "BotSettings",
    "HTTPClientConfig",
    "LoggingConfig",
    "PollingConfig",
    "WebhookServerConfig",
    "get_logger",
    "log_exception",
    "setup_logging",
]
