"""Tests for the logger module."""

import logging
from logging.handlers import RotatingFileHandler

from rich.logging import RichHandler

from telegram_botapi.core.config import LoggingConfig
from telegram_botapi.core.logger import get_logger, log_exception, setup_logging


class TestGetLogger:
    """Tests for the get_logger function."""

    def test_get_logger_returns_namespaced_instance(self):
        logger = get_logger("test_name")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "telegram_bot.test_name"

    def test_get_logger_is_cached(self):
        assert get_logger("cached_name") is get_logger("cached_name")


class TestSetupLogging:
    """Tests for the setup_logging function."""

    def test_setup_logging_levels(self):
        logger = get_logger("levels")

        setup_logging(LoggingConfig(level="DEBUG"))
        assert logging.getLogger("telegram_bot").level == logging.DEBUG
        assert logger.level == logging.DEBUG

        setup_logging(LoggingConfig(level="WARNING"))
        assert logging.getLogger("telegram_bot").level == logging.WARNING
        assert logger.level == logging.WARNING

        setup_logging(LoggingConfig(level="INFO"))

    def test_setup_logging_handlers(self, tmp_path):
        setup_logging(LoggingConfig(log_file=None))
        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], RichHandler)

        setup_logging(LoggingConfig(log_file=str(tmp_path / "logs" / "bot.log")))
        handlers = logging.getLogger().handlers
        assert len(handlers) == 2
        assert any(isinstance(h, RotatingFileHandler) for h in handlers)

        setup_logging(LoggingConfig())

    def test_file_logging_writes_to_file(self, tmp_path):
        log_file = tmp_path / "bot.log"
        setup_logging(LoggingConfig(log_file=str(log_file)))

        get_logger("file_test").info("hello from the test")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "hello from the test" in log_file.read_text(encoding="utf-8")
        setup_logging(LoggingConfig())


def test_log_exception(caplog):
    logger = get_logger("exc_test")
    try:
        raise RuntimeError("boom")
    except RuntimeError as exc:
        with caplog.at_level(logging.ERROR, logger="telegram_bot.exc_test"):
            log_exception(logger, exc, "While polling")

    record = caplog.records[-1]
    assert record.getMessage() == "While polling: boom"
    assert record.exc_info is not None
