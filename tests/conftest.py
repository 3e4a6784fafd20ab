"""Test configuration hooks."""

from __future__ import annotations

import logging
import os

import pytest
from factories import TOKEN

from telegram_botapi import BotAPI


# Configure anyio to only use asyncio backend (skip trio tests)
@pytest.fixture(scope="session")
def anyio_backend():
    """Configure anyio to use only asyncio backend."""
    return "asyncio"


@pytest.fixture(autouse=True)
def reset_logging():
    """Restore root logging state changed by setup_logging."""
    original_handlers = logging.root.handlers[:]
    original_level = logging.root.level

    yield

    logging.root.handlers = original_handlers
    logging.root.setLevel(original_level)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep TELEGRAM_BOT_* variables of the host out of the tests."""
    for key in list(os.environ):
        if key.startswith("TELEGRAM_BOT_"):
            monkeypatch.delenv(key, raising=False)
    # No .env from the working directory either.
    monkeypatch.setattr("telegram_botapi.core.config._DOTENV_LOADED", True)


@pytest.fixture
def token() -> str:
    return TOKEN


@pytest.fixture
def bot():
    """A client that skips the getMe check on construction."""
    with BotAPI(TOKEN, validate=False) as client:
        yield client
