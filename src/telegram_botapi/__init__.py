"""Telegram Bot API client.

A small client library for the Telegram Bot API with:
- Immutable configuration objects for each API method
- Form-urlencoded and streamed multipart request encoding
- Long polling into a bounded update channel, with retries
- A FastAPI-based webhook receiver
- Sync and asyncio clients built on httpx

Example:
    ```python
    from telegram_botapi import BotAPI, UpdateConfig, new_message

    with BotAPI("123:ABC") as bot:
        for update in bot.get_updates_chan(UpdateConfig(timeout=60)):
            if update.message and update.message.text:
                bot.send(new_message(update.message.chat.id, update.message.text))
    ```
"""

from importlib.metadata import PackageNotFoundError, version

from .async_client import AsyncBotAPI
from .client import BotAPI
from .configs import (
    Chattable,
    DeleteMessageConfig,
    DeleteMyCommandsConfig,
    DeleteWebhookConfig,
    DocumentConfig,
    EditMessageReplyMarkupConfig,
    EditMessageTextConfig,
    Fileable,
    GetMyCommandsConfig,
    LocationConfig,
    MessageConfig,
    PhotoConfig,
    SetMyCommandsConfig,
    StopPollConfig,
    UpdateConfig,
    WebhookConfig,
)
from .core import BotSettings, get_logger, setup_logging
from .exceptions import (
    BotAPIError,
    EncodingError,
    PollerError,
    ProtocolMisuseError,
    TelegramAPIError,
    TransportError,
    WebhookDecodeError,
)
from .files import FileAttach, FileBytes, FileID, FilePath, FileReader, FileURL, RequestFile
from .helpers import *  # noqa: F403
from .helpers import __all__ as _helpers_all
from .params import Params
from .polling import AsyncUpdatePoller, PollerState, UpdatePoller, UpdatesChannel
from .types import (
    BotCommand,
    BotCommandScope,
    CallbackQuery,
    Chat,
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    KeyboardButton,
    Message,
    ReplyKeyboardMarkup,
    ReplyKeyboardRemove,
    Update,
    User,
    WebhookInfo,
)
from .webhook import WebhookListener, WebhookServer, handle_update, webhook_reply

__all__ = [
    "__version__",
    # Clients
    "AsyncBotAPI",
    "BotAPI",
    "BotSettings",
    "get_logger",
    "setup_logging",
    # Configuration objects
    "Chattable",
    "DeleteMessageConfig",
    "DeleteMyCommandsConfig",
    "DeleteWebhookConfig",
    "DocumentConfig",
    "EditMessageReplyMarkupConfig",
    "EditMessageTextConfig",
    "Fileable",
    "GetMyCommandsConfig",
    "LocationConfig",
    "MessageConfig",
    "Params",
    "PhotoConfig",
    "SetMyCommandsConfig",
    "StopPollConfig",
    "UpdateConfig",
    "WebhookConfig",
    # Files
    "FileAttach",
    "FileBytes",
    "FileID",
    "FilePath",
    "FileReader",
    "FileURL",
    "RequestFile",
    # Errors
    "BotAPIError",
    "EncodingError",
    "PollerError",
    "ProtocolMisuseError",
    "TelegramAPIError",
    "TransportError",
    "WebhookDecodeError",
    # Update delivery
    "AsyncUpdatePoller",
    "PollerState",
    "UpdatePoller",
    "UpdatesChannel",
    "WebhookListener",
    "WebhookServer",
    "handle_update",
    "webhook_reply",
    # Types
    "BotCommand",
    "BotCommandScope",
    "CallbackQuery",
    "Chat",
    "InlineKeyboardButton",
    "InlineKeyboardMarkup",
    "KeyboardButton",
    "Message",
    "ReplyKeyboardMarkup",
    "ReplyKeyboardRemove",
    "Update",
    "User",
    "WebhookInfo",
    *_helpers_all,
]

try:  # pragma: no cover - best-effort during development
    __version__ = version("telegram-botapi")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"
