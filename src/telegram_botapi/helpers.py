"""Constructors for configuration objects and markup with sane defaults."""

from __future__ import annotations

from .configs import (
    DeleteMessageConfig,
    DeleteMyCommandsConfig,
    DeleteWebhookConfig,
    DocumentConfig,
    EditMessageReplyMarkupConfig,
    EditMessageTextConfig,
    GetMyCommandsConfig,
    LocationConfig,
    MessageConfig,
    PhotoConfig,
    SetMyCommandsConfig,
    StopPollConfig,
    UpdateConfig,
    WebhookConfig,
)
from .files import RequestFileData
from .types import (
    BotCommand,
    BotCommandScope,
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    KeyboardButton,
    ReplyKeyboardMarkup,
    ReplyKeyboardRemove,
)


def new_message(chat_id: int, text: str) -> MessageConfig:
    """Create a new message.

    chat_id is where to send it, text is the message text.
    """
    return MessageConfig(chat_id=chat_id, text=text)


def new_message_to_channel(username: str, text: str) -> MessageConfig:
    """Create a new message to a channel given as ``@username``."""
    return MessageConfig(channel_username=username, text=text)


def new_location(chat_id: int, latitude: float, longitude: float) -> LocationConfig:
    return LocationConfig(chat_id=chat_id, latitude=latitude, longitude=longitude)


def new_photo(chat_id: int, file: RequestFileData) -> PhotoConfig:
    """Create a photo upload (or resend, for a file ID or URL)."""
    return PhotoConfig(chat_id=chat_id, photo=file)


def new_document(chat_id: int, file: RequestFileData) -> DocumentConfig:
    return DocumentConfig(chat_id=chat_id, document=file)


def new_edit_message_text(chat_id: int, message_id: int, text: str) -> EditMessageTextConfig:
    return EditMessageTextConfig(chat_id=chat_id, message_id=message_id, text=text)


def new_edit_message_reply_markup(
    chat_id: int, message_id: int, reply_markup: InlineKeyboardMarkup
) -> EditMessageReplyMarkupConfig:
    return EditMessageReplyMarkupConfig(
        chat_id=chat_id, message_id=message_id, reply_markup=reply_markup
    )


def new_stop_poll(chat_id: int, message_id: int) -> StopPollConfig:
    return StopPollConfig(chat_id=chat_id, message_id=message_id)


def new_delete_message(chat_id: int, message_id: int) -> DeleteMessageConfig:
    return DeleteMessageConfig(chat_id=chat_id, message_id=message_id)


def new_update(offset: int) -> UpdateConfig:
    """Create a getUpdates request starting at ``offset``."""
    return UpdateConfig(offset=offset, limit=0, timeout=0)


def new_webhook(url: str) -> WebhookConfig:
    return WebhookConfig(url=url)


def new_webhook_with_cert(url: str, certificate: RequestFileData) -> WebhookConfig:
    """Create a webhook registration that uploads a self-signed certificate."""
    return WebhookConfig(url=url, certificate=certificate)


def new_delete_webhook(drop_pending_updates: bool = False) -> DeleteWebhookConfig:
    return DeleteWebhookConfig(drop_pending_updates=drop_pending_updates)


# ----------------------------------------------------------------------
# Bot commands
# ----------------------------------------------------------------------


def new_set_my_commands(*commands: BotCommand) -> SetMyCommandsConfig:
    """Set the registered commands."""
    return SetMyCommandsConfig(commands=commands)


def new_set_my_commands_with_scope(
    scope: BotCommandScope, *commands: BotCommand
) -> SetMyCommandsConfig:
    """Set the registered commands for a given scope."""
    return SetMyCommandsConfig(commands=commands, scope=scope)


def new_set_my_commands_with_scope_and_language(
    scope: BotCommandScope, language_code: str, *commands: BotCommand
) -> SetMyCommandsConfig:
    """Set the registered commands for a given scope and language code."""
    return SetMyCommandsConfig(commands=commands, scope=scope, language_code=language_code)


def new_delete_my_commands() -> DeleteMyCommandsConfig:
    return DeleteMyCommandsConfig()


def new_delete_my_commands_with_scope(scope: BotCommandScope) -> DeleteMyCommandsConfig:
    return DeleteMyCommandsConfig(scope=scope)


def new_delete_my_commands_with_scope_and_language(
    scope: BotCommandScope, language_code: str
) -> DeleteMyCommandsConfig:
    return DeleteMyCommandsConfig(scope=scope, language_code=language_code)


def new_get_my_commands(
    scope: BotCommandScope | None = None, language_code: str = ""
) -> GetMyCommandsConfig:
    return GetMyCommandsConfig(scope=scope, language_code=language_code)


def new_bot_command_scope_default() -> BotCommandScope:
    return BotCommandScope(type="default")


def new_bot_command_scope_all_private_chats() -> BotCommandScope:
    return BotCommandScope(type="all_private_chats")


def new_bot_command_scope_all_group_chats() -> BotCommandScope:
    return BotCommandScope(type="all_group_chats")


def new_bot_command_scope_chat(chat_id: int | str) -> BotCommandScope:
    return BotCommandScope(type="chat", chat_id=chat_id)


# ----------------------------------------------------------------------
# Keyboards
# ----------------------------------------------------------------------


def new_reply_keyboard(*rows: list[KeyboardButton]) -> ReplyKeyboardMarkup:
    """Create a regular keyboard that resizes to fit its buttons."""
    return ReplyKeyboardMarkup(keyboard=list(rows), resize_keyboard=True)


def new_one_time_reply_keyboard(*rows: list[KeyboardButton]) -> ReplyKeyboardMarkup:
    """Create a keyboard that hides after a button is pressed."""
    return ReplyKeyboardMarkup(keyboard=list(rows), resize_keyboard=True, one_time_keyboard=True)


def new_keyboard_button(text: str) -> KeyboardButton:
    return KeyboardButton(text=text)


def new_keyboard_button_row(*buttons: KeyboardButton) -> list[KeyboardButton]:
    return list(buttons)


def new_remove_keyboard(selective: bool = False) -> ReplyKeyboardRemove:
    return ReplyKeyboardRemove(remove_keyboard=True, selective=selective or None)


def new_inline_keyboard_markup(*rows: list[InlineKeyboardButton]) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=list(rows))


def new_inline_keyboard_row(*buttons: InlineKeyboardButton) -> list[InlineKeyboardButton]:
    return list(buttons)


def new_inline_keyboard_button_data(text: str, data: str) -> InlineKeyboardButton:
    return InlineKeyboardButton(text=text, callback_data=data)


def new_inline_keyboard_button_url(text: str, url: str) -> InlineKeyboardButton:
    return InlineKeyboardButton(text=text, url=url)


__all__ = [
    "new_bot_command_scope_all_group_chats",
    "new_bot_command_scope_all_private_chats",
    "new_bot_command_scope_chat",
    "new_bot_command_scope_default",
    "new_delete_message",
    "new_delete_my_commands",
    "new_delete_my_commands_with_scope",
    "new_delete_my_commands_with_scope_and_language",
    "new_delete_webhook",
    "new_document",
    "new_edit_message_reply_markup",
    "new_edit_message_text",
    "new_get_my_commands",
    "new_inline_keyboard_button_data",
    "new_inline_keyboard_button_url",
    "new_inline_keyboard_markup",
    "new_inline_keyboard_row",
    "new_keyboard_button",
    "new_keyboard_button_row",
    "new_location",
    "new_message",
    "new_message_to_channel",
    "new_one_time_reply_keyboard",
    "new_photo",
    "new_remove_keyboard",
    "new_reply_keyboard",
    "new_set_my_commands",
    "new_set_my_commands_with_scope",
    "new_set_my_commands_with_scope_and_language",
    "new_stop_poll",
    "new_update",
    "new_webhook",
    "new_webhook_with_cert",
]
