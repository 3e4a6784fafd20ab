"""Data models for the Telegram Bot API.

These models mirror the remote schema (https://core.telegram.org/bots/api).
Unknown fields are preserved so that newer API versions still decode, and the
``from`` field is exposed as ``from_user``.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class TelegramObject(BaseModel):
    """Base for all API objects."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        """Return the wire representation (aliases, no null fields)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ResponseParameters(TelegramObject):
    """Hints attached to a failed request."""

    migrate_to_chat_id: int | None = None
    retry_after: int | None = None


class APIResponse(TelegramObject):
    """Envelope returned by every API method.

    ``result`` is kept as raw decoded JSON; the caller decides which model it
    maps to.
    """

    ok: bool
    result: Any = None
    error_code: int = 0
    description: str = ""
    parameters: ResponseParameters | None = None


class User(TelegramObject):
    """A Telegram user or bot."""

    id: int
    is_bot: bool = False
    first_name: str = ""
    last_name: str | None = None
    username: str | None = None
    language_code: str | None = None
    can_join_groups: bool | None = None
    can_read_all_group_messages: bool | None = None
    supports_inline_queries: bool | None = None

    def display_name(self) -> str:
        """Return ``@username`` if set, otherwise the full name."""
        if self.username:
            return f"@{self.username}"
        if self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.first_name


class Chat(TelegramObject):
    """A private chat, group, supergroup or channel."""

    id: int
    type: str = "private"
    title: str | None = None
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None

    def is_private(self) -> bool:
        return self.type == "private"

    def is_group(self) -> bool:
        return self.type == "group"

    def is_super_group(self) -> bool:
        return self.type == "supergroup"

    def is_channel(self) -> bool:
        return self.type == "channel"


class MessageEntity(TelegramObject):
    """A special entity in a text message (hashtag, URL, command, ...)."""

    type: str
    offset: int
    length: int
    url: str | None = None
    user: User | None = None
    language: str | None = None

    def is_command(self) -> bool:
        return self.type == "bot_command"


class Location(TelegramObject):
    """A point on the map."""

    latitude: float
    longitude: float
    horizontal_accuracy: float | None = None
    live_period: int | None = None
    heading: int | None = None
    proximity_alert_radius: int | None = None


class PhotoSize(TelegramObject):
    """One size of a photo or a file/sticker thumbnail."""

    file_id: str
    file_unique_id: str
    width: int
    height: int
    file_size: int | None = None


class Document(TelegramObject):
    """A general file."""

    file_id: str
    file_unique_id: str
    thumb: PhotoSize | None = None
    file_name: str | None = None
    mime_type: str | None = None
    file_size: int | None = None


class File(TelegramObject):
    """A file ready to be downloaded via the file endpoint."""

    file_id: str
    file_unique_id: str
    file_size: int | None = None
    file_path: str | None = None


class PollOption(TelegramObject):
    text: str
    voter_count: int = 0


class Poll(TelegramObject):
    """A native poll."""

    id: str
    question: str
    options: list[PollOption] = Field(default_factory=list)
    total_voter_count: int = 0
    is_closed: bool = False
    is_anonymous: bool = True
    type: str = "regular"
    allows_multiple_answers: bool = False
    correct_option_id: int | None = None


class KeyboardButton(TelegramObject):
    """A button of a reply keyboard."""

    text: str
    request_contact: bool | None = None
    request_location: bool | None = None


class ReplyKeyboardMarkup(TelegramObject):
    """A custom keyboard with reply options."""

    keyboard: list[list[KeyboardButton]]
    resize_keyboard: bool | None = None
    one_time_keyboard: bool | None = None
    input_field_placeholder: str | None = None
    selective: bool | None = None


class ReplyKeyboardRemove(TelegramObject):
    """Request to remove the current custom keyboard."""

    remove_keyboard: bool = True
    selective: bool | None = None


class InlineKeyboardButton(TelegramObject):
    """A button of an inline keyboard. Exactly one optional field must be set."""

    text: str
    url: str | None = None
    callback_data: str | None = None
    switch_inline_query: str | None = None
    switch_inline_query_current_chat: str | None = None


class InlineKeyboardMarkup(TelegramObject):
    """An inline keyboard attached to a message."""

    inline_keyboard: list[list[InlineKeyboardButton]]


class Message(TelegramObject):
    """A message."""

    message_id: int
    from_user: User | None = Field(default=None, alias="from")
    sender_chat: Chat | None = None
    date: int = 0
    chat: Chat
    forward_from: User | None = None
    forward_date: int | None = None
    reply_to_message: Message | None = None
    edit_date: int | None = None
    text: str | None = None
    entities: list[MessageEntity] | None = None
    caption: str | None = None
    caption_entities: list[MessageEntity] | None = None
    photo: list[PhotoSize] | None = None
    document: Document | None = None
    location: Location | None = None
    poll: Poll | None = None
    new_chat_members: list[User] | None = None
    left_chat_member: User | None = None
    migrate_to_chat_id: int | None = None
    migrate_from_chat_id: int | None = None
    reply_markup: InlineKeyboardMarkup | None = None

    def is_command(self) -> bool:
        """Return True if the message starts with a bot command."""
        if not self.entities:
            return False
        entity = self.entities[0]
        return entity.offset == 0 and entity.is_command()

    def command_with_at(self) -> str:
        """Return the leading command including any ``@botname`` suffix, without ``/``."""
        if not self.is_command() or not self.text or not self.entities:
            return ""
        entity = self.entities[0]
        return self.text[1 : entity.length]

    def command(self) -> str:
        """Return the leading command without ``/`` and ``@botname``."""
        command = self.command_with_at()
        if "@" in command:
            command = command.split("@", 1)[0]
        return command

    def command_arguments(self) -> str:
        """Return the text following the leading command."""
        if not self.is_command() or not self.text or not self.entities:
            return ""
        entity = self.entities[0]
        return self.text[entity.length :].strip()


class CallbackQuery(TelegramObject):
    """An incoming callback query from an inline keyboard button."""

    id: str
    from_user: User = Field(alias="from")
    message: Message | None = None
    inline_message_id: str | None = None
    chat_instance: str = ""
    data: str | None = None
    game_short_name: str | None = None


class Update(TelegramObject):
    """An incoming update. At most one of the optional payloads is present."""

    update_id: int
    message: Message | None = None
    edited_message: Message | None = None
    channel_post: Message | None = None
    edited_channel_post: Message | None = None
    callback_query: CallbackQuery | None = None
    poll: Poll | None = None

    def effective_message(self) -> Message | None:
        return (
            self.message
            or self.edited_message
            or self.channel_post
            or self.edited_channel_post
            or (self.callback_query.message if self.callback_query else None)
        )

    def sent_from(self) -> User | None:
        """Return the user that caused the update, if any."""
        if self.callback_query is not None:
            return self.callback_query.from_user
        for message in (self.message, self.edited_message):
            if message is not None:
                return message.from_user
        return None

    def from_chat(self) -> Chat | None:
        """Return the chat the update belongs to, if any."""
        message = self.effective_message()
        return message.chat if message else None


class WebhookInfo(TelegramObject):
    """Current webhook status."""

    url: str = ""
    has_custom_certificate: bool = False
    pending_update_count: int = 0
    ip_address: str | None = None
    last_error_date: int | None = None
    last_error_message: str | None = None
    max_connections: int | None = None
    allowed_updates: list[str] | None = None

    def is_set(self) -> bool:
        return self.url != ""


class BotCommand(TelegramObject):
    """A bot command shown in the client's command menu."""

    command: str
    description: str


class BotCommandScope(TelegramObject):
    """Scope to which a command list applies."""

    type: Literal[
        "default",
        "all_private_chats",
        "all_group_chats",
        "all_chat_administrators",
        "chat",
        "chat_administrators",
        "chat_member",
    ] = "default"
    chat_id: int | str | None = None
    user_id: int | None = None


Message.model_rebuild()
