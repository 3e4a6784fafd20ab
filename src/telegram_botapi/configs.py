"""Configuration objects for API methods.

Each configuration is an immutable value describing one call. Two protocols
define what the client can do with it:

- :class:`Chattable`: ``params()`` builds the request fields and ``method()``
  names the API method.
- :class:`Fileable`: a Chattable that also carries files via ``files()``.

Field groups shared by several methods (the chat a message goes to, the
message an edit targets) are declared once and serialized by
:func:`chat_params` and :func:`edit_params`.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Any, Protocol, runtime_checkable

from .files import RequestFile, RequestFileData
from .params import Params
from .types import BotCommand, BotCommandScope, InlineKeyboardMarkup, MessageEntity


@runtime_checkable
class Chattable(Protocol):
    """Any configuration that can be sent to the API."""

    def params(self) -> Params: ...

    def method(self) -> str: ...


@runtime_checkable
class Fileable(Chattable, Protocol):
    """A configuration that includes files."""

    def files(self) -> list[RequestFile]: ...


# ----------------------------------------------------------------------
# Shared field groups
# ----------------------------------------------------------------------


@dataclass(frozen=True, kw_only=True)
class ChatTarget:
    """Fields common to everything sent into a chat."""

    chat_id: int = 0
    channel_username: str = ""
    reply_to_message_id: int = 0
    reply_markup: Any = None
    disable_notification: bool = False
    allow_sending_without_reply: bool = False


def chat_params(target: ChatTarget) -> Params:
    params = Params()

    params.add_first_valid("chat_id", target.chat_id, target.channel_username)
    params.add_non_zero("reply_to_message_id", target.reply_to_message_id)
    params.add_bool("disable_notification", target.disable_notification)
    params.add_bool("allow_sending_without_reply", target.allow_sending_without_reply)
    params.add_interface("reply_markup", target.reply_markup)

    return params


@dataclass(frozen=True, kw_only=True)
class EditTarget:
    """Fields identifying the message an edit applies to.

    Either ``inline_message_id`` or a chat plus ``message_id``.
    """

    chat_id: int = 0
    channel_username: str = ""
    message_id: int = 0
    inline_message_id: str = ""
    reply_markup: InlineKeyboardMarkup | None = None


def edit_params(target: EditTarget) -> Params:
    params = Params()

    if target.inline_message_id:
        params["inline_message_id"] = target.inline_message_id
    else:
        params.add_first_valid("chat_id", target.chat_id, target.channel_username)
        params.add_non_zero("message_id", target.message_id)
    params.add_interface("reply_markup", target.reply_markup)

    return params


# ----------------------------------------------------------------------
# Sending
# ----------------------------------------------------------------------


@dataclass(frozen=True, kw_only=True)
class MessageConfig(ChatTarget):
    """sendMessage"""

    text: str
    parse_mode: str = ""
    entities: Sequence[MessageEntity] = ()
    disable_web_page_preview: bool = False

    def params(self) -> Params:
        params = chat_params(self)

        params.add_required("text", self.text)
        params.add_bool("disable_web_page_preview", self.disable_web_page_preview)
        params.add_non_empty("parse_mode", self.parse_mode)
        params.add_interface("entities", list(self.entities))

        return params

    def method(self) -> str:
        return "sendMessage"


@dataclass(frozen=True, kw_only=True)
class LocationConfig(ChatTarget):
    """sendLocation"""

    latitude: float
    longitude: float
    horizontal_accuracy: float = 0.0
    live_period: int = 0
    heading: int = 0
    proximity_alert_radius: int = 0

    def params(self) -> Params:
        params = chat_params(self)

        params.add_required("latitude", float(self.latitude))
        params.add_required("longitude", float(self.longitude))
        params.add_non_zero_float("horizontal_accuracy", self.horizontal_accuracy)
        params.add_non_zero("live_period", self.live_period)
        params.add_non_zero("heading", self.heading)
        params.add_non_zero("proximity_alert_radius", self.proximity_alert_radius)

        return params

    def method(self) -> str:
        return "sendLocation"


@dataclass(frozen=True, kw_only=True)
class PhotoConfig(ChatTarget):
    """sendPhoto"""

    photo: RequestFileData
    caption: str = ""
    parse_mode: str = ""
    caption_entities: Sequence[MessageEntity] = ()

    def params(self) -> Params:
        params = chat_params(self)

        params.add_non_empty("caption", self.caption)
        params.add_non_empty("parse_mode", self.parse_mode)
        params.add_interface("caption_entities", list(self.caption_entities))

        return params

    def method(self) -> str:
        return "sendPhoto"

    def files(self) -> list[RequestFile]:
        return [RequestFile("photo", self.photo)]


@dataclass(frozen=True, kw_only=True)
class DocumentConfig(ChatTarget):
    """sendDocument"""

    document: RequestFileData
    thumb: RequestFileData | None = None
    caption: str = ""
    parse_mode: str = ""
    caption_entities: Sequence[MessageEntity] = ()
    disable_content_type_detection: bool = False

    def params(self) -> Params:
        params = chat_params(self)

        params.add_non_empty("caption", self.caption)
        params.add_non_empty("parse_mode", self.parse_mode)
        params.add_interface("caption_entities", list(self.caption_entities))
        params.add_bool("disable_content_type_detection", self.disable_content_type_detection)

        return params

    def method(self) -> str:
        return "sendDocument"

    def files(self) -> list[RequestFile]:
        files = [RequestFile("document", self.document)]
        if self.thumb is not None:
            files.append(RequestFile("thumb", self.thumb))
        return files


# ----------------------------------------------------------------------
# Editing
# ----------------------------------------------------------------------


@dataclass(frozen=True, kw_only=True)
class EditMessageTextConfig(EditTarget):
    """editMessageText"""

    text: str
    parse_mode: str = ""
    entities: Sequence[MessageEntity] = ()
    disable_web_page_preview: bool = False

    def params(self) -> Params:
        params = edit_params(self)

        params.add_required("text", self.text)
        params.add_non_empty("parse_mode", self.parse_mode)
        params.add_interface("entities", list(self.entities))
        params.add_bool("disable_web_page_preview", self.disable_web_page_preview)

        return params

    def method(self) -> str:
        return "editMessageText"


@dataclass(frozen=True, kw_only=True)
class EditMessageReplyMarkupConfig(EditTarget):
    """editMessageReplyMarkup"""

    def params(self) -> Params:
        return edit_params(self)

    def method(self) -> str:
        return "editMessageReplyMarkup"


@dataclass(frozen=True, kw_only=True)
class StopPollConfig(EditTarget):
    """stopPoll"""

    def params(self) -> Params:
        return edit_params(self)

    def method(self) -> str:
        return "stopPoll"


@dataclass(frozen=True, kw_only=True)
class DeleteMessageConfig:
    """deleteMessage"""

    chat_id: int = 0
    channel_username: str = ""
    message_id: int

    def params(self) -> Params:
        params = Params()

        params.add_first_valid("chat_id", self.chat_id, self.channel_username)
        params.add_required("message_id", self.message_id)

        return params

    def method(self) -> str:
        return "deleteMessage"


# ----------------------------------------------------------------------
# Updates and webhooks
# ----------------------------------------------------------------------


@dataclass(frozen=True, kw_only=True)
class UpdateConfig:
    """getUpdates"""

    offset: int = 0
    limit: int = 0
    timeout: int = 0
    allowed_updates: Sequence[str] = ()

    def params(self) -> Params:
        params = Params()

        params.add_non_zero("offset", self.offset)
        params.add_non_zero("limit", self.limit)
        params.add_non_zero("timeout", self.timeout)
        params.add_interface("allowed_updates", list(self.allowed_updates))

        return params

    def method(self) -> str:
        return "getUpdates"

    def with_offset(self, offset: int) -> UpdateConfig:
        return replace(self, offset=offset)


@dataclass(frozen=True, kw_only=True)
class WebhookConfig:
    """setWebhook"""

    url: str
    certificate: RequestFileData | None = None
    ip_address: str = ""
    max_connections: int = 0
    allowed_updates: Sequence[str] = ()
    drop_pending_updates: bool = False
    secret_token: str = ""

    def params(self) -> Params:
        params = Params()

        params.add_required("url", self.url)
        params.add_non_empty("ip_address", self.ip_address)
        params.add_non_zero("max_connections", self.max_connections)
        params.add_interface("allowed_updates", list(self.allowed_updates))
        params.add_bool("drop_pending_updates", self.drop_pending_updates)
        params.add_non_empty("secret_token", self.secret_token)

        return params

    def method(self) -> str:
        return "setWebhook"

    def files(self) -> list[RequestFile]:
        if self.certificate is None:
            return []
        return [RequestFile("certificate", self.certificate)]


@dataclass(frozen=True, kw_only=True)
class DeleteWebhookConfig:
    """deleteWebhook"""

    drop_pending_updates: bool = False

    def params(self) -> Params:
        params = Params()
        params.add_bool("drop_pending_updates", self.drop_pending_updates)
        return params

    def method(self) -> str:
        return "deleteWebhook"


# ----------------------------------------------------------------------
# Bot commands
# ----------------------------------------------------------------------


@dataclass(frozen=True, kw_only=True)
class SetMyCommandsConfig:
    """setMyCommands"""

    commands: Sequence[BotCommand]
    scope: BotCommandScope | None = None
    language_code: str = ""

    def params(self) -> Params:
        params = Params()

        params.add_json("commands", list(self.commands))
        params.add_interface("scope", self.scope)
        params.add_non_empty("language_code", self.language_code)

        return params

    def method(self) -> str:
        return "setMyCommands"


@dataclass(frozen=True, kw_only=True)
class DeleteMyCommandsConfig:
    """deleteMyCommands"""

    scope: BotCommandScope | None = None
    language_code: str = ""

    def params(self) -> Params:
        params = Params()

        params.add_interface("scope", self.scope)
        params.add_non_empty("language_code", self.language_code)

        return params

    def method(self) -> str:
        return "deleteMyCommands"


@dataclass(frozen=True, kw_only=True)
class GetMyCommandsConfig:
    """getMyCommands"""

    scope: BotCommandScope | None = None
    language_code: str = ""

    def params(self) -> Params:
        params = Params()

        params.add_interface("scope", self.scope)
        params.add_non_empty("language_code", self.language_code)

        return params

    def method(self) -> str:
        return "getMyCommands"
