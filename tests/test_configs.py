"""Tests for configuration objects and their constructors."""

import dataclasses
import json

import pytest

from telegram_botapi import helpers
from telegram_botapi.configs import (
    Chattable,
    DeleteMessageConfig,
    DocumentConfig,
    EditMessageTextConfig,
    Fileable,
    LocationConfig,
    MessageConfig,
    PhotoConfig,
    SetMyCommandsConfig,
    UpdateConfig,
    WebhookConfig,
)
from telegram_botapi.files import FileBytes, FileID, FileURL
from telegram_botapi.types import BotCommand, MessageEntity


class TestProtocols:
    """Tests for the Chattable and Fileable protocols."""

    def test_every_config_is_chattable(self):
        configs = [
            helpers.new_message(1, "hi"),
            helpers.new_location(1, 1.0, 2.0),
            helpers.new_photo(1, FileID("x")),
            helpers.new_document(1, FileID("x")),
            helpers.new_edit_message_text(1, 2, "hi"),
            helpers.new_edit_message_reply_markup(
                1, 2, helpers.new_inline_keyboard_markup()
            ),
            helpers.new_stop_poll(1, 2),
            helpers.new_delete_message(1, 2),
            helpers.new_update(0),
            helpers.new_webhook("https://example.com"),
            helpers.new_delete_webhook(),
            helpers.new_set_my_commands(),
            helpers.new_delete_my_commands(),
            helpers.new_get_my_commands(),
        ]
        for config in configs:
            assert isinstance(config, Chattable)
            assert isinstance(config.params(), dict)
            assert config.method()

    def test_only_file_configs_are_fileable(self):
        assert isinstance(helpers.new_photo(1, FileID("x")), Fileable)
        assert isinstance(helpers.new_webhook("https://example.com"), Fileable)
        assert not isinstance(helpers.new_message(1, "hi"), Fileable)

    def test_configs_are_immutable(self):
        config = helpers.new_message(1, "hi")
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.text = "changed"  # type: ignore[misc]


class TestMessageConfig:
    """Tests for sendMessage parameters."""

    def test_required_only(self):
        config = MessageConfig(chat_id=42, text="hello")
        assert config.method() == "sendMessage"
        assert config.params() == {"chat_id": "42", "text": "hello"}

    def test_empty_text_is_still_sent(self):
        assert MessageConfig(chat_id=42, text="").params()["text"] == ""

    def test_all_fields(self):
        config = MessageConfig(
            chat_id=42,
            text="*hi*",
            parse_mode="MarkdownV2",
            entities=[MessageEntity(type="bold", offset=0, length=4)],
            disable_web_page_preview=True,
            reply_to_message_id=7,
            disable_notification=True,
            allow_sending_without_reply=True,
            reply_markup=helpers.new_reply_keyboard(
                helpers.new_keyboard_button_row(helpers.new_keyboard_button("A"))
            ),
        )
        params = config.params()
        assert params["parse_mode"] == "MarkdownV2"
        assert params["disable_web_page_preview"] == "true"
        assert params["reply_to_message_id"] == "7"
        assert params["disable_notification"] == "true"
        assert params["allow_sending_without_reply"] == "true"
        assert json.loads(params["entities"]) == [{"type": "bold", "offset": 0, "length": 4}]
        assert json.loads(params["reply_markup"]) == {
            "keyboard": [[{"text": "A"}]],
            "resize_keyboard": True,
        }

    def test_channel_username(self):
        config = helpers.new_message_to_channel("@news", "hi")
        assert config.params() == {"chat_id": "@news", "text": "hi"}


class TestOtherConfigs:
    """Tests for the remaining configuration variants."""

    def test_location_sends_required_coordinates(self):
        assert LocationConfig(chat_id=1, latitude=0.0, longitude=0.0).params() == {
            "chat_id": "1",
            "latitude": "0.0",
            "longitude": "0.0",
        }

    def test_photo_files(self):
        photo = FileBytes("cat.jpg", b"meow")
        config = PhotoConfig(chat_id=1, photo=photo, caption="cat")
        assert config.params() == {"chat_id": "1", "caption": "cat"}
        files = config.files()
        assert [file.name for file in files] == ["photo"]
        assert files[0].data is photo

    def test_document_with_thumb(self):
        config = DocumentConfig(
            chat_id=1, document=FileURL("https://example.com/a.pdf"), thumb=FileID("t")
        )
        assert config.method() == "sendDocument"
        assert [file.name for file in config.files()] == ["document", "thumb"]

    def test_edit_by_inline_message_id(self):
        config = EditMessageTextConfig(inline_message_id="abc", chat_id=1, message_id=2, text="x")
        assert config.params() == {"inline_message_id": "abc", "text": "x"}

    def test_edit_by_chat_and_message(self):
        config = helpers.new_edit_message_text(1, 2, "x")
        assert config.params() == {"chat_id": "1", "message_id": "2", "text": "x"}

    def test_delete_message(self):
        config = DeleteMessageConfig(channel_username="@news", message_id=5)
        assert config.method() == "deleteMessage"
        assert config.params() == {"chat_id": "@news", "message_id": "5"}

    def test_update_config_omits_zero_fields(self):
        assert helpers.new_update(0).params() == {}
        config = UpdateConfig(offset=5, limit=10, timeout=60, allowed_updates=["message"])
        assert config.params() == {
            "offset": "5",
            "limit": "10",
            "timeout": "60",
            "allowed_updates": '["message"]',
        }

    def test_update_config_with_offset(self):
        config = UpdateConfig(offset=1, timeout=30)
        moved = config.with_offset(8)
        assert moved.offset == 8
        assert moved.timeout == 30
        assert config.offset == 1

    def test_webhook_certificate(self):
        assert WebhookConfig(url="https://example.com").files() == []
        config = helpers.new_webhook_with_cert("https://example.com", FileBytes("c.pem", b"pem"))
        assert [file.name for file in config.files()] == ["certificate"]
        assert config.params() == {"url": "https://example.com"}

    def test_delete_webhook(self):
        assert helpers.new_delete_webhook().params() == {}
        assert helpers.new_delete_webhook(True).params() == {"drop_pending_updates": "true"}


class TestCommandConfigs:
    """Tests for setMyCommands, deleteMyCommands and getMyCommands."""

    def test_set_commands_always_sends_list(self):
        assert SetMyCommandsConfig(commands=[]).params() == {"commands": "[]"}

    def test_set_commands_with_scope_and_language(self):
        config = helpers.new_set_my_commands_with_scope_and_language(
            helpers.new_bot_command_scope_chat(42),
            "en",
            BotCommand(command="start", description="Start"),
        )
        params = config.params()
        assert config.method() == "setMyCommands"
        assert json.loads(params["commands"]) == [{"command": "start", "description": "Start"}]
        assert json.loads(params["scope"]) == {"type": "chat", "chat_id": 42}
        assert params["language_code"] == "en"

    def test_delete_and_get_commands(self):
        scope = helpers.new_bot_command_scope_all_private_chats()
        delete = helpers.new_delete_my_commands_with_scope(scope)
        assert delete.method() == "deleteMyCommands"
        assert json.loads(delete.params()["scope"]) == {"type": "all_private_chats"}
        assert helpers.new_get_my_commands().params() == {}
        assert helpers.new_get_my_commands().method() == "getMyCommands"


class TestKeyboardHelpers:
    """Tests for keyboard constructors."""

    def test_reply_keyboard_resizes(self):
        keyboard = helpers.new_reply_keyboard(
            helpers.new_keyboard_button_row(
                helpers.new_keyboard_button("1"), helpers.new_keyboard_button("2")
            )
        )
        assert keyboard.resize_keyboard is True
        assert [button.text for button in keyboard.keyboard[0]] == ["1", "2"]

    def test_one_time_keyboard(self):
        keyboard = helpers.new_one_time_reply_keyboard([helpers.new_keyboard_button("x")])
        assert keyboard.one_time_keyboard is True

    def test_remove_keyboard(self):
        assert helpers.new_remove_keyboard().to_dict() == {"remove_keyboard": True}
        assert helpers.new_remove_keyboard(True).to_dict() == {
            "remove_keyboard": True,
            "selective": True,
        }

    def test_inline_keyboard(self):
        markup = helpers.new_inline_keyboard_markup(
            helpers.new_inline_keyboard_row(
                helpers.new_inline_keyboard_button_data("Yes", "yes"),
                helpers.new_inline_keyboard_button_url("Docs", "https://core.telegram.org"),
            )
        )
        assert markup.to_dict() == {
            "inline_keyboard": [
                [
                    {"text": "Yes", "callback_data": "yes"},
                    {"text": "Docs", "url": "https://core.telegram.org"},
                ]
            ]
        }
