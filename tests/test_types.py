"""Tests for the API data models."""

from factories import make_message, make_update, make_user

from telegram_botapi.types import APIResponse, Message, Update, User, WebhookInfo


class TestUpdate:
    """Tests for decoding updates."""

    def test_from_alias_round_trip(self):
        update = Update.model_validate(make_update(10, text="hello"))
        assert update.update_id == 10
        assert update.message is not None
        assert update.message.from_user is not None
        assert update.message.from_user.username == "alice"
        assert update.to_dict()["message"]["from"]["username"] == "alice"

    def test_unknown_fields_are_preserved(self):
        payload = make_update(1)
        payload["message_reaction"] = {"chat": {"id": 1}}
        update = Update.model_validate(payload)
        assert update.to_dict()["message_reaction"] == {"chat": {"id": 1}}

    def test_effective_message_and_sender(self):
        callback = Update.model_validate(
            {
                "update_id": 2,
                "callback_query": {
                    "id": "cb",
                    "from": make_user(7, "bob"),
                    "message": make_message(3, chat_id=99),
                    "chat_instance": "x",
                    "data": "yes",
                },
            }
        )
        assert callback.sent_from().id == 7
        assert callback.effective_message().message_id == 3
        assert callback.from_chat().id == 99

    def test_empty_update(self):
        update = Update(update_id=5)
        assert update.effective_message() is None
        assert update.sent_from() is None
        assert update.from_chat() is None


class TestMessage:
    """Tests for message helpers."""

    def test_command_parsing(self):
        payload = make_message(text="/start@my_bot deep link")
        payload["entities"] = [{"type": "bot_command", "offset": 0, "length": 13}]
        message = Message.model_validate(payload)
        assert message.is_command()
        assert message.command_with_at() == "start@my_bot"
        assert message.command() == "start"
        assert message.command_arguments() == "deep link"

    def test_plain_text_is_not_a_command(self):
        message = Message.model_validate(make_message(text="hello"))
        assert not message.is_command()
        assert message.command() == ""
        assert message.command_arguments() == ""


class TestMisc:
    """Tests for small helpers on other models."""

    def test_user_display_name(self):
        assert User(id=1, first_name="Ann", username="ann").display_name() == "@ann"
        assert User(id=1, first_name="Ann", last_name="Lee").display_name() == "Ann Lee"

    def test_webhook_info_is_set(self):
        assert not WebhookInfo().is_set()
        assert WebhookInfo(url="https://example.com").is_set()

    def test_error_envelope(self):
        response = APIResponse.model_validate_json(
            '{"ok": false, "error_code": 429, "description": "Too Many Requests",'
            ' "parameters": {"retry_after": 5}}'
        )
        assert not response.ok
        assert response.parameters.retry_after == 5
