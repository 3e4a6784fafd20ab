"""Builders for API payloads used across the tests."""

from __future__ import annotations

from typing import Any

TOKEN = "123456:TEST-TOKEN"
BASE_URL = f"https://api.telegram.org/bot{TOKEN}"


def api_url(method: str) -> str:
    """URL of an API method for the test token."""
    return f"{BASE_URL}/{method}"


def ok(result: Any) -> dict[str, Any]:
    """A successful API envelope."""
    return {"ok": True, "result": result}


def make_user(user_id: int = 1, username: str = "alice", is_bot: bool = False) -> dict[str, Any]:
    return {"id": user_id, "is_bot": is_bot, "first_name": username.title(), "username": username}


def make_message(message_id: int = 1, chat_id: int = 42, text: str = "hi") -> dict[str, Any]:
    return {
        "message_id": message_id,
        "from": make_user(),
        "date": 1700000000,
        "chat": {"id": chat_id, "type": "private"},
        "text": text,
    }


def make_update(update_id: int, text: str = "hi") -> dict[str, Any]:
    return {"update_id": update_id, "message": make_message(message_id=update_id, text=text)}
