"""Tests for the asyncio client."""

import asyncio
import io

import httpx
import pytest
from factories import TOKEN, api_url, make_message, make_update, make_user, ok
from pytest_httpx import HTTPXMock

from telegram_botapi import AsyncBotAPI
from telegram_botapi.configs import MessageConfig, PhotoConfig, UpdateConfig
from telegram_botapi.exceptions import PollerError, TelegramAPIError, TransportError
from telegram_botapi.files import FileReader
from telegram_botapi.types import Update


@pytest.mark.anyio
async def test_context_manager_validates(httpx_mock: HTTPXMock):
    httpx_mock.add_response(url=api_url("getMe"), json=ok(make_user(5, "async_bot", True)))

    async with AsyncBotAPI(TOKEN) as bot:
        assert bot.self_user.username == "async_bot"

    assert bot._client.is_closed


@pytest.mark.anyio
async def test_failed_validation_closes_client(httpx_mock: HTTPXMock):
    httpx_mock.add_response(
        url=api_url("getMe"),
        status_code=401,
        json={"ok": False, "error_code": 401, "description": "Unauthorized"},
    )
    bot = AsyncBotAPI(TOKEN)

    with pytest.raises(TelegramAPIError):
        async with bot:
            pass

    assert bot._client.is_closed


@pytest.mark.anyio
async def test_send_message(httpx_mock: HTTPXMock):
    httpx_mock.add_response(url=api_url("sendMessage"), json=ok(make_message(3)))

    bot = AsyncBotAPI(TOKEN)
    try:
        message = await bot.send(MessageConfig(chat_id=42, text="hi"))
    finally:
        await bot.aclose()

    assert message.message_id == 3
    assert httpx_mock.get_requests()[0].content == b"chat_id=42&text=hi"


@pytest.mark.anyio
async def test_upload_closes_reader(httpx_mock: HTTPXMock):
    httpx_mock.add_response(url=api_url("sendPhoto"), json=ok(make_message()))
    reader = io.BytesIO(b"PNGDATA")

    bot = AsyncBotAPI(TOKEN)
    try:
        await bot.send(PhotoConfig(chat_id=42, photo=FileReader("a.png", reader)))
    finally:
        await bot.aclose()

    request = httpx_mock.get_requests()[0]
    assert request.headers["content-type"].startswith("multipart/form-data")
    assert b"PNGDATA" in request.content
    assert reader.closed


@pytest.mark.anyio
async def test_transport_error(httpx_mock: HTTPXMock):
    httpx_mock.add_exception(httpx.ConnectError("no route to host"))

    bot = AsyncBotAPI(TOKEN)
    try:
        with pytest.raises(TransportError) as exc_info:
            await bot.get_updates(UpdateConfig())
    finally:
        await bot.aclose()

    assert exc_info.value.method == "getUpdates"


@pytest.mark.anyio
async def test_updates_channel(monkeypatch):
    batches = [[make_update(1), make_update(2)]]

    async def fake_get_updates(config):
        if batches:
            return [Update.model_validate(u) for u in batches.pop(0)]
        await asyncio.sleep(0.01)
        return []

    bot = AsyncBotAPI(TOKEN)
    monkeypatch.setattr(bot, "get_updates", fake_get_updates)
    try:
        channel = bot.get_updates_chan(UpdateConfig(timeout=0), retry_delay=0)
        first = await channel.get(timeout=5)
        second = await channel.get(timeout=5)
        bot.stop_receiving_updates()
        with pytest.raises(PollerError):
            bot.stop_receiving_updates()
        assert await channel.get(timeout=5) is None
    finally:
        await bot.aclose()

    assert [first.update_id, second.update_id] == [1, 2]


@pytest.mark.anyio
async def test_aclose_delivers_fetch_in_flight(httpx_mock: HTTPXMock):
    entered = asyncio.Event()

    async def slow_get_updates(request: httpx.Request) -> httpx.Response:
        entered.set()
        await asyncio.sleep(0.3)
        return httpx.Response(200, json=ok([make_update(1), make_update(2)]))

    httpx_mock.add_callback(slow_get_updates, url=api_url("getUpdates"))

    bot = AsyncBotAPI(TOKEN)
    channel = bot.get_updates_chan(UpdateConfig(timeout=60))
    await asyncio.wait_for(entered.wait(), 5)
    await bot.aclose()

    assert [update.update_id async for update in channel] == [1, 2]
    assert bot._client.is_closed
