"""Asynchronous Telegram Bot API client built on ``httpx.AsyncClient``."""

from __future__ import annotations

from contextlib import ExitStack
from typing import Any

import httpx

from .configs import Chattable, GetMyCommandsConfig, UpdateConfig
from .core.config import API_ENDPOINT, BotSettings
from .core.logger import get_logger
from .exceptions import PollerError, TransportError
from .files import RequestFile
from .params import Params
from .polling import AsyncUpdatePoller, AsyncUpdatesChannel
from .transport import (
    COMMANDS_ADAPTER,
    FILE_ADAPTER,
    MESSAGE_ADAPTER,
    UPDATES_ADAPTER,
    USER_ADAPTER,
    WEBHOOK_INFO_ADAPTER,
    BotAPIBase,
    build_file_url,
    build_multipart,
    decode_response,
    decode_result,
    prepare_request,
)
from .types import APIResponse, BotCommand, File, Message, Update, User, WebhookInfo

logger = get_logger("async_client")


class AsyncBotAPI(BotAPIBase):
    """Async client for the Telegram Bot API.

    Construction does no I/O; call :meth:`validate` (or use ``async with``)
    to check the token and fill :attr:`self_user`.

    Example:
        ```python
        async with AsyncBotAPI("123:ABC") as bot:
            await bot.send(new_message(chat_id, "Hello!"))
        ```
    """

    def __init__(
        self,
        token: str,
        *,
        api_endpoint: str = API_ENDPOINT,
        client: httpx.AsyncClient | None = None,
        timeout: float = 90.0,
        debug: bool = False,
        buffer: int = 100,
    ) -> None:
        super().__init__(token, api_endpoint=api_endpoint, debug=debug, buffer=buffer)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._poller: AsyncUpdatePoller | None = None
        self.self_user: User | None = None

    @classmethod
    def from_settings(cls, settings: BotSettings, **kwargs: Any) -> AsyncBotAPI:
        """Create a client from loaded settings."""
        kwargs.setdefault("api_endpoint", settings.api_endpoint)
        kwargs.setdefault("timeout", settings.http.timeout)
        kwargs.setdefault("debug", settings.debug)
        kwargs.setdefault("buffer", settings.buffer)
        return cls(settings.token, **kwargs)

    async def validate(self) -> User:
        """Check the token with ``getMe`` and remember the bot's user."""
        self.self_user = await self.get_me()
        logger.info("Authorized on account %s", self.self_user.display_name())
        return self.self_user

    async def __aenter__(self) -> AsyncBotAPI:
        try:
            await self.validate()
        except BaseException:
            await self.aclose()
            raise
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Stop polling and close the HTTP client.

        A fetch that is in flight completes before the client closes; the
        wait is bounded by the client's read timeout.
        """
        try:
            if self._poller is not None:
                if self._poller.is_running:
                    self._poller.stop()
                if not await self._poller.join(timeout=self._client.timeout.read):
                    logger.warning(
                        "Update poller still delivering updates; closing the client anyway"
                    )
        finally:
            if self._owns_client:
                await self._client.aclose()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------
    async def _post(self, method: str, **kwargs: Any) -> APIResponse:
        """POST to ``method`` and decode the envelope.

        The response is opened as a stream so it is closed on every exit
        path. The body is read whole before decoding, in debug mode and
        otherwise, since pydantic validates JSON from a complete buffer.
        """
        try:
            async with self._client.stream("POST", self._url(method), **kwargs) as response:
                raw = await response.aread()
        except (httpx.HTTPError, OSError) as exc:
            raise TransportError(method, exc) from exc

        return decode_response(method, raw, debug=self.debug)

    async def make_request(
        self, method: str, params: Params | dict[str, str] | None = None
    ) -> APIResponse:
        """Call an API method with a form-urlencoded body."""
        params = Params(params or {})
        self._log_request(method, params)
        return await self._post(method, data=dict(params))

    async def upload_files(
        self, method: str, params: Params | dict[str, str], files: list[RequestFile]
    ) -> APIResponse:
        """Call an API method with a multipart body; readers are always closed."""
        params = Params(params)
        self._log_request(method, params, files)

        with ExitStack() as stack:
            data, uploads = build_multipart(method, params, files, stack)
            return await self._post(method, data=data, files=uploads)

    async def request(self, config: Chattable) -> APIResponse:
        prepared = prepare_request(config)
        if prepared.files is not None:
            return await self.upload_files(prepared.method, prepared.params, prepared.files)
        return await self.make_request(prepared.method, prepared.params)

    async def send(self, config: Chattable) -> Message:
        response = await self.request(config)
        return decode_result(config.method(), response, MESSAGE_ADAPTER)

    # ------------------------------------------------------------------
    # Typed methods
    # ------------------------------------------------------------------
    async def get_me(self) -> User:
        response = await self.make_request("getMe")
        return decode_result("getMe", response, USER_ADAPTER)

    async def get_updates(self, config: UpdateConfig) -> list[Update]:
        response = await self.request(config)
        return decode_result(config.method(), response, UPDATES_ADAPTER)

    async def get_webhook_info(self) -> WebhookInfo:
        response = await self.make_request("getWebhookInfo")
        return decode_result("getWebhookInfo", response, WEBHOOK_INFO_ADAPTER)

    async def get_my_commands(
        self, config: GetMyCommandsConfig | None = None
    ) -> list[BotCommand]:
        config = config or GetMyCommandsConfig()
        response = await self.request(config)
        return decode_result(config.method(), response, COMMANDS_ADAPTER)

    async def get_file(self, file_id: str) -> File:
        response = await self.make_request("getFile", {"file_id": file_id})
        return decode_result("getFile", response, FILE_ADAPTER)

    async def get_file_direct_url(self, file_id: str) -> str:
        file = await self.get_file(file_id)
        if not file.file_path:
            raise TransportError("getFile", ValueError("file_path missing from response"))
        return build_file_url(self.token, file.file_path)

    # ------------------------------------------------------------------
    # Update delivery
    # ------------------------------------------------------------------
    def get_updates_chan(
        self, config: UpdateConfig, retry_delay: float = 3.0
    ) -> AsyncUpdatesChannel:
        """Start polling on the running loop and return the update channel.

        Raises:
            PollerError: If this bot is already polling.
        """
        if self._poller is not None and self._poller.is_running:
            raise PollerError("updates are already being received")
        self._poller = AsyncUpdatePoller(
            self, config, buffer_size=self.buffer, retry_delay=retry_delay
        )
        return self._poller.start()

    def stop_receiving_updates(self) -> None:
        """Signal the polling task to stop.

        Raises:
            PollerError: If no poller was started or it was already stopped.
        """
        if self._poller is None:
            raise PollerError("updates are not being received")
        if self.debug:
            logger.info("Stopping the update receiver...")
        self._poller.stop()
