"""Synchronous Telegram Bot API client.

This module implements the request/response side of the API:
- Form-urlencoded requests for plain calls
- Streamed multipart requests when files need uploading
- Typed helpers for the common methods
- Long polling and webhook update channels
"""

from __future__ import annotations

from contextlib import ExitStack
from typing import TYPE_CHECKING, Any

import httpx

from .configs import Chattable, GetMyCommandsConfig, UpdateConfig
from .core.config import API_ENDPOINT, BotSettings
from .core.logger import get_logger
from .exceptions import PollerError, TransportError
from .files import RequestFile
from .params import Params
from .polling import UpdatePoller, UpdatesChannel
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

if TYPE_CHECKING:
    from fastapi import FastAPI

    from .webhook import WebhookListener

logger = get_logger("client")


class BotAPI(BotAPIBase):
    """Client for the Telegram Bot API.

    The token is checked with ``getMe`` on construction unless ``validate`` is
    False; the bot's own user is then available as :attr:`self_user`.

    Example:
        ```python
        from telegram_botapi import BotAPI, new_message

        with BotAPI("123:ABC") as bot:
            bot.send(new_message(chat_id, "Hello!"))

            channel = bot.get_updates_chan(UpdateConfig(timeout=60))
            for update in channel:
                ...
        ```
    """

    def __init__(
        self,
        token: str,
        *,
        api_endpoint: str = API_ENDPOINT,
        client: httpx.Client | None = None,
        timeout: float = 90.0,
        debug: bool = False,
        buffer: int = 100,
        validate: bool = True,
    ) -> None:
        """Initialize the client.

        Args:
            token: Bot token issued by @BotFather
            api_endpoint: URL template with ``{token}`` and ``{method}``
            client: Pre-configured httpx client; one is created when omitted
            timeout: Request timeout for the created client
            debug: Log every request and raw response
            buffer: Capacity of update channels
            validate: Call ``getMe`` right away
        """
        super().__init__(token, api_endpoint=api_endpoint, debug=debug, buffer=buffer)
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)
        self._poller: UpdatePoller | None = None
        self.self_user: User | None = None

        if validate:
            self.self_user = self.get_me()
            logger.info("Authorized on account %s", self.self_user.display_name())

    @classmethod
    def from_settings(cls, settings: BotSettings, **kwargs: Any) -> BotAPI:
        """Create a client from loaded settings."""
        kwargs.setdefault("api_endpoint", settings.api_endpoint)
        kwargs.setdefault("timeout", settings.http.timeout)
        kwargs.setdefault("debug", settings.debug)
        kwargs.setdefault("buffer", settings.buffer)
        return cls(settings.token, **kwargs)

    def __enter__(self) -> BotAPI:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Stop polling and close the HTTP client.

        A fetch that is in flight completes and its updates are delivered
        before the connection pool goes away. The wait is bounded by the
        client's read timeout.
        """
        if self._poller is not None:
            if self._poller.is_running:
                self._poller.stop()
            if not self._poller.join(timeout=self._client.timeout.read):
                logger.warning("Update poller still delivering updates; closing the client anyway")
        if self._owns_client:
            self._client.close()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------
    def _post(self, method: str, **kwargs: Any) -> APIResponse:
        """POST to ``method`` and decode the envelope.

        The response is opened as a stream so it is closed on every exit
        path. The body is read whole before decoding, in debug mode and
        otherwise, since pydantic validates JSON from a complete buffer.
        """
        try:
            with self._client.stream("POST", self._url(method), **kwargs) as response:
                raw = response.read()
        except (httpx.HTTPError, OSError) as exc:
            raise TransportError(method, exc) from exc

        return decode_response(method, raw, debug=self.debug)

    def make_request(self, method: str, params: Params | dict[str, str] | None = None) -> APIResponse:
        """Call an API method with a form-urlencoded body.

        Raises:
            TransportError: On connection, timeout or decoding failures.
            TelegramAPIError: If the API reports an error.
        """
        params = Params(params or {})
        self._log_request(method, params)
        return self._post(method, data=dict(params))

    def upload_files(
        self, method: str, params: Params | dict[str, str], files: list[RequestFile]
    ) -> APIResponse:
        """Call an API method with a multipart body.

        Plain fields go first, then every file in order. The body is produced
        while the request is sent, so files are never read into memory whole,
        and every reader is closed afterwards.

        Raises:
            TransportError: On connection, timeout, file or decoding failures.
            TelegramAPIError: If the API reports an error.
        """
        params = Params(params)
        self._log_request(method, params, files)

        with ExitStack() as stack:
            data, uploads = build_multipart(method, params, files, stack)
            return self._post(method, data=data, files=uploads)

    def request(self, config: Chattable) -> APIResponse:
        """Send a configuration object and return the raw envelope.

        Raises:
            EncodingError: Before any I/O, if parameters cannot be built.
            TransportError: On connection, timeout or decoding failures.
            TelegramAPIError: If the API reports an error.
        """
        prepared = prepare_request(config)
        if prepared.files is not None:
            return self.upload_files(prepared.method, prepared.params, prepared.files)
        return self.make_request(prepared.method, prepared.params)

    def send(self, config: Chattable) -> Message:
        """Send a configuration object and decode the resulting message."""
        response = self.request(config)
        return decode_result(config.method(), response, MESSAGE_ADAPTER)

    # ------------------------------------------------------------------
    # Typed methods
    # ------------------------------------------------------------------
    def get_me(self) -> User:
        """Fetch the currently authenticated bot."""
        response = self.make_request("getMe")
        return decode_result("getMe", response, USER_ADAPTER)

    def get_updates(self, config: UpdateConfig) -> list[Update]:
        response = self.request(config)
        return decode_result(config.method(), response, UPDATES_ADAPTER)

    def get_webhook_info(self) -> WebhookInfo:
        """Fetch information about the current webhook, if one is set."""
        response = self.make_request("getWebhookInfo")
        return decode_result("getWebhookInfo", response, WEBHOOK_INFO_ADAPTER)

    def get_my_commands(self, config: GetMyCommandsConfig | None = None) -> list[BotCommand]:
        """Fetch the currently registered commands."""
        config = config or GetMyCommandsConfig()
        response = self.request(config)
        return decode_result(config.method(), response, COMMANDS_ADAPTER)

    def get_file(self, file_id: str) -> File:
        """Fetch download information for a file."""
        response = self.make_request("getFile", {"file_id": file_id})
        return decode_result("getFile", response, FILE_ADAPTER)

    def get_file_direct_url(self, file_id: str) -> str:
        """Return a URL the file can be downloaded from."""
        file = self.get_file(file_id)
        if not file.file_path:
            raise TransportError("getFile", ValueError("file_path missing from response"))
        return build_file_url(self.token, file.file_path)

    # ------------------------------------------------------------------
    # Update delivery
    # ------------------------------------------------------------------
    def get_updates_chan(self, config: UpdateConfig, retry_delay: float = 3.0) -> UpdatesChannel:
        """Start polling in the background and return the update channel.

        Raises:
            PollerError: If this bot is already polling.
        """
        if self._poller is not None and self._poller.is_running:
            raise PollerError("updates are already being received")
        self._poller = UpdatePoller(
            self, config, buffer_size=self.buffer, retry_delay=retry_delay
        )
        return self._poller.start()

    def stop_receiving_updates(self) -> None:
        """Signal the background poller to stop.

        Raises:
            PollerError: If no poller was started or it was already stopped.
        """
        if self._poller is None:
            raise PollerError("updates are not being received")
        if self.debug:
            logger.info("Stopping the update receiver...")
        self._poller.stop()

    def listen_for_webhook(
        self, app: FastAPI, path: str, secret_token: str | None = None
    ) -> WebhookListener:
        """Register a webhook route on ``app`` and return its listener."""
        from .webhook import WebhookListener

        return WebhookListener(app, path, buffer_size=self.buffer, secret_token=secret_token)
