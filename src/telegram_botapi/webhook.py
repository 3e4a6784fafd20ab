"""Receiving updates pushed by Telegram to a webhook.

Telegram POSTs one JSON-encoded update per request. This module decodes such
requests, exposes the decoded updates as an :class:`UpdatesChannel`, and can
serve the route on a FastAPI application run by uvicorn.
"""

from __future__ import annotations

import asyncio
import hmac
import threading
from urllib.parse import urlencode

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .configs import Chattable
from .core.config import WebhookServerConfig
from .core.logger import get_logger
from .exceptions import ProtocolMisuseError, WebhookDecodeError
from .polling import UpdatesChannel
from .transport import prepare_request
from .types import Update

logger = get_logger("webhook")

SECRET_TOKEN_HEADER = "X-Telegram-Bot-Api-Secret-Token"

_ROUTE_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


async def handle_update(request: Request) -> Update:
    """Decode a single webhook request into an update.

    Raises:
        ProtocolMisuseError: If the request is not a POST.
        WebhookDecodeError: If the body is not a valid update.
    """
    if request.method != "POST":
        raise ProtocolMisuseError("wrong HTTP method required POST")

    body = await request.body()
    try:
        return Update.model_validate_json(body)
    except ValidationError as exc:
        raise WebhookDecodeError(str(exc)) from exc


def webhook_reply(config: Chattable) -> Response:
    """Answer a webhook request with an API call.

    Telegram executes the method carried in the response body, which saves a
    separate request. Uploads are not possible this way.

    Raises:
        EncodingError: If the parameters cannot be built.
        ProtocolMisuseError: If the configuration needs a file upload.
    """
    prepared = prepare_request(config)
    if prepared.needs_upload:
        raise ProtocolMisuseError("unable to use http response to upload files")

    params = dict(prepared.params)
    params["method"] = prepared.method
    return Response(content=urlencode(params), media_type="application/x-www-form-urlencoded")


class WebhookListener:
    """Webhook route registered on a FastAPI application.

    Decoded updates are pushed into :attr:`updates`. When the channel is full
    the request waits, which makes Telegram slow down its deliveries.

    Non-POST requests and malformed bodies are answered with
    ``400 {"error": "<message>"}``.
    """

    def __init__(
        self,
        app: FastAPI,
        path: str,
        buffer_size: int = 100,
        secret_token: str | None = None,
    ) -> None:
        """Register the route.

        Args:
            app: Application to register the route on
            path: Route path, e.g. ``/telegram/webhook``
            buffer_size: Capacity of the update channel
            secret_token: Expected value of the secret token header, if any
        """
        self.path = path
        self.updates = UpdatesChannel(buffer_size)
        self._secret_token = secret_token
        app.add_api_route(path, self._receive, methods=_ROUTE_METHODS, include_in_schema=False)
        logger.debug("Webhook route registered at %s", path)

    def _verify_secret(self, request: Request) -> bool:
        if not self._secret_token:
            return True
        # Header values arrive decoded as latin-1.
        received = request.headers.get(SECRET_TOKEN_HEADER, "").encode("latin-1")
        return hmac.compare_digest(received, self._secret_token.encode("utf-8"))

    async def _receive(self, request: Request) -> Response:
        if not self._verify_secret(request):
            logger.warning("Webhook request rejected: invalid secret token")
            return JSONResponse({"error": "invalid secret token"}, status_code=403)

        try:
            update = await handle_update(request)
        except (ProtocolMisuseError, WebhookDecodeError) as exc:
            logger.warning("Webhook request rejected: %s", exc)
            return JSONResponse({"error": str(exc)}, status_code=400)

        # put() blocks while the channel is full; keep the event loop free.
        await run_in_threadpool(self.updates.put, update)
        return Response(status_code=200)


class WebhookServer:
    """Serve a webhook listener with uvicorn in a background thread.

    Example:
        ```python
        server = WebhookServer(settings.webhook)
        server.start()
        for update in server.updates:
            ...
        ```
    """

    def __init__(self, config: WebhookServerConfig, buffer_size: int = 100) -> None:
        """Initialize the server.

        Args:
            config: Bind address, route path and secret token
            buffer_size: Capacity of the update channel
        """
        self._config = config
        self.app = FastAPI()
        self._server: uvicorn.Server | None = None
        self._thread: threading.Thread | None = None

        self._create_routes()
        self.listener = WebhookListener(
            self.app,
            config.path,
            buffer_size=buffer_size,
            secret_token=config.secret_token,
        )

    @property
    def updates(self) -> UpdatesChannel:
        return self.listener.updates

    def _create_routes(self) -> None:
        @self.app.get("/healthz")
        async def health() -> dict[str, str]:
            return {"status": "ok"}

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self) -> None:
        if self._thread:
            return

        config = uvicorn.Config(
            self.app,
            host=self._config.host,
            port=self._config.port,
            log_level="info",
        )
        self._server = uvicorn.Server(config)

        def _run() -> None:
            loop = asyncio.new_event_loop()
            asyncio.set_event_loop(loop)
            try:
                server = self._server
                if server is None:
                    logger.error("Webhook server thread started without a uvicorn server instance")
                    return
                loop.run_until_complete(server.serve())
            finally:
                loop.close()

        self._thread = threading.Thread(
            target=_run,
            name="telegram-webhook-server",
            daemon=True,
        )
        self._thread.start()
        logger.info(
            "Webhook server listening on http://%s:%s%s",
            self._config.host,
            self._config.port,
            self._config.path,
        )

    def stop(self) -> None:
        """Stop the server and close the update channel."""
        if self._server:
            self._server.should_exit = True
        if self._thread:
            self._thread.join(timeout=5)
            self._thread = None
        self.updates.close()
        logger.info("Webhook server stopped")

    @property
    def is_running(self) -> bool:
        return bool(self._thread and self._thread.is_alive())
