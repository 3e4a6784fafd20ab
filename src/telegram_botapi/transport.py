"""Request preparation and response decoding shared by the sync and async clients.

This module provides:
- URL building from the endpoint template
- Selection between form-urlencoded and multipart encoding
- Decoding of the ``{"ok": ..., "result": ...}`` envelope into typed errors
"""

from __future__ import annotations

from contextlib import ExitStack
from dataclasses import dataclass
from typing import BinaryIO, TypeVar

from pydantic import TypeAdapter, ValidationError

from .configs import Chattable, Fileable
from .core.config import API_ENDPOINT, FILE_ENDPOINT
from .core.logger import get_logger
from .exceptions import EncodingError, TelegramAPIError, TransportError
from .files import RequestFile, has_files_needing_upload
from .params import Params
from .types import (
    APIResponse,
    BotCommand,
    File,
    Message,
    ResponseParameters,
    Update,
    User,
    WebhookInfo,
)

logger = get_logger("transport")

T = TypeVar("T")

MultipartFiles = list[tuple[str, tuple[str, BinaryIO]]]

USER_ADAPTER = TypeAdapter(User)
MESSAGE_ADAPTER = TypeAdapter(Message)
UPDATES_ADAPTER = TypeAdapter(list[Update])
WEBHOOK_INFO_ADAPTER = TypeAdapter(WebhookInfo)
COMMANDS_ADAPTER = TypeAdapter(list[BotCommand])
FILE_ADAPTER = TypeAdapter(File)


@dataclass
class PreparedRequest:
    """A configuration object turned into wire-ready parts.

    ``files`` is set only when at least one file needs uploading; the request
    then has to go out as multipart.
    """

    method: str
    params: Params
    files: list[RequestFile] | None = None

    @property
    def needs_upload(self) -> bool:
        return self.files is not None


def prepare_request(config: Chattable) -> PreparedRequest:
    """Build the parameters of a configuration object.

    Encoding errors surface here, before any network activity.

    Raises:
        EncodingError: If a structured parameter cannot be serialized.
    """
    method = config.method()
    try:
        params = config.params()
    except EncodingError as exc:
        raise EncodingError(exc.key, exc.cause, method=method) from exc

    if isinstance(config, Fileable):
        files = config.files()

        # Delegate to a multipart upload when anything has to be uploaded.
        if has_files_needing_upload(files):
            return PreparedRequest(method, params, files)

        # Otherwise the file references are plain fields.
        for file in files:
            params[file.name] = file.data.send_data()

    return PreparedRequest(method, params)


def build_multipart(
    method: str, params: Params, files: list[RequestFile], stack: ExitStack
) -> tuple[dict[str, str], MultipartFiles]:
    """Split request parts into plain fields and file parts.

    Every opened reader is registered on ``stack`` so it is closed once the
    request finishes, whatever the outcome.

    Raises:
        TransportError: If a file cannot be opened.
    """
    data: dict[str, str] = dict(params)
    uploads: MultipartFiles = []

    for file in files:
        if file.data.needs_upload():
            try:
                file_name, reader = file.data.upload_data()
            except OSError as exc:
                raise TransportError(method, exc) from exc
            stack.callback(reader.close)
            uploads.append((file.name, (file_name, reader)))
        else:
            data[file.name] = file.data.send_data()

    return data, uploads


def build_url(template: str, token: str, method: str) -> str:
    return template.format(token=token, method=method)


def build_file_url(token: str, file_path: str, template: str = FILE_ENDPOINT) -> str:
    return template.format(token=token, path=file_path)


def decode_response(method: str, raw: bytes, debug: bool = False) -> APIResponse:
    """Decode an API envelope and classify failures.

    Raises:
        TransportError: If the body is not a valid envelope.
        TelegramAPIError: If the envelope reports ``ok: false``.
    """
    if debug:
        logger.debug("Endpoint: %s, response: %s", method, raw.decode("utf-8", errors="replace"))

    try:
        response = APIResponse.model_validate_json(raw)
    except ValidationError as exc:
        raise TransportError(method, exc) from exc

    if not response.ok:
        parameters = response.parameters or ResponseParameters()
        raise TelegramAPIError(
            method,
            code=response.error_code,
            description=response.description,
            retry_after=parameters.retry_after,
            migrate_to_chat_id=parameters.migrate_to_chat_id,
        )

    return response


def decode_result(method: str, response: APIResponse, adapter: TypeAdapter[T]) -> T:
    """Validate the raw ``result`` of a successful response.

    Raises:
        TransportError: If the result does not match the expected type.
    """
    try:
        return adapter.validate_python(response.result)
    except ValidationError as exc:
        raise TransportError(method, exc) from exc


class BotAPIBase:
    """State and helpers common to :class:`BotAPI` and :class:`AsyncBotAPI`."""

    def __init__(
        self,
        token: str,
        *,
        api_endpoint: str = API_ENDPOINT,
        debug: bool = False,
        buffer: int = 100,
    ) -> None:
        if not token:
            raise ValueError("Bot token cannot be empty")
        self.token = token
        self.debug = debug
        self.buffer = buffer
        self._api_endpoint = api_endpoint

    @property
    def api_endpoint(self) -> str:
        return self._api_endpoint

    def set_api_endpoint(self, api_endpoint: str) -> None:
        """Change the API endpoint template used by this instance."""
        self._api_endpoint = api_endpoint

    def _url(self, method: str) -> str:
        return build_url(self._api_endpoint, self.token, method)

    def _log_request(self, method: str, params: Params, files: list[RequestFile] | None = None) -> None:
        if not self.debug:
            return
        if files:
            logger.debug("Endpoint: %s, params: %s, with %d files", method, dict(params), len(files))
        else:
            logger.debug("Endpoint: %s, params: %s", method, dict(params))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(endpoint={self._api_endpoint!r}, debug={self.debug})"
