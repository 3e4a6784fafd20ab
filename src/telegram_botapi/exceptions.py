"""Exceptions raised by the Telegram Bot API client."""

from __future__ import annotations


class BotAPIError(Exception):
    """Base exception for all client errors."""

    pass


class EncodingError(BotAPIError):
    """Raised when a structured parameter cannot be serialized.

    Always raised while building parameters, before any network I/O.
    """

    def __init__(self, key: str, cause: Exception, method: str = "") -> None:
        """Initialize the exception.

        Args:
            key: Parameter name that failed to serialize
            cause: Underlying serialization error
            method: API method the parameter belongs to, once known
        """
        self.key = key
        self.cause = cause
        self.method = method
        message = f"can't encode parameter {key!r}: {cause}"
        super().__init__(f"{method}: {message}" if method else message)


class TransportError(BotAPIError):
    """Raised on connection, timeout or response decoding failures."""

    def __init__(self, method: str, cause: Exception) -> None:
        """Initialize the exception.

        Args:
            method: API method that was being called
            cause: Underlying httpx or decoding error
        """
        self.method = method
        self.cause = cause
        super().__init__(f"{method}: can't do a request: {cause}")


class TelegramAPIError(BotAPIError):
    """Raised when the API answers with ``ok: false``."""

    def __init__(
        self,
        method: str,
        code: int,
        description: str,
        retry_after: int | None = None,
        migrate_to_chat_id: int | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            method: API method that was called
            code: Remote error code
            description: Human-readable remote description
            retry_after: Seconds to wait before repeating the request (flood control)
            migrate_to_chat_id: New supergroup identifier when the group migrated
        """
        self.method = method
        self.code = code
        self.description = description
        self.retry_after = retry_after
        self.migrate_to_chat_id = migrate_to_chat_id
        super().__init__(f"{method}: {description} (code {code})")


class ProtocolMisuseError(BotAPIError):
    """Raised when an API is used through a path that cannot serve it."""

    pass


class WebhookDecodeError(BotAPIError):
    """Raised when an inbound webhook body cannot be decoded into an update."""

    pass


class PollerError(BotAPIError):
    """Raised on invalid update poller lifecycle transitions."""

    pass
