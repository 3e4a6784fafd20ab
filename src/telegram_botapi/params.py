"""Request parameter building.

Every configuration object serializes itself into a :class:`Params` mapping
of field name to string value. The helpers encode the API's conventions:
optional scalars are omitted at their zero value and structured values
(keyboards, entity lists, command scopes) travel as JSON text.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from .exceptions import EncodingError


def _jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, Mapping):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def _format_float(value: float) -> str:
    return repr(float(value))


class Params(dict[str, str]):
    """Mapping of request field names to their string values."""

    def add_required(self, key: str, value: Any) -> None:
        """Set a field unconditionally."""
        if isinstance(value, bool):
            self[key] = "true" if value else "false"
        elif isinstance(value, float):
            self[key] = _format_float(value)
        else:
            self[key] = str(value)

    def add_non_empty(self, key: str, value: str | None) -> None:
        """Set a field only when the string is non-empty."""
        if value:
            self[key] = value

    def add_non_zero(self, key: str, value: int | None) -> None:
        """Set a field only when the integer is non-zero."""
        if value:
            self[key] = str(value)

    def add_non_zero_float(self, key: str, value: float | None) -> None:
        """Set a field only when the float is non-zero."""
        if value:
            self[key] = _format_float(value)

    def add_bool(self, key: str, value: bool | None) -> None:
        """Set a field to ``"true"`` only when the flag is set."""
        if value:
            self[key] = "true"

    def add_first_valid(self, key: str, *values: Any) -> None:
        """Set the first value that is a non-zero int or a non-empty string.

        Used for ``chat_id``: the numeric identifier wins over a ``@channel``
        handle, and the handle is omitted when both are present.
        """
        for value in values:
            if isinstance(value, bool) or value is None:
                continue
            if isinstance(value, int) and value != 0:
                self[key] = str(value)
                return
            if isinstance(value, str) and value:
                self[key] = value
                return

    def add_interface(self, key: str, value: Any) -> None:
        """Set a structured field as compact JSON text.

        ``None`` and empty containers are skipped.

        Raises:
            EncodingError: If the value cannot be serialized.
        """
        if value is None:
            return
        if isinstance(value, (list, tuple, dict)) and not value:
            return
        self.add_json(key, value)

    def add_json(self, key: str, value: Any) -> None:
        """Set a structured field as compact JSON text, even when empty.

        Raises:
            EncodingError: If the value cannot be serialized.
        """
        try:
            self[key] = json.dumps(_jsonable(value), separators=(",", ":"), ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise EncodingError(key, exc) from exc
