"""File references attached to requests.

A file either needs uploading (raw bytes, an open stream, a local path) and
goes into a multipart body, or it is an identifier the API already knows (a
``file_id``, a URL, an ``attach://`` reference) and travels as a plain field.
"""

from __future__ import annotations

import io
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Protocol, runtime_checkable


@runtime_checkable
class RequestFileData(Protocol):
    """Data of a file associated with a request field."""

    def needs_upload(self) -> bool:
        """Whether the file has to be sent as a multipart part."""
        ...

    def upload_data(self) -> tuple[str, BinaryIO]:
        """Return the file name and a reader. Only valid when uploading."""
        ...

    def send_data(self) -> str:
        """Return the field value. Only valid when not uploading."""
        ...


@dataclass(frozen=True)
class FileBytes:
    """In-memory file contents."""

    name: str
    data: bytes

    def needs_upload(self) -> bool:
        return True

    def upload_data(self) -> tuple[str, BinaryIO]:
        return self.name, io.BytesIO(self.data)

    def send_data(self) -> str:
        raise ValueError("FileBytes must be uploaded")


@dataclass(frozen=True)
class FileReader:
    """An already opened binary stream. Closed by the client after sending."""

    name: str
    reader: BinaryIO

    def needs_upload(self) -> bool:
        return True

    def upload_data(self) -> tuple[str, BinaryIO]:
        return self.name, self.reader

    def send_data(self) -> str:
        raise ValueError("FileReader must be uploaded")


@dataclass(frozen=True)
class FilePath:
    """A local file, opened only when the request body is produced."""

    path: str | Path

    def needs_upload(self) -> bool:
        return True

    def upload_data(self) -> tuple[str, BinaryIO]:
        path = Path(self.path)
        return path.name, open(path, "rb")  # noqa: SIM115 - closed by the client

    def send_data(self) -> str:
        raise ValueError("FilePath must be uploaded")


@dataclass(frozen=True)
class FileURL:
    """A URL the API downloads itself."""

    url: str

    def needs_upload(self) -> bool:
        return False

    def upload_data(self) -> tuple[str, BinaryIO]:
        raise ValueError("FileURL cannot be uploaded")

    def send_data(self) -> str:
        return self.url


@dataclass(frozen=True)
class FileID:
    """A file already stored on the API servers."""

    file_id: str

    def needs_upload(self) -> bool:
        return False

    def upload_data(self) -> tuple[str, BinaryIO]:
        raise ValueError("FileID cannot be uploaded")

    def send_data(self) -> str:
        return self.file_id


@dataclass(frozen=True)
class FileAttach:
    """Reference to another part of the same multipart request."""

    name: str

    def needs_upload(self) -> bool:
        return False

    def upload_data(self) -> tuple[str, BinaryIO]:
        raise ValueError("FileAttach cannot be uploaded")

    def send_data(self) -> str:
        if self.name.startswith("attach://"):
            return self.name
        return f"attach://{self.name}"


@dataclass(frozen=True)
class RequestFile:
    """A file associated with a request field name."""

    name: str
    data: RequestFileData


def has_files_needing_upload(files: Iterable[RequestFile]) -> bool:
    """Return True if any of the files has to go into a multipart body."""
    return any(file.data.needs_upload() for file in files)
