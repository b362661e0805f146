"""multipart/form-data body assembly."""

from __future__ import annotations

import uuid

_SEPARATOR = b"\r\n"


class MultipartBody:
    """Append-only accumulator of ``multipart/form-data`` parts.

    Each instance belongs to the request that created it. The boundary must not
    occur inside any part; the default is a random UUID.
    """

    def __init__(self, boundary: str | None = None) -> None:
        self.boundary = boundary or str(uuid.uuid4()).upper()
        self._buffer = bytearray()

    def add_field(self, key: str, value: str) -> None:
        """Append a plain text part."""

        self._append_boundary()
        self._append_text(self._disposition(key))
        self._buffer += _SEPARATOR
        self._buffer += _SEPARATOR
        self._append_text(value)
        self._buffer += _SEPARATOR

    def add_file(self, key: str, file_name: str, mime_type: str, data: bytes) -> None:
        """Append a file part; ``data`` is copied verbatim."""

        self._append_boundary()
        self._append_text(f'{self._disposition(key)}; filename="{file_name}"')
        self._buffer += _SEPARATOR
        self._append_text(f"Content-Type: {mime_type}")
        self._buffer += _SEPARATOR
        self._buffer += _SEPARATOR
        self._buffer += bytes(data)
        self._buffer += _SEPARATOR

    @property
    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self.boundary}"

    def finalize(self) -> bytes:
        """Return the accumulated parts followed by the closing boundary."""

        return bytes(self._buffer) + f"--{self.boundary}--".encode("utf-8")

    def __len__(self) -> int:
        return len(self._buffer)

    def _append_boundary(self) -> None:
        self._append_text(f"--{self.boundary}")
        self._buffer += _SEPARATOR

    def _append_text(self, text: str) -> None:
        self._buffer += text.encode("utf-8")

    @staticmethod
    def _disposition(key: str) -> str:
        return f'Content-Disposition: form-data; name="{key}"'


__all__ = ["MultipartBody"]
