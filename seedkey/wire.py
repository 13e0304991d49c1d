"""SSH wire primitives (RFC 4251 section 5): uint32 and length-prefixed strings."""

from __future__ import annotations

import struct

from .errors import KeyFormatError

_UINT32 = struct.Struct(">I")


def uint32(value: int) -> bytes:
    return _UINT32.pack(value)


def string(data: bytes | str) -> bytes:
    """Length-prefixed byte string. ``str`` is encoded as UTF-8."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return _UINT32.pack(len(data)) + data


class WireReader:
    """Sequential reader over an SSH wire buffer.

    Running off the end raises KeyFormatError instead of returning short data.
    """

    def __init__(self, data: bytes) -> None:
        self._data = memoryview(bytes(data))
        self._pos = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def at_end(self) -> bool:
        return self.remaining == 0

    def read(self, n: int) -> bytes:
        if n < 0 or n > self.remaining:
            raise KeyFormatError(
                f"Truncated key data: wanted {n} bytes at offset {self._pos}, "
                f"{self.remaining} left"
            )
        chunk = self._data[self._pos:self._pos + n].tobytes()
        self._pos += n
        return chunk

    def read_uint32(self) -> int:
        return _UINT32.unpack(self.read(4))[0]

    def read_string(self) -> bytes:
        return self.read(self.read_uint32())

    def read_text(self) -> str:
        raw = self.read_string()
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise KeyFormatError(f"Invalid UTF-8 in key field: {exc}") from exc

    def rest(self) -> bytes:
        return self.read(self.remaining)
