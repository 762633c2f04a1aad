from __future__ import annotations

import struct
from typing import Union

from .errors import TruncatedInput


class ByteBuffer:
    """Big-endian byte buffer with a movable cursor.

    Reads consume from ``cursor``.  Writes overwrite in place while the
    cursor is inside the written extent and grow the backing store past it,
    so a length field can be reserved, filled in later, and the cursor
    moved back to the end.
    """

    def __init__(self, data: bytes | bytearray = b"") -> None:
        self._data = bytearray(data)
        self._cursor = 0
        self._size = len(self._data)

    @property
    def cursor(self) -> int:
        return self._cursor

    @cursor.setter
    def cursor(self, value: int) -> None:
        if value < 0:
            raise ValueError(f"cursor cannot be negative ({value})")
        self._cursor = value

    @property
    def size(self) -> int:
        """Number of valid bytes (read source length or write extent)."""
        return self._size

    @property
    def remaining(self) -> int:
        return max(0, self._size - self._cursor)

    def __len__(self) -> int:
        return self._size

    # -- reading -----------------------------------------------------------

    def _take(self, count: int) -> bytes:
        if count < 0:
            raise ValueError(f"cannot read a negative byte count ({count})")
        end = self._cursor + count
        if end > self._size:
            raise TruncatedInput(
                f"need {count} bytes at 0x{self._cursor:X}, "
                f"only {self.remaining} remain"
            )
        chunk = bytes(self._data[self._cursor : end])
        self._cursor = end
        return chunk

    def read_uint8(self, count: int = 1) -> Union[int, bytes]:
        """Read one byte as an int, or ``count`` bytes as ``bytes``."""
        if count == 1:
            return self._take(1)[0]
        return self._take(count)

    def read_bytes(self, count: int) -> bytes:
        return self._take(count)

    def read_uint16(self) -> int:
        return struct.unpack(">H", self._take(2))[0]

    def read_uint32(self) -> int:
        return struct.unpack(">I", self._take(4))[0]

    def peek_uint8(self, count: int = 1) -> bytes:
        """Return the next ``count`` bytes without moving the cursor."""
        start = self._cursor
        try:
            return self._take(count)
        finally:
            self._cursor = start

    def skip(self, count: int) -> None:
        if count < 0:
            raise ValueError(f"cannot skip a negative byte count ({count})")
        if self._cursor + count > self._size:
            raise TruncatedInput(
                f"cannot skip {count} bytes at 0x{self._cursor:X}, "
                f"only {self.remaining} remain"
            )
        self._cursor += count

    # -- writing -----------------------------------------------------------

    def _put(self, chunk: bytes) -> None:
        end = self._cursor + len(chunk)
        if end > len(self._data):
            self._data.extend(b"\x00" * (end - len(self._data)))
        self._data[self._cursor : end] = chunk
        self._cursor = end
        self._size = max(self._size, end)

    def write_uint8(self, value: Union[int, bytes, bytearray]) -> None:
        """Write a single byte, or every byte of a byte sequence."""
        if isinstance(value, int):
            if not 0 <= value <= 0xFF:
                raise ValueError(f"byte out of range: {value}")
            self._put(bytes((value,)))
        else:
            self._put(bytes(value))

    def write_bytes(self, data: bytes | bytearray) -> None:
        self._put(bytes(data))

    def write_uint16(self, value: int) -> None:
        if not 0 <= value <= 0xFFFF:
            raise ValueError(f"u16 out of range: {value}")
        self._put(struct.pack(">H", value))

    def write_uint32(self, value: int) -> None:
        if not 0 <= value <= 0xFFFF_FFFF:
            raise ValueError(f"u32 out of range: {value}")
        self._put(struct.pack(">I", value))

    def finalize(self) -> bytes:
        """Trim the backing store to the written extent and return it."""
        del self._data[self._size :]
        return bytes(self._data)
