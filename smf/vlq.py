"""MIDI variable-length quantities.

Seven bits per byte, most-significant group first; every byte except the
last has its high bit set.  SMF caps values at four bytes (0x0FFFFFFF) but
longer inputs are accepted on read.
"""

from __future__ import annotations

from typing import Tuple

from .buffer import ByteBuffer


def read_vlq(buf: ByteBuffer) -> int:
    value = 0
    while True:
        byte = buf.read_uint8()
        value = (value << 7) | (byte & 0x7F)
        if not byte & 0x80:
            return value


def encode_vlq(value: int) -> bytes:
    if value < 0:
        raise ValueError(f"VLQ value must be non-negative, got {value}")
    groups = [value & 0x7F]
    value >>= 7
    while value:
        groups.append(0x80 | (value & 0x7F))
        value >>= 7
    return bytes(reversed(groups))


def write_vlq(buf: ByteBuffer, value: int) -> None:
    buf.write_bytes(encode_vlq(value))


def decode_vlq(data: bytes) -> Tuple[int, int]:
    """Decode a VLQ at the start of ``data``; return ``(value, size)``."""
    buf = ByteBuffer(data)
    value = read_vlq(buf)
    return value, buf.cursor
