"""The ``MThd`` header chunk.

Layout (big-endian)::

    "MThd"  u32 length  u16 format  u16 track_count  u16 division

Division bit 15 selects the timing mode.  Clear: the low 15 bits are
ticks per quarter note.  Set: the high byte is a negative frame rate in
two's complement (-24, -25, -29, -30) and the low byte is ticks per frame.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Union

from .ascii import from_ascii, to_ascii
from .buffer import ByteBuffer
from .errors import HeaderLengthError, InvalidDivision, UnexpectedIdentifier

logger = logging.getLogger(__name__)

HEADER_CHUNK = "MThd"
HEADER_LENGTH = 6

SINGLE_TRACK = 0
MULTI_TRACK = 1
MULTI_SONG = 2


@dataclass(frozen=True)
class TicksPerQuarterNote:
    ticks: int = 96

    def pack(self) -> int:
        if not 0 <= self.ticks <= 0x7FFF:
            raise InvalidDivision(
                f"ticks per quarter note must fit in 15 bits, got {self.ticks}"
            )
        return self.ticks


@dataclass(frozen=True)
class SMPTEFrames:
    frames_per_second: int
    ticks_per_frame: int

    def pack(self) -> int:
        if not 1 <= self.frames_per_second <= 0x80:
            raise InvalidDivision(
                f"SMPTE frame rate must be 1-128, got {self.frames_per_second}"
            )
        if not 0 <= self.ticks_per_frame <= 0xFF:
            raise InvalidDivision(
                f"ticks per frame must fit in 8 bits, got {self.ticks_per_frame}"
            )
        frames_byte = (0x100 - self.frames_per_second) & 0xFF
        return (frames_byte << 8) | self.ticks_per_frame


Division = Union[TicksPerQuarterNote, SMPTEFrames]


def unpack_division(word: int) -> Division:
    if not word & 0x8000:
        return TicksPerQuarterNote(word & 0x7FFF)
    high = (word >> 8) & 0xFF
    return SMPTEFrames(frames_per_second=0xFF - high + 1, ticks_per_frame=word & 0xFF)


@dataclass
class Header:
    identifier: str = HEADER_CHUNK
    length: int = HEADER_LENGTH  # as declared on read; reset to 6 by write
    format: int = MULTI_TRACK
    track_count: int = 1
    division: Division = field(default_factory=TicksPerQuarterNote)

    @classmethod
    def read(cls, buf: ByteBuffer, *, strict: bool = False) -> "Header":
        start = buf.cursor
        identifier = to_ascii(buf.read_bytes(4))
        if identifier != HEADER_CHUNK:
            if strict:
                raise UnexpectedIdentifier(
                    f"expected {HEADER_CHUNK!r} at 0x{start:X}, got {identifier!r}"
                )
            logger.warning("header chunk at 0x%X has identifier %r", start, identifier)
        length = buf.read_uint32()
        if length < HEADER_LENGTH:
            raise HeaderLengthError(
                f"header length {length} is shorter than {HEADER_LENGTH}"
            )
        fmt = buf.read_uint16()
        track_count = buf.read_uint16()
        division = unpack_division(buf.read_uint16())

        # Vendor extensions after the fixed body are skipped, never decoded.
        buf.skip(length - HEADER_LENGTH)

        return cls(
            identifier=identifier,
            length=length,
            format=fmt,
            track_count=track_count,
            division=division,
        )

    def write(self, buf: ByteBuffer) -> None:
        identifier = from_ascii(self.identifier)
        if len(identifier) != 4:
            raise ValueError(f"chunk identifier must be 4 bytes: {self.identifier!r}")
        if not 0 <= self.format <= 0xFFFF:
            raise ValueError(f"format out of range: {self.format}")
        if not 0 <= self.track_count <= 0xFFFF:
            raise ValueError(f"track count out of range: {self.track_count}")
        if not isinstance(self.division, (TicksPerQuarterNote, SMPTEFrames)):
            raise InvalidDivision(f"unsupported division: {self.division!r}")
        division = self.division.pack()

        buf.write_bytes(identifier)
        buf.write_uint32(HEADER_LENGTH)
        buf.write_uint16(self.format)
        buf.write_uint16(self.track_count)
        buf.write_uint16(division)
        self.length = HEADER_LENGTH

    @classmethod
    def from_bytes(cls, data: bytes, *, strict: bool = False) -> "Header":
        return cls.read(ByteBuffer(data), strict=strict)

    def to_bytes(self) -> bytes:
        buf = ByteBuffer()
        self.write(buf)
        return buf.finalize()
