"""The ``MTrk`` track chunk: a length-prefixed sequence of events."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List

from .ascii import from_ascii, to_ascii
from .buffer import ByteBuffer
from .errors import TrackLengthMismatch, TruncatedInput, UnexpectedIdentifier
from .messages import (
    END_OF_TRACK,
    TRACK_NAME,
    Message,
    MetaMessage,
    RunningStatus,
    read_message,
    write_message,
)

logger = logging.getLogger(__name__)

TRACK_CHUNK = "MTrk"


def read_events(data: bytes) -> List[Message]:
    """Decode a complete event stream (a track chunk body).

    Running status starts empty.  Every event must end inside ``data``;
    one that needs bytes past the end means the declared chunk length
    disagrees with the events it frames.
    """
    buf = ByteBuffer(data)
    running = RunningStatus()
    messages: List[Message] = []
    while buf.remaining:
        start = buf.cursor
        try:
            messages.append(read_message(buf, running))
        except TruncatedInput as exc:
            raise TrackLengthMismatch(
                f"event at body offset 0x{start:X} overruns the declared "
                f"track length of {len(data)} bytes ({exc})"
            ) from exc
    return messages


@dataclass
class Track:
    identifier: str = TRACK_CHUNK
    length: int = 0  # event-stream size, refreshed on every read and write
    messages: List[Message] = field(default_factory=list)

    @classmethod
    def read(cls, buf: ByteBuffer, *, strict: bool = False) -> "Track":
        start = buf.cursor
        identifier = to_ascii(buf.read_bytes(4))
        if identifier != TRACK_CHUNK:
            if strict:
                raise UnexpectedIdentifier(
                    f"expected {TRACK_CHUNK!r} at 0x{start:X}, got {identifier!r}"
                )
            logger.warning("track chunk at 0x%X has identifier %r", start, identifier)
        length = buf.read_uint32()
        body = buf.read_bytes(length)
        return cls(identifier=identifier, length=length, messages=read_events(body))

    def write(self, buf: ByteBuffer) -> None:
        identifier = from_ascii(self.identifier)
        if len(identifier) != 4:
            raise ValueError(f"chunk identifier must be 4 bytes: {self.identifier!r}")
        # A message that fails to encode leaves buf untouched.
        body = ByteBuffer()
        for message in self.messages:
            write_message(body, message)
        events = body.finalize()
        if len(events) > 0xFFFF_FFFF:
            raise ValueError(f"track events exceed a 32-bit chunk length ({len(events)} bytes)")

        buf.write_bytes(identifier)
        buf.write_uint32(len(events))
        buf.write_bytes(events)
        self.length = len(events)

    @classmethod
    def from_bytes(cls, data: bytes, *, strict: bool = False) -> "Track":
        return cls.read(ByteBuffer(data), strict=strict)

    def to_bytes(self) -> bytes:
        buf = ByteBuffer()
        self.write(buf)
        return buf.finalize()

    def append(self, message: Message) -> None:
        self.messages.append(message)

    def extend(self, messages: Iterable[Message]) -> None:
        self.messages.extend(messages)

    @property
    def name(self) -> str | None:
        """Text of the first track-name meta event, if any."""
        for message in self.messages:
            if isinstance(message, MetaMessage) and message.subtype == TRACK_NAME:
                return message.text
        return None

    @property
    def has_end_of_track(self) -> bool:
        if not self.messages:
            return False
        last = self.messages[-1]
        return isinstance(last, MetaMessage) and last.subtype == END_OF_TRACK

    def total_ticks(self) -> int:
        return sum(message.delta_time for message in self.messages)
