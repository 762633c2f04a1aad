"""Whole-file container: one header chunk followed by track chunks.

``MidiFile.read`` consumes exactly as many ``MTrk`` chunks as the header
declares.  Chunks with any other identifier that appear before the last
track are skipped by their declared length; anything after the last track
is left unread.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union

from .ascii import to_ascii
from .buffer import ByteBuffer
from .header import Header
from .track import TRACK_CHUNK, Track

logger = logging.getLogger(__name__)


@dataclass
class MidiFile:
    header: Header = field(default_factory=Header)
    tracks: List[Track] = field(default_factory=list)

    @classmethod
    def read(cls, buf: ByteBuffer, *, strict: bool = False) -> "MidiFile":
        header = Header.read(buf, strict=strict)
        tracks: List[Track] = []

        while len(tracks) != header.track_count:
            chunk_id = to_ascii(buf.peek_uint8(4))
            if chunk_id == TRACK_CHUNK:
                tracks.append(Track.read(buf, strict=strict))
                continue
            offset = buf.cursor
            buf.skip(4)
            length = buf.read_uint32()
            logger.debug("skipping %r chunk at 0x%X (%d bytes)", chunk_id, offset, length)
            buf.skip(length)

        return cls(header=header, tracks=tracks)

    def write_header(self, buf: ByteBuffer) -> None:
        """Write only the header chunk, with the track count synced to ``tracks``."""
        self.header.track_count = len(self.tracks)
        self.header.write(buf)

    def write_track(self, buf: ByteBuffer, index: int) -> None:
        """Write only track ``index``; call after ``write_header``."""
        self.tracks[index].write(buf)

    def write(self, buf: ByteBuffer) -> None:
        self.write_header(buf)
        for index in range(len(self.tracks)):
            self.write_track(buf, index)

    @classmethod
    def from_bytes(cls, data: bytes, *, strict: bool = False) -> "MidiFile":
        return cls.read(ByteBuffer(data), strict=strict)

    def to_bytes(self) -> bytes:
        buf = ByteBuffer()
        self.write(buf)
        return buf.finalize()

    @classmethod
    def load(cls, path: Union[str, Path], *, strict: bool = False) -> "MidiFile":
        return cls.from_bytes(Path(path).read_bytes(), strict=strict)

    def save(self, path: Union[str, Path]) -> None:
        Path(path).write_bytes(self.to_bytes())
