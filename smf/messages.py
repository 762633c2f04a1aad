"""Decode and encode single track events.

Every event starts with a VLQ delta-time followed by a status byte:

  0xFF       : meta event: subtype byte, VLQ length, payload
  0xF0       : SysEx: VLQ length, payload
  0xF7       : SysEx continuation (or escaped bytes): VLQ length, payload
  0x80-0xEF  : channel message: high nibble = subtype, low nibble = channel
  0x00-0x7F  : running status: the previous channel status is reused and
               this byte is the first data byte

Channel data byte counts are implied by the subtype and are never stored
on the wire.  Pitch bend carries two 7-bit bytes (LSB first) that are
exposed as one 14-bit value.

Encoding always writes an explicit status byte, so files that used running
status decode to the same messages but re-encode slightly larger.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .ascii import from_ascii, to_ascii
from .buffer import ByteBuffer
from .errors import UnknownMessageType
from .vlq import read_vlq, write_vlq

META = 0xFF
SYSEX = 0xF0
SYSEX_CONT = 0xF7

# Channel message subtypes (status high nibble)
NOTE_OFF = 0x8
NOTE_ON = 0x9
POLYPHONIC_PRESSURE = 0xA
CONTROLLER = 0xB
PROGRAM_CHANGE = 0xC
CHANNEL_PRESSURE = 0xD
PITCH_BEND = 0xE

# Meta subtypes
SEQUENCE_NUMBER = 0x00
TEXT = 0x01
COPYRIGHT = 0x02
TRACK_NAME = 0x03
INSTRUMENT_NAME = 0x04
LYRIC = 0x05
MARKER = 0x06
CUE_POINT = 0x07
CHANNEL_PREFIX = 0x20
END_OF_TRACK = 0x2F
TEMPO = 0x51
SMPTE_OFFSET = 0x54
TIME_SIGNATURE = 0x58
KEY_SIGNATURE = 0x59
SEQUENCER_SPECIFIC = 0x7F

TEXT_META_TYPES = frozenset(range(TEXT, CUE_POINT + 1))

CHANNEL_DATA_LENGTHS = {
    NOTE_OFF: 2,
    NOTE_ON: 2,
    POLYPHONIC_PRESSURE: 2,
    CONTROLLER: 2,
    PROGRAM_CHANGE: 1,
    CHANNEL_PRESSURE: 1,
    PITCH_BEND: 2,
}

PITCH_BEND_CENTER = 0x2000


@dataclass(frozen=True)
class MetaMessage:
    subtype: int
    payload: bytes = b""
    delta_time: int = 0

    @property
    def text(self) -> str:
        """Payload as text (track names, lyrics, markers...)."""
        return to_ascii(self.payload)

    @classmethod
    def from_text(cls, subtype: int, text: str, delta_time: int = 0) -> "MetaMessage":
        return cls(subtype=subtype, payload=from_ascii(text), delta_time=delta_time)


@dataclass(frozen=True)
class SysExMessage:
    payload: bytes = b""
    delta_time: int = 0


@dataclass(frozen=True)
class SysExContinuation:
    payload: bytes = b""
    delta_time: int = 0


@dataclass(frozen=True)
class ChannelMessage:
    """A voice message.

    ``data`` holds two bytes for note/pressure/controller messages, one for
    program change and channel pressure, and a single 14-bit value for pitch
    bend.
    """

    subtype: int
    channel: int
    data: Tuple[int, ...]
    delta_time: int = 0

    @property
    def status(self) -> int:
        return (self.subtype << 4) | self.channel


Message = Union[MetaMessage, SysExMessage, SysExContinuation, ChannelMessage]


class RunningStatus:
    """Last channel status byte seen while decoding one track."""

    def __init__(self) -> None:
        self.status: Optional[int] = None


# ── decode ──────────────────────────────────────────────────────────


def read_message(buf: ByteBuffer, running: RunningStatus) -> Message:
    """Decode one event at the cursor, updating ``running`` for channel messages."""
    delta_time = read_vlq(buf)
    offset = buf.cursor
    status = buf.read_uint8()

    if status >> 4 == 0xF:
        if status == META:
            subtype = buf.read_uint8()
            payload = buf.read_bytes(read_vlq(buf))
            return MetaMessage(subtype=subtype, payload=payload, delta_time=delta_time)
        if status == SYSEX:
            payload = buf.read_bytes(read_vlq(buf))
            return SysExMessage(payload=payload, delta_time=delta_time)
        if status == SYSEX_CONT:
            payload = buf.read_bytes(read_vlq(buf))
            return SysExContinuation(payload=payload, delta_time=delta_time)
        raise UnknownMessageType(
            f"system status byte 0x{status:02X} at 0x{offset:X} is not valid in a track"
        )

    if not status & 0x80:
        if running.status is None:
            raise UnknownMessageType(
                f"data byte 0x{status:02X} at 0x{offset:X} with no running status"
            )
        status = running.status
        buf.cursor -= 1
    else:
        running.status = status

    subtype = (status >> 4) & 0xF
    channel = status & 0xF

    if subtype == PITCH_BEND:
        lsb = buf.read_uint8()
        msb = buf.read_uint8()
        data: Tuple[int, ...] = (lsb | (msb << 7),)
    elif subtype in CHANNEL_DATA_LENGTHS:
        count = CHANNEL_DATA_LENGTHS[subtype]
        data = tuple(buf.read_uint8() for _ in range(count))
    else:
        # Unreachable for a byte with bit 7 set and high nibble below 0xF.
        raise UnknownMessageType(f"unknown channel status 0x{status:02X} at 0x{offset:X}")

    return ChannelMessage(subtype=subtype, channel=channel, data=data, delta_time=delta_time)


# ── encode ──────────────────────────────────────────────────────────


def _check_data_byte(value: int, what: str) -> None:
    if not 0 <= value <= 0x7F:
        raise ValueError(f"{what} must be 0-127, got {value}")


def _write_channel(buf: ByteBuffer, message: ChannelMessage) -> None:
    if message.subtype not in CHANNEL_DATA_LENGTHS:
        raise ValueError(f"unknown channel subtype 0x{message.subtype:X}")
    if not 0 <= message.channel <= 0xF:
        raise ValueError(f"channel must be 0-15, got {message.channel}")

    if message.subtype == PITCH_BEND:
        if len(message.data) != 1:
            raise ValueError(f"pitch bend takes one 14-bit value, got {message.data!r}")
        value = message.data[0]
        if not 0 <= value <= 0x3FFF:
            raise ValueError(f"pitch bend must be 0-16383, got {value}")
        buf.write_uint8(message.status)
        buf.write_uint8(value & 0x7F)
        buf.write_uint8((value >> 7) & 0x7F)
        return

    expected = CHANNEL_DATA_LENGTHS[message.subtype]
    if len(message.data) != expected:
        raise ValueError(
            f"channel subtype 0x{message.subtype:X} takes {expected} data bytes, "
            f"got {len(message.data)}"
        )
    for value in message.data:
        _check_data_byte(value, "data byte")
    buf.write_uint8(message.status)
    buf.write_bytes(bytes(message.data))


def _encode_into(buf: ByteBuffer, message: Message) -> None:
    write_vlq(buf, message.delta_time)

    if isinstance(message, MetaMessage):
        if not 0 <= message.subtype <= 0xFF:
            raise ValueError(f"meta subtype out of range: {message.subtype}")
        buf.write_uint8(META)
        buf.write_uint8(message.subtype)
        write_vlq(buf, len(message.payload))
        if message.payload:
            buf.write_bytes(message.payload)
    elif isinstance(message, (SysExMessage, SysExContinuation)):
        buf.write_uint8(SYSEX if isinstance(message, SysExMessage) else SYSEX_CONT)
        write_vlq(buf, len(message.payload))
        if message.payload:
            buf.write_bytes(message.payload)
    elif isinstance(message, ChannelMessage):
        _write_channel(buf, message)
    else:
        raise TypeError(f"not a MIDI message: {message!r}")


def encode_message(message: Message) -> bytes:
    buf = ByteBuffer()
    _encode_into(buf, message)
    return buf.finalize()


def write_message(buf: ByteBuffer, message: Message) -> None:
    """Write one event at the cursor; nothing is written if it fails to encode."""
    buf.write_bytes(encode_message(message))


# ── builders ────────────────────────────────────────────────────────


def track_name(name: str, delta_time: int = 0) -> MetaMessage:
    return MetaMessage.from_text(TRACK_NAME, name, delta_time)


def text_event(text: str, delta_time: int = 0) -> MetaMessage:
    return MetaMessage.from_text(TEXT, text, delta_time)


def end_of_track(delta_time: int = 0) -> MetaMessage:
    return MetaMessage(END_OF_TRACK, b"", delta_time)


def tempo(microseconds_per_quarter: int, delta_time: int = 0) -> MetaMessage:
    if not 0 <= microseconds_per_quarter <= 0xFFFFFF:
        raise ValueError(f"tempo must fit in 24 bits, got {microseconds_per_quarter}")
    return MetaMessage(TEMPO, microseconds_per_quarter.to_bytes(3, "big"), delta_time)


def time_signature(
    numerator: int,
    denominator: int,
    clocks_per_click: int = 24,
    thirty_seconds_per_quarter: int = 8,
    delta_time: int = 0,
) -> MetaMessage:
    """Build a time signature; ``denominator`` is the written value (4 for x/4)."""
    if denominator <= 0 or denominator & (denominator - 1):
        raise ValueError(f"denominator must be a power of two, got {denominator}")
    payload = bytes(
        (numerator, denominator.bit_length() - 1, clocks_per_click, thirty_seconds_per_quarter)
    )
    return MetaMessage(TIME_SIGNATURE, payload, delta_time)


def note_on(channel: int, note: int, velocity: int, delta_time: int = 0) -> ChannelMessage:
    return ChannelMessage(NOTE_ON, channel, (note, velocity), delta_time)


def note_off(channel: int, note: int, velocity: int = 0, delta_time: int = 0) -> ChannelMessage:
    return ChannelMessage(NOTE_OFF, channel, (note, velocity), delta_time)


def controller(channel: int, number: int, value: int, delta_time: int = 0) -> ChannelMessage:
    return ChannelMessage(CONTROLLER, channel, (number, value), delta_time)


def program_change(channel: int, program: int, delta_time: int = 0) -> ChannelMessage:
    return ChannelMessage(PROGRAM_CHANGE, channel, (program,), delta_time)


def channel_pressure(channel: int, pressure: int, delta_time: int = 0) -> ChannelMessage:
    return ChannelMessage(CHANNEL_PRESSURE, channel, (pressure,), delta_time)


def pitch_bend(channel: int, value: int = PITCH_BEND_CENTER, delta_time: int = 0) -> ChannelMessage:
    return ChannelMessage(PITCH_BEND, channel, (value,), delta_time)
