"""Tests for MTrk track chunks."""

from pathlib import Path
import sys

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from smf.buffer import ByteBuffer  # noqa: E402
from smf.errors import (  # noqa: E402
    TrackLengthMismatch,
    TruncatedInput,
    UnexpectedIdentifier,
    UnknownMessageType,
)
from smf.messages import (  # noqa: E402
    NOTE_ON,
    ChannelMessage,
    end_of_track,
    note_off,
    note_on,
    pitch_bend,
    track_name,
)
from smf.track import Track, read_events  # noqa: E402


def _sample_track() -> Track:
    return Track(
        messages=[
            track_name("Lead"),
            note_on(0, 60, 100),
            pitch_bend(0, 0x1234, delta_time=10),
            note_off(0, 60, 0, delta_time=20000),
            end_of_track(),
        ]
    )


def test_length_field_matches_event_stream() -> None:
    data = _sample_track().to_bytes()
    assert data[:4] == b"MTrk"
    declared = int.from_bytes(data[4:8], "big")
    assert declared == len(data) - 8


def test_write_updates_length_and_leaves_cursor_at_end() -> None:
    track = _sample_track()
    buf = ByteBuffer()
    buf.write_uint8(b"pre")
    track.write(buf)
    assert buf.cursor == buf.size
    assert track.length == buf.size - 3 - 8


def test_two_tracks_back_to_back() -> None:
    buf = ByteBuffer()
    _sample_track().write(buf)
    Track(messages=[end_of_track()]).write(buf)
    data = buf.finalize()

    read_buf = ByteBuffer(data)
    first = Track.read(read_buf)
    second = Track.read(read_buf)
    assert first.messages == _sample_track().messages
    assert second.messages == [end_of_track()]
    assert read_buf.remaining == 0


def test_empty_track() -> None:
    data = Track().to_bytes()
    assert data == b"MTrk\x00\x00\x00\x00"
    assert Track.from_bytes(data).messages == []


def test_running_status_track() -> None:
    body = b"\x00\x90\x3C\x40" + b"\x60\x3C\x00" + b"\x00\xFF\x2F\x00"
    data = b"MTrk" + len(body).to_bytes(4, "big") + body
    track = Track.from_bytes(data)
    first, second, eot = track.messages
    assert first == ChannelMessage(NOTE_ON, 0, (60, 64))
    assert second == ChannelMessage(NOTE_ON, 0, (60, 0), delta_time=0x60)
    assert eot == end_of_track()
    assert track.length == len(body)


def test_running_status_resets_between_tracks() -> None:
    first = b"\x00\x90\x3C\x40"
    second = b"\x00\x3C\x40"
    data = (
        b"MTrk" + len(first).to_bytes(4, "big") + first
        + b"MTrk" + len(second).to_bytes(4, "big") + second
    )
    buf = ByteBuffer(data)
    Track.read(buf)
    with pytest.raises(UnknownMessageType, match="running status"):
        Track.read(buf)


def test_event_overrunning_length_is_mismatch() -> None:
    # Declares 3 bytes but the note-on needs 4.
    data = b"MTrk\x00\x00\x00\x03\x00\x90\x3C\x40" + b"MTrk\x00\x00\x00\x00"
    with pytest.raises(TrackLengthMismatch):
        Track.from_bytes(data)


def test_declared_length_past_end_is_truncated() -> None:
    with pytest.raises(TruncatedInput):
        Track.from_bytes(b"MTrk\x00\x00\x00\x10\x00\xFF\x2F\x00")


def test_read_events_rejects_partial_trailing_event() -> None:
    with pytest.raises(TrackLengthMismatch):
        read_events(b"\x00\xFF\x2F\x00\x00")


def test_strict_identifier() -> None:
    data = b"XTrk\x00\x00\x00\x04\x00\xFF\x2F\x00"
    assert Track.from_bytes(data).identifier == "XTrk"
    with pytest.raises(UnexpectedIdentifier):
        Track.from_bytes(data, strict=True)


def test_track_helpers() -> None:
    track = _sample_track()
    assert track.name == "Lead"
    assert track.has_end_of_track
    assert track.total_ticks() == 20010
    assert Track().name is None
    assert not Track().has_end_of_track


def test_rejected_event_leaves_buffer_untouched() -> None:
    buf = ByteBuffer()
    buf.write_uint8(b"pre")
    track = Track(messages=[note_on(0, 60, 64), note_on(0, 200, 64), end_of_track()])
    with pytest.raises(ValueError):
        track.write(buf)
    assert (buf.size, buf.cursor) == (3, 3)
    assert track.length == 0


def test_lenient_identifier_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    data = b"XTrk\x00\x00\x00\x04\x00\xFF\x2F\x00"
    with caplog.at_level("WARNING", logger="smf.track"):
        Track.from_bytes(data)
    assert "'XTrk'" in caplog.text
