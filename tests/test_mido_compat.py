"""Cross-check against mido: files it writes decode here, files written here load there."""

from __future__ import annotations

import io
from pathlib import Path
import sys

import mido

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from smf.container import MidiFile  # noqa: E402
from smf.header import Header, TicksPerQuarterNote  # noqa: E402
from smf.messages import (  # noqa: E402
    CONTROLLER,
    END_OF_TRACK,
    NOTE_ON,
    PITCH_BEND,
    TEMPO,
    ChannelMessage,
    MetaMessage,
    SysExMessage,
    controller,
    end_of_track,
    note_off,
    note_on,
    pitch_bend,
    tempo,
    track_name,
)
from smf.track import Track  # noqa: E402


def _mido_bytes(mid: mido.MidiFile) -> bytes:
    out = io.BytesIO()
    mid.save(file=out)
    return out.getvalue()


def _mido_file() -> mido.MidiFile:
    mid = mido.MidiFile(type=1, ticks_per_beat=480)

    tempo_track = mido.MidiTrack()
    tempo_track.append(mido.MetaMessage("set_tempo", tempo=mido.bpm2tempo(120), time=0))
    mid.tracks.append(tempo_track)

    notes = mido.MidiTrack()
    notes.append(mido.MetaMessage("track_name", name="Keys", time=0))
    # Same status byte four times in a row: mido writes these with running status.
    notes.append(mido.Message("note_on", channel=2, note=60, velocity=90, time=0))
    notes.append(mido.Message("note_on", channel=2, note=64, velocity=90, time=0))
    notes.append(mido.Message("note_on", channel=2, note=60, velocity=0, time=480))
    notes.append(mido.Message("note_on", channel=2, note=64, velocity=0, time=0))
    notes.append(mido.Message("control_change", channel=2, control=64, value=127, time=10))
    notes.append(mido.Message("pitchwheel", channel=2, pitch=-8192, time=0))
    notes.append(mido.Message("pitchwheel", channel=2, pitch=8191, time=0))
    notes.append(mido.Message("sysex", data=[0x7E, 0x7F, 0x09, 0x01], time=0))
    mid.tracks.append(notes)
    return mid


def test_decode_mido_output() -> None:
    midi = MidiFile.from_bytes(_mido_bytes(_mido_file()))

    assert midi.header.format == 1
    assert midi.header.track_count == 2
    assert midi.header.division == TicksPerQuarterNote(480)

    tempo_track, notes = midi.tracks
    assert tempo_track.messages[0] == MetaMessage(TEMPO, (500000).to_bytes(3, "big"), 0)
    assert tempo_track.messages[-1].subtype == END_OF_TRACK

    assert notes.name == "Keys"
    channel = [m for m in notes.messages if isinstance(m, ChannelMessage)]
    assert channel == [
        ChannelMessage(NOTE_ON, 2, (60, 90), 0),
        ChannelMessage(NOTE_ON, 2, (64, 90), 0),
        ChannelMessage(NOTE_ON, 2, (60, 0), 480),
        ChannelMessage(NOTE_ON, 2, (64, 0), 0),
        ChannelMessage(CONTROLLER, 2, (64, 127), 10),
        ChannelMessage(PITCH_BEND, 2, (0,), 0),
        ChannelMessage(PITCH_BEND, 2, (0x3FFF,), 0),
    ]
    sysex = [m for m in notes.messages if isinstance(m, SysExMessage)]
    assert sysex == [SysExMessage(b"\x7E\x7F\x09\x01\xF7", 0)]
    assert notes.has_end_of_track


def test_mido_reads_our_output() -> None:
    track = Track(
        messages=[
            track_name("Lead"),
            tempo(400000),
            note_on(1, 67, 100),
            controller(1, 7, 80, delta_time=12),
            pitch_bend(1, 0x2000 + 100, delta_time=3),
            note_off(1, 67, 0, delta_time=96),
            end_of_track(),
        ]
    )
    ours = MidiFile(
        header=Header(format=0, division=TicksPerQuarterNote(96)), tracks=[track]
    )

    mid = mido.MidiFile(file=io.BytesIO(ours.to_bytes()))
    assert mid.type == 0
    assert mid.ticks_per_beat == 96
    assert len(mid.tracks) == 1

    msgs = list(mid.tracks[0])
    assert msgs[0].type == "track_name" and msgs[0].name == "Lead"
    assert msgs[1].type == "set_tempo" and msgs[1].tempo == 400000
    assert (msgs[2].type, msgs[2].channel, msgs[2].note, msgs[2].velocity) == (
        "note_on", 1, 67, 100,
    )
    assert (msgs[3].type, msgs[3].control, msgs[3].value, msgs[3].time) == (
        "control_change", 7, 80, 12,
    )
    assert msgs[4].type == "pitchwheel" and msgs[4].pitch == 100
    assert msgs[5].type == "note_off" and msgs[5].time == 96
    assert msgs[6].type == "end_of_track"


def test_structural_roundtrip_through_mido_file() -> None:
    data = _mido_bytes(_mido_file())
    first = MidiFile.from_bytes(data)
    second = MidiFile.from_bytes(first.to_bytes())
    assert [t.messages for t in second.tracks] == [t.messages for t in first.tracks]
    # Running status in mido's output means ours re-encodes larger.
    assert len(first.to_bytes()) > len(data)
