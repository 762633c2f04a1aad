#!/usr/bin/env python3
"""Print the header and every event of Standard MIDI Files."""

from __future__ import annotations

import argparse
from pathlib import Path
import sys
from typing import List

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from smf.container import MidiFile  # noqa: E402
from smf.errors import SMFError  # noqa: E402
from smf.header import SMPTEFrames  # noqa: E402
from smf.messages import (  # noqa: E402
    TEXT_META_TYPES,
    ChannelMessage,
    Message,
    MetaMessage,
    SysExContinuation,
    SysExMessage,
)

CHANNEL_NAMES = {
    0x8: "note_off",
    0x9: "note_on",
    0xA: "poly_pressure",
    0xB: "controller",
    0xC: "program_change",
    0xD: "channel_pressure",
    0xE: "pitch_bend",
}

META_NAMES = {
    0x00: "sequence_number",
    0x01: "text",
    0x02: "copyright",
    0x03: "track_name",
    0x04: "instrument_name",
    0x05: "lyric",
    0x06: "marker",
    0x07: "cue_point",
    0x20: "channel_prefix",
    0x2F: "end_of_track",
    0x51: "set_tempo",
    0x54: "smpte_offset",
    0x58: "time_signature",
    0x59: "key_signature",
    0x7F: "sequencer_specific",
}


def describe(message: Message) -> str:
    if isinstance(message, ChannelMessage):
        name = CHANNEL_NAMES.get(message.subtype, f"0x{message.subtype:X}")
        data = " ".join(str(v) for v in message.data)
        return f"{name:<16} ch={message.channel + 1:<2} {data}"
    if isinstance(message, MetaMessage):
        name = META_NAMES.get(message.subtype, f"meta_0x{message.subtype:02X}")
        if message.subtype in TEXT_META_TYPES:
            return f"{name:<16} {message.text!r}"
        return f"{name:<16} {message.payload.hex(' ')}"
    if isinstance(message, SysExMessage):
        return f"{'sysex':<16} {message.payload.hex(' ')}"
    if isinstance(message, SysExContinuation):
        return f"{'sysex_cont':<16} {message.payload.hex(' ')}"
    raise TypeError(f"not a MIDI message: {message!r}")


def dump(midi: MidiFile, *, absolute: bool = False) -> List[str]:
    header = midi.header
    if isinstance(header.division, SMPTEFrames):
        timing = (
            f"smpte {header.division.frames_per_second} fps, "
            f"{header.division.ticks_per_frame} ticks/frame"
        )
    else:
        timing = f"{header.division.ticks} ticks/quarter"
    lines = [f"format {header.format}, {header.track_count} track(s), {timing}"]

    for index, track in enumerate(midi.tracks):
        lines.append(f"track {index}: {len(track.messages)} events, {track.length} bytes")
        now = 0
        for message in track.messages:
            now += message.delta_time
            tick = now if absolute else message.delta_time
            lines.append(f"  {tick:>8}  {describe(message)}")
    return lines


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("paths", nargs="+", type=Path, help=".mid files to dump")
    parser.add_argument(
        "--absolute",
        action="store_true",
        help="Show absolute tick positions instead of delta-times.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject chunks whose identifiers are not MThd/MTrk.",
    )
    args = parser.parse_args(argv)

    failures = 0
    for path in args.paths:
        try:
            midi = MidiFile.load(path, strict=args.strict)
        except (OSError, SMFError) as exc:
            failures += 1
            print(f"ERR  {path}: {exc}", file=sys.stderr)
            continue
        print(f"== {path}")
        for line in dump(midi, absolute=args.absolute):
            print(line)

    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
