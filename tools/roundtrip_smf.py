#!/usr/bin/env python3
"""Decode, re-encode and decode again Standard MIDI Files.

Encoding never uses running status, so the comparison is structural: the
second decode must equal the first.  Byte-identical files are reported as
``OK``; structurally equal but re-sized files as ``OK~``.
"""

from __future__ import annotations

import argparse
import glob
from pathlib import Path
import sys
from typing import Iterable, List

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from smf.container import MidiFile  # noqa: E402
from smf.errors import SMFError  # noqa: E402


def collect_paths(patterns: Iterable[str]) -> List[Path]:
    paths: List[Path] = []
    for pattern in patterns:
        matches = sorted(Path(p) for p in glob.glob(pattern, recursive=True))
        if matches:
            paths.extend(matches)
        else:
            candidate = Path(pattern)
            if candidate.exists():
                paths.append(candidate)
    seen: set[Path] = set()
    unique_paths: List[Path] = []
    for path in paths:
        resolved = path.resolve()
        if resolved not in seen:
            seen.add(resolved)
            unique_paths.append(path)
    return unique_paths


def first_message_diff(a: MidiFile, b: MidiFile) -> str | None:
    if a.header != b.header:
        return f"header differs ({a.header} vs {b.header})"
    if len(a.tracks) != len(b.tracks):
        return f"track count differs ({len(a.tracks)} vs {len(b.tracks)})"
    for t_idx, (left, right) in enumerate(zip(a.tracks, b.tracks)):
        if len(left.messages) != len(right.messages):
            return (
                f"track {t_idx}: message count differs "
                f"({len(left.messages)} vs {len(right.messages)})"
            )
        for m_idx, (lm, rm) in enumerate(zip(left.messages, right.messages)):
            if lm != rm:
                return f"track {t_idx} message {m_idx}: {lm!r} vs {rm!r}"
    return None


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Decode + re-encode .mid files and report structural mismatches."
    )
    parser.add_argument(
        "paths",
        nargs="+",
        help="File paths or glob patterns (quotes recommended for wildcards).",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject chunks whose identifiers are not MThd/MTrk.",
    )
    args = parser.parse_args(argv)

    targets = collect_paths(args.paths)
    if not targets:
        parser.error("No files matched the provided paths/patterns.")

    failures = 0
    for path in targets:
        data = path.read_bytes()
        try:
            first = MidiFile.from_bytes(data, strict=args.strict)
            rebuilt = first.to_bytes()
            second = MidiFile.from_bytes(rebuilt, strict=args.strict)
        except (SMFError, ValueError) as exc:
            failures += 1
            print(f"ERR  {path}: {exc}")
            continue

        diff = first_message_diff(first, second)
        if diff is not None:
            failures += 1
            print(f"FAIL {path}: {diff}")
        elif rebuilt == data:
            print(f"OK   {path}")
        else:
            print(f"OK~  {path}: re-encoded {len(data)} -> {len(rebuilt)} bytes")

    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
