"""Byte <-> text conversion for chunk identifiers and text meta-events."""

from __future__ import annotations

from typing import Iterable


def to_ascii(data: Iterable[int]) -> str:
    """Map each byte to the character with the same code point.

    Latin-1 keeps this lossless for bytes above 0x7F, which show up in
    track names written by older sequencers.
    """
    return bytes(data).decode("latin-1")


def from_ascii(text: str) -> bytes:
    return text.encode("latin-1")
