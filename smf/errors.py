"""Exceptions raised while decoding or encoding Standard MIDI Files."""

from __future__ import annotations


class SMFError(ValueError):
    """Base class for every codec failure."""


class TruncatedInput(SMFError):
    """A read needed more bytes than remain in the source."""


class UnknownMessageType(SMFError):
    """A status byte that is neither meta, SysEx nor a channel message."""


class TrackLengthMismatch(SMFError):
    """The events of a track do not fill its declared chunk length exactly."""


class InvalidDivision(SMFError):
    """A header division that cannot be packed into 16 bits."""


class UnexpectedIdentifier(SMFError):
    """A chunk identifier other than the one expected (strict mode only)."""


class HeaderLengthError(SMFError):
    """A header chunk declaring fewer than the 6 mandatory body bytes."""
