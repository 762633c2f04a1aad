"""Read and write Standard MIDI Files."""

from .buffer import ByteBuffer  # noqa: F401
from .container import MidiFile  # noqa: F401
from .errors import (  # noqa: F401
    HeaderLengthError,
    InvalidDivision,
    SMFError,
    TrackLengthMismatch,
    TruncatedInput,
    UnexpectedIdentifier,
    UnknownMessageType,
)
from .header import (  # noqa: F401
    HEADER_CHUNK,
    MULTI_SONG,
    MULTI_TRACK,
    SINGLE_TRACK,
    Division,
    Header,
    SMPTEFrames,
    TicksPerQuarterNote,
)
from .messages import (  # noqa: F401
    ChannelMessage,
    Message,
    MetaMessage,
    RunningStatus,
    SysExContinuation,
    SysExMessage,
    encode_message,
    read_message,
    write_message,
)
from .track import TRACK_CHUNK, Track, read_events  # noqa: F401
from .vlq import decode_vlq, encode_vlq, read_vlq, write_vlq  # noqa: F401
