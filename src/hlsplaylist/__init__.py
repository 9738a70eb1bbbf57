__version__ = "0.1.0"

from .hls import (
    DanglingSegment,
    DiscontinuityRun,
    Duration,
    HeaderMismatch,
    MalformedNumber,
    MediaPlaylist,
    MissingRequiredField,
    PlaylistError,
    Segment,
    load,
    parse,
)
