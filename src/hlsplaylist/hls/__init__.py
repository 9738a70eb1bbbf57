from .errors import (
    DanglingSegment,
    HeaderMismatch,
    MalformedNumber,
    MissingRequiredField,
    PlaylistError,
)
from .parser import load, parse
from .playlist import DiscontinuityRun, Duration, MediaPlaylist, Segment
