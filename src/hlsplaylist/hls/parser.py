"""Extended M3U media playlist parser.

Only the tags needed to build a :class:`MediaPlaylist` are interpreted;
every other line that starts with ``#`` is skipped.
"""

import logging
import re
from decimal import InvalidOperation
from pathlib import Path
from typing import Callable, Optional, Union

from .errors import (
    DanglingSegment,
    HeaderMismatch,
    MalformedNumber,
    MissingRequiredField,
)
from .playlist import DiscontinuityRun, Duration, MediaPlaylist, Segment, to_duration

HEADER = "#EXTM3U"

MAX_TARGET_DURATION = 2 ** 64 - 1
MAX_VERSION = 2 ** 32 - 1

_integer_re = re.compile(r"[0-9]+")
_seconds_re = re.compile(r"[0-9]+(?:\.[0-9]*)?|\.[0-9]+")

_logger = logging.getLogger("hlsplaylist")


class _State:
    def __init__(self) -> None:
        self.awaiting_uri: Optional[Duration] = None
        self.discontinuity_cursor = 0
        self.target_duration: Optional[int] = None
        self.version: Optional[int] = None
        self.segments: list[Segment] = []
        self.discontinuities: list[DiscontinuityRun] = []
        self.ended = False

    def add_segment(self, uri: str) -> None:
        assert self.awaiting_uri is not None
        self.segments.append(Segment(self.awaiting_uri, uri))
        self.awaiting_uri = None

    def close_run(self) -> None:
        # An empty slice means the boundary directly follows another one.
        run = self.segments[self.discontinuity_cursor :]
        if run:
            self.discontinuities.append(DiscontinuityRun.from_segments(run))
        self.discontinuity_cursor = len(self.segments)

    def playlist(self) -> MediaPlaylist:
        if self.target_duration is None:
            raise MissingRequiredField("target_duration")
        segments = tuple(self.segments)
        discontinuities = tuple(self.discontinuities)
        assert sum(len(run.segments) for run in discontinuities) == len(segments)
        return MediaPlaylist(
            target_duration=self.target_duration,
            version=self.version,
            segments=segments,
            discontinuities=discontinuities,
            ended=self.ended,
        )


def _integer(tag: str, value: str, maxval: int, line_number: int) -> int:
    # Bound the digit count before converting so huge values fail cheaply.
    digits = value.lstrip("0") or "0"
    if (
        not _integer_re.fullmatch(value)
        or len(digits) > len(str(maxval))
        or int(digits) > maxval
    ):
        raise MalformedNumber(tag, value, line_number)
    return int(digits)


def _seconds(tag: str, value: str, line_number: int) -> Duration:
    if not _seconds_re.fullmatch(value):
        raise MalformedNumber(tag, value, line_number)
    try:
        return to_duration(value)
    except InvalidOperation as error:  # Too many digits
        raise MalformedNumber(tag, value, line_number) from error


def _target_duration(state: _State, tag: str, value: str, line_number: int) -> None:
    state.target_duration = _integer(tag, value, MAX_TARGET_DURATION, line_number)


def _version(state: _State, tag: str, value: str, line_number: int) -> None:
    state.version = _integer(tag, value, MAX_VERSION, line_number)


def _extinf(state: _State, tag: str, value: str, line_number: int) -> None:
    if state.awaiting_uri is not None:
        raise DanglingSegment(line_number)
    # #EXTINF:<duration>,[<title>]
    duration, _, _title = value.partition(",")
    state.awaiting_uri = _seconds(tag, duration.strip(), line_number)


def _discontinuity(state: _State, tag: str, value: str, line_number: int) -> None:
    state.close_run()


def _endlist(state: _State, tag: str, value: str, line_number: int) -> None:
    state.close_run()
    state.ended = True


_TagHandler = Callable[[_State, str, str, int], None]

TAGS: dict[str, _TagHandler] = {
    "#EXT-X-TARGETDURATION": _target_duration,
    "#EXT-X-VERSION": _version,
    "#EXTINF": _extinf,
    "#EXT-X-DISCONTINUITY": _discontinuity,
    "#EXT-X-ENDLIST": _endlist,
}


def parse(text: str) -> MediaPlaylist:
    """Parse the contents of an Extended M3U media playlist.

    Raises a :class:`~hlsplaylist.hls.errors.PlaylistError` subclass on the
    first malformed construct; nothing is returned in that case.
    """
    lines = text.lstrip("\ufeff").splitlines()
    line_number = 0
    for line_number, line in enumerate(lines, start=1):
        if line.strip():
            if line.strip() != HEADER:
                raise HeaderMismatch(line_number)
            break
    else:
        raise HeaderMismatch()

    state = _State()
    for line_number, line in enumerate(lines[line_number:], start=line_number + 1):
        line = line.strip()
        if not line:
            continue
        if state.awaiting_uri is not None and not line.startswith("#"):
            state.add_segment(line)
            continue
        tag, _, value = line.partition(":")
        handler = TAGS.get(tag)
        if handler is None:
            _logger.debug("Ignoring line %d: %s", line_number, tag)
            continue
        handler(state, tag, value.strip(), line_number)

    if state.awaiting_uri is not None:
        raise DanglingSegment(line_number)
    # End of input is an implicit boundary for segments after the last one.
    state.close_run()
    playlist = state.playlist()
    _logger.debug(
        "Parsed %d segment(s) in %d discontinuity run(s)",
        len(playlist.segments),
        len(playlist.discontinuities),
    )
    return playlist


def load(path: Union[str, Path]) -> MediaPlaylist:
    return parse(Path(path).read_text(encoding="utf-8"))
