from typing import Optional


class PlaylistError(ValueError):
    """Base class for playlist parse errors."""

    def __init__(self, message: str, line_number: Optional[int] = None) -> None:
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class HeaderMismatch(PlaylistError):
    def __init__(self, line_number: Optional[int] = None) -> None:
        super().__init__("not a valid Extended M3U manifest", line_number)


class MalformedNumber(PlaylistError):
    def __init__(self, tag: str, value: str, line_number: Optional[int] = None):
        super().__init__(f"{tag}: invalid number {value!r}", line_number)
        self.tag = tag
        self.value = value


class DanglingSegment(PlaylistError):
    def __init__(self, line_number: Optional[int] = None) -> None:
        super().__init__("#EXTINF is not followed by a segment URI", line_number)


class MissingRequiredField(PlaylistError):
    def __init__(self, field: str) -> None:
        super().__init__(f"missing required field: {field}")
        self.field = field
