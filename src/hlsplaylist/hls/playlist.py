from decimal import Context, Decimal, Inexact, InvalidOperation, localcontext
from pathlib import Path
from typing import Any, Iterable, NamedTuple, Optional, Tuple

# See rfc8216 and https://developer.apple.com/documentation/http_live_streaming

Duration = Decimal

NANOSECOND = Decimal("1e-9")
ZERO = Decimal(0)

# Fixed contexts so results never depend on the caller's decimal context.
# Durations are rounded to nanoseconds; sums of them must stay exact.
ROUNDING_CONTEXT = Context(prec=48, traps=[InvalidOperation])
EXACT_CONTEXT = Context(prec=48, traps=[InvalidOperation, Inexact])


def to_duration(value: str) -> Duration:
    """Convert decimal seconds text to a nanosecond-resolution duration.

    Raises :class:`decimal.InvalidOperation` when the value has too many
    digits to be represented.
    """
    return Decimal(value).quantize(NANOSECOND, context=ROUNDING_CONTEXT)


def total(segments: Iterable["Segment"]) -> Duration:
    with localcontext(EXACT_CONTEXT):
        return sum((segment.duration for segment in segments), ZERO)


def format_seconds(duration: Duration) -> str:
    return format(duration.normalize(EXACT_CONTEXT), "f")


class Segment(NamedTuple):
    duration: Duration
    uri: str


class DiscontinuityRun(NamedTuple):
    """Contiguous segments between two discontinuity boundaries.

    Build runs with :meth:`from_segments`, which derives ``total_duration``
    from the segments; the plain constructor does not check it.
    """

    total_duration: Duration
    segments: Tuple[Segment, ...]

    @classmethod
    def from_segments(cls, segments: Iterable[Segment]) -> "DiscontinuityRun":
        segments = tuple(segments)
        return cls(total(segments), segments)


class MediaPlaylist(NamedTuple):
    target_duration: int
    version: Optional[int]
    segments: Tuple[Segment, ...]
    discontinuities: Tuple[DiscontinuityRun, ...]
    ended: bool

    @property
    def total_duration(self) -> Duration:
        return total(self.segments)

    def dumps(self) -> str:
        lines = ["#EXTM3U"]
        if self.version is not None:
            lines.append(f"#EXT-X-VERSION:{self.version}")
        lines.append(f"#EXT-X-TARGETDURATION:{self.target_duration}")
        for index, run in enumerate(self.discontinuities):
            if index > 0:
                lines.append("#EXT-X-DISCONTINUITY")
            for segment in run.segments:
                lines.append(f"#EXTINF:{format_seconds(segment.duration)},")
                lines.append(segment.uri)
        if self.ended:
            lines.append("#EXT-X-ENDLIST")
        return "\n".join(lines) + "\n"

    def write(self, path: Path) -> None:
        with path.open(mode="w", encoding="utf-8") as m3u8:
            m3u8.write(self.dumps())

    def to_dict(self) -> dict[str, Any]:
        def _segment(segment: Segment) -> dict[str, Any]:
            return {"duration": float(segment.duration), "uri": segment.uri}

        return {
            "target_duration": self.target_duration,
            "version": self.version,
            "ended": self.ended,
            "total_duration": float(self.total_duration),
            "segments": [_segment(segment) for segment in self.segments],
            "discontinuities": [
                {
                    "total_duration": float(run.total_duration),
                    "segments": [_segment(segment) for segment in run.segments],
                }
                for run in self.discontinuities
            ],
        }
