"""Data models for subtitle captions and documents."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterator, List, Sequence


def format_timestamp(ms: int) -> str:
    """Format a millisecond offset as an SRT timecode (HH:MM:SS,mmm)."""
    hours, rest = divmod(ms, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    seconds, millis = divmod(rest, 1000)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d},{millis:03d}"


def parse_timestamp(t_str: str) -> int:
    """
    Convert an SRT timecode string to milliseconds.

    Accepts either ',' or '.' before the milliseconds.

    Raises:
        ValueError: If the string is not a timecode
    """
    h, m, s_full = t_str.strip().split(':')
    s, ms = s_full.replace('.', ',').split(',')
    return int(h) * 3_600_000 + int(m) * 60_000 + int(s) * 1000 + int(ms)


@dataclass
class Caption:
    """A single timed subtitle record."""

    start: int
    end: int
    lines: List[str] = field(default_factory=list)

    @property
    def timecode(self) -> str:
        """Return the timecode line in SRT format."""
        return f"{format_timestamp(self.start)} --> {format_timestamp(self.end)}"

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    def to_srt(self, index: int, newline: str = "\n") -> str:
        """Convert caption to an SRT record, numbered with ``index``."""
        body = newline.join(self.lines)
        return f"{index}{newline}{self.timecode}{newline}{body}{newline}{newline}"

    def copy(self, **changes) -> "Caption":
        """Create a copy with optional field changes."""
        return Caption(
            start=changes.get('start', self.start),
            end=changes.get('end', self.end),
            lines=list(changes.get('lines', self.lines)),
        )


class SubtitleDocument:
    """Ordered sequence of captions; order is display and translation order."""

    def __init__(self, captions: Sequence[Caption] = ()):
        self._captions: List[Caption] = list(captions)

    @property
    def captions(self) -> List[Caption]:
        return list(self._captions)

    def __len__(self) -> int:
        return len(self._captions)

    def __iter__(self) -> Iterator[Caption]:
        return iter(self._captions)

    def __getitem__(self, idx):
        if isinstance(idx, slice):
            return SubtitleDocument(self._captions[idx])
        return self._captions[idx]

    def __eq__(self, other) -> bool:
        if not isinstance(other, SubtitleDocument):
            return NotImplemented
        return self._captions == other._captions

    def __repr__(self) -> str:
        return f"SubtitleDocument({len(self._captions)} captions)"
