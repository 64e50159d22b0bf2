"""In-memory subtitle document model shared by parsers, generators and the translator."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterator, List, Optional

# Canonical line-break marker inside entry text.
LINE_BREAK = "\n"


class SubtitleFormat(str, Enum):
    """Supported subtitle formats."""
    SRT = "srt"
    WEBVTT = "webvtt"
    ASS = "ass"
    TEXT = "text"


@dataclass(frozen=True)
class TimeRange:
    """Start/end pair in canonical ``HH:MM:SS,mmm`` notation.

    Unparseable timestamps are stored verbatim, so ``start`` and ``end`` are
    plain strings rather than numbers. ``settings`` carries whatever trails
    the end timestamp: WebVTT cue settings (``align:start position:10%``) or
    SubRip display coordinates (``X1:40 X2:600 Y1:20 Y2:50``). Each is written
    back only to the format it belongs to.
    """
    start: str
    end: str
    settings: str = ""

    def __str__(self) -> str:
        return f"{self.start} --> {self.end}"


@dataclass
class SubtitleEntry:
    """One timed unit of text.

    ``original_text`` is a snapshot of ``text`` at construction time; the
    translator only ever writes ``text``.
    """
    sequence_number: int
    time_range: TimeRange
    text: str
    original_text: Optional[str] = None

    def __post_init__(self):
        if self.original_text is None:
            self.original_text = self.text

    def with_text(self, text: str) -> "SubtitleEntry":
        """Return a copy carrying ``text`` and the same original snapshot."""
        return replace(self, text=text)


@dataclass
class SubtitleDocument:
    """Ordered sequence of entries; insertion order is display order."""
    entries: List[SubtitleEntry] = field(default_factory=list)
    format: SubtitleFormat = SubtitleFormat.SRT

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[SubtitleEntry]:
        return iter(self.entries)

    def __getitem__(self, index):
        return self.entries[index]

    def __bool__(self) -> bool:
        return bool(self.entries)

    def texts(self) -> List[str]:
        return [entry.text for entry in self.entries]

    def original_texts(self) -> List[str]:
        return [entry.original_text for entry in self.entries]


@dataclass(frozen=True)
class TranslationBatch:
    """A contiguous slice of a document, the unit of one backend request."""
    index: int
    entries: List[SubtitleEntry]

    def __len__(self) -> int:
        return len(self.entries)

    def texts(self) -> List[str]:
        return [entry.text for entry in self.entries]


@dataclass(frozen=True)
class TranslationContext:
    """Synopsis of a document passed unchanged to every batch request."""
    summary: str
    is_fallback: bool = False


@dataclass
class BatchResult:
    """Entries of one batch after processing, tagged with the batch index."""
    index: int
    entries: List[SubtitleEntry]
    succeeded: bool = True
    error: Optional[str] = None
