"""Line-oriented plain text: one entry per line, no timing."""

from typing import List

from ..core.models import SubtitleDocument, SubtitleEntry, SubtitleFormat
from .srt import normalize_newlines
from .timecodes import placeholder_range

_SKIPPED_PREFIXES = ("#", "```")


def parse_text(content: str) -> SubtitleDocument:
    """Turn every non-blank line that is not a heading or code fence into an entry."""
    entries: List[SubtitleEntry] = []
    for line in normalize_newlines(content).split("\n"):
        stripped = line.strip()
        if not stripped or stripped.startswith(_SKIPPED_PREFIXES):
            continue
        entries.append(SubtitleEntry(len(entries) + 1, placeholder_range(), stripped))
    return SubtitleDocument(entries, SubtitleFormat.TEXT)


def generate_text(document: SubtitleDocument) -> str:
    # Timing and numbering are dropped.
    if not document:
        return ""
    return "\n\n".join(entry.text for entry in document) + "\n"
