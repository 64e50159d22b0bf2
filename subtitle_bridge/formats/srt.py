"""SubRip (.srt) parsing and generation."""

import logging
import re
from typing import List

from ..core.models import SubtitleDocument, SubtitleEntry, SubtitleFormat
from .timecodes import format_time_line, parse_time_line

logger = logging.getLogger(__name__)

_BLOCK_SEPARATOR_RE = re.compile(r"\n\s*\n")


def normalize_newlines(content: str) -> str:
    """Strip a leading BOM and convert CRLF/CR line endings to LF."""
    return content.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")


def collapse_blank_lines(text: str) -> str:
    """Drop blank lines inside entry text; a blank line would end the block."""
    return _BLOCK_SEPARATOR_RE.sub("\n", text.strip())


def parse_srt(content: str) -> SubtitleDocument:
    """Parse SRT content into structured entries.

    Blocks with fewer than three lines or without a ``-->`` time line are
    skipped. A non-numeric index falls back to the block position.
    """
    content = normalize_newlines(content).strip()
    entries: List[SubtitleEntry] = []
    if not content:
        return SubtitleDocument(entries, SubtitleFormat.SRT)

    for position, block in enumerate(_BLOCK_SEPARATOR_RE.split(content)):
        lines = block.strip().split("\n")
        if len(lines) < 3:
            logger.debug(f"Skipping SRT block {position + 1}: too few lines")
            continue

        time_range = parse_time_line(lines[1], SubtitleFormat.SRT)
        if time_range is None:
            logger.debug(f"Skipping SRT block {position + 1}: no time range")
            continue

        try:
            sequence_number = int(lines[0].strip())
        except ValueError:
            sequence_number = position + 1

        text = "\n".join(line.strip() for line in lines[2:]).strip()
        entries.append(SubtitleEntry(sequence_number, time_range, text))

    return SubtitleDocument(entries, SubtitleFormat.SRT)


def generate_srt(document: SubtitleDocument) -> str:
    """Format entries back into SRT file content."""
    blocks = [
        f"{entry.sequence_number}\n"
        f"{format_time_line(entry.time_range, SubtitleFormat.SRT)}\n"
        f"{collapse_blank_lines(entry.text)}\n"
        for entry in document
    ]
    return "\n".join(blocks)
