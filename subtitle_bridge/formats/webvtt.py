"""WebVTT (.vtt) parsing and generation."""

import logging
import re
from typing import List

from ..core.models import SubtitleDocument, SubtitleEntry, SubtitleFormat
from .srt import collapse_blank_lines, normalize_newlines
from .timecodes import ARROW, format_time_line, parse_time_line

logger = logging.getLogger(__name__)

HEADER = "WEBVTT"

_TAG_RE = re.compile(r"<[^>]*>")
_SKIPPED_PREFIXES = ("NOTE", "STYLE")


def clean_cue_text(line: str) -> str:
    """Strip cue markup (``<c>``, ``<v Speaker>``, ``<i>``...) and decode basic entities."""
    text = _TAG_RE.sub("", line)
    return text.replace("&lt;", "<").replace("&gt;", ">").replace("&amp;", "&")


def parse_webvtt(content: str) -> SubtitleDocument:
    """Parse WebVTT content.

    Every line containing ``-->`` opens a cue; the following non-blank lines
    up to the next blank or arrow line are its text. Cues without text are
    dropped. Header, NOTE and STYLE lines are skipped, as is anything else
    outside a cue (cue identifiers, REGION blocks).
    """
    lines = normalize_newlines(content).split("\n")
    entries: List[SubtitleEntry] = []
    sequence_number = 1
    i = 0

    while i < len(lines):
        line = lines[i].strip()
        if not line or line.startswith(HEADER) or line.startswith(_SKIPPED_PREFIXES):
            i += 1
            continue
        if ARROW not in line:
            i += 1
            continue

        time_range = parse_time_line(line, SubtitleFormat.WEBVTT)
        text_lines = []
        j = i + 1
        while j < len(lines) and lines[j].strip() and ARROW not in lines[j]:
            cleaned = clean_cue_text(lines[j].strip())
            text_lines.append(cleaned)
            j += 1

        if text_lines:
            entries.append(SubtitleEntry(sequence_number, time_range, "\n".join(text_lines)))
            sequence_number += 1
        else:
            logger.debug(f"Dropping empty WebVTT cue at line {i + 1}")
        i = j

    return SubtitleDocument(entries, SubtitleFormat.WEBVTT)


def generate_webvtt(document: SubtitleDocument) -> str:
    """Format entries as WebVTT; cue identifiers are not emitted."""
    parts = [f"{HEADER}\n\n"]
    for entry in document:
        parts.append(f"{format_time_line(entry.time_range, SubtitleFormat.WEBVTT)}\n")
        parts.append(f"{collapse_blank_lines(entry.text)}\n\n")
    return "".join(parts)
