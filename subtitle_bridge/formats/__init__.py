"""Subtitle format parsers and generators.

Formats are dispatched through the ``FORMATS`` table: each
``SubtitleFormat`` maps to a handler carrying its parse and generate
functions and the file extensions it claims.
"""

import logging
from pathlib import Path
from typing import Callable, Dict, NamedTuple, Optional, Tuple, Union

from ..core.exceptions import FileError, UnsupportedFormatError
from ..core.models import SubtitleDocument, SubtitleFormat
from .ass import generate_ass, parse_ass
from .plaintext import generate_text, parse_text
from .srt import generate_srt, parse_srt
from .webvtt import generate_webvtt, parse_webvtt

logger = logging.getLogger(__name__)


class FormatHandler(NamedTuple):
    parse: Callable[[str], SubtitleDocument]
    generate: Callable[[SubtitleDocument], str]
    extensions: Tuple[str, ...]


FORMATS: Dict[SubtitleFormat, FormatHandler] = {
    SubtitleFormat.SRT: FormatHandler(parse_srt, generate_srt, (".srt",)),
    SubtitleFormat.WEBVTT: FormatHandler(parse_webvtt, generate_webvtt, (".vtt",)),
    SubtitleFormat.ASS: FormatHandler(parse_ass, generate_ass, (".ass", ".ssa")),
    SubtitleFormat.TEXT: FormatHandler(parse_text, generate_text, (".txt", ".md")),
}


def format_for_path(path: Union[str, Path]) -> Optional[SubtitleFormat]:
    """Return the format claimed by the file extension, if any."""
    suffix = Path(path).suffix.lower()
    for subtitle_format, handler in FORMATS.items():
        if suffix in handler.extensions:
            return subtitle_format
    return None


def detect_format(content: str) -> SubtitleFormat:
    """Guess the format from content; SRT when nothing else matches."""
    if "WEBVTT" in content:
        return SubtitleFormat.WEBVTT
    if "[Events]" in content:
        return SubtitleFormat.ASS
    return SubtitleFormat.SRT


def parse_subtitles(
    content: str,
    subtitle_format: Optional[SubtitleFormat] = None,
) -> SubtitleDocument:
    """Parse ``content`` with the given format, or a detected one."""
    if subtitle_format is None:
        subtitle_format = detect_format(content)
        logger.info(f"Detected subtitle format from content: {subtitle_format.value}")
    return FORMATS[subtitle_format].parse(content)


def generate_subtitles(document: SubtitleDocument, subtitle_format: SubtitleFormat) -> str:
    return FORMATS[subtitle_format].generate(document)


def read_subtitle_file(path: Union[str, Path]) -> SubtitleDocument:
    """Read and parse a subtitle file, choosing the format by extension then content."""
    input_path = Path(path)
    if not input_path.is_file():
        raise FileError(f"Input file not found: {input_path}")

    try:
        content = input_path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise FileError(f"Failed to read input file {input_path}: {e}") from e

    subtitle_format = format_for_path(input_path)
    if subtitle_format is not None:
        logger.info(f"Reading {input_path.name} as {subtitle_format.value}")
    return parse_subtitles(content, subtitle_format)


def output_format_for_path(path: Union[str, Path]) -> SubtitleFormat:
    """Return the format implied by an output path, raising if there is none."""
    subtitle_format = format_for_path(path)
    if subtitle_format is None:
        supported = ", ".join(ext for h in FORMATS.values() for ext in h.extensions)
        raise UnsupportedFormatError(
            f"Unsupported output extension for {path}. Supported: {supported}"
        )
    return subtitle_format


def write_subtitle_file(document: SubtitleDocument, path: Union[str, Path]) -> Path:
    """Render ``document`` in the format implied by ``path`` and write it."""
    output_path = Path(path)
    subtitle_format = output_format_for_path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(generate_subtitles(document, subtitle_format), encoding="utf-8")
    return output_path


__all__ = [
    "FORMATS",
    "FormatHandler",
    "detect_format",
    "format_for_path",
    "generate_subtitles",
    "output_format_for_path",
    "parse_subtitles",
    "read_subtitle_file",
    "write_subtitle_file",
]
