"""Conversion between native timestamp notations and the canonical one.

The canonical notation is the SRT form ``HH:MM:SS,mmm``. Anything that does
not look like a timestamp of the expected shape is passed through unchanged
so that a single odd timecode never costs the whole document.
"""

import re
from typing import Optional, Tuple

from ..core.models import SubtitleFormat, TimeRange

ARROW = "-->"

# Placeholder range used for formats without timing (plain text).
PLACEHOLDER_START = "00:00:00,000"
PLACEHOLDER_END = "00:00:01,000"

_ASS_TIME_RE = re.compile(r"^(\d+):(\d{1,2}):(\d{1,2})\.(\d{2})$")
_CANONICAL_RE = re.compile(r"^(\d{2,}):(\d{2}):(\d{2}),(\d{3})$")
# Accepts both separators and the hour-less WebVTT short form.
_MS_RE = re.compile(r"^(?:(\d+):)?(\d{1,2}):(\d{1,2})[,.](\d{1,3})$")
# SubRip display coordinates trailing a time line, e.g. "X1:40 X2:600 Y1:20 Y2:50".
_SRT_COORDINATES_RE = re.compile(r"^(?:[XY][12]:\d+\s*)+$", re.IGNORECASE)


def to_canonical(text: str, source_format: SubtitleFormat) -> str:
    """Convert a native timestamp to canonical notation."""
    value = text.strip()
    if source_format == SubtitleFormat.WEBVTT:
        return value.replace(".", ",")
    if source_format == SubtitleFormat.ASS:
        match = _ASS_TIME_RE.match(value)
        if not match:
            return text
        hours, minutes, seconds, centis = match.groups()
        return f"{int(hours):02d}:{int(minutes):02d}:{int(seconds):02d},{centis}0"
    return value


def normalize_timestamp(timestamp: str) -> str:
    """Expand a parseable timestamp to full ``HH:MM:SS,mmm`` form.

    The hour-less WebVTT form (``01:02,500`` once the separator is swapped)
    gains its hour field. Values that do not parse are returned unchanged.
    """
    if _CANONICAL_RE.match(timestamp.strip()):
        return timestamp.strip()
    ms = timestamp_to_ms(timestamp)
    if ms is None:
        return timestamp
    return ms_to_timestamp(ms)


def from_canonical(timestamp: str, target_format: SubtitleFormat) -> str:
    """Convert a canonical timestamp to the notation of ``target_format``."""
    if target_format == SubtitleFormat.WEBVTT:
        return timestamp.replace(",", ".")
    if target_format == SubtitleFormat.ASS:
        match = _CANONICAL_RE.match(normalize_timestamp(timestamp))
        if not match:
            return timestamp
        hours, minutes, seconds, millis = match.groups()
        return f"{int(hours)}:{minutes}:{seconds}.{int(millis) // 10:02d}"
    return normalize_timestamp(timestamp)


def timestamp_to_ms(timestamp: str) -> Optional[int]:
    """Return the millisecond value of a canonical (or WebVTT) timestamp, or None."""
    match = _MS_RE.match(timestamp.strip())
    if not match:
        return None
    hours, minutes, seconds, millis = match.groups()
    return (
        int(hours or 0) * 3_600_000
        + int(minutes) * 60_000
        + int(seconds) * 1000
        + int(millis.ljust(3, "0"))
    )


def ms_to_timestamp(ms: int) -> str:
    """Render milliseconds as a canonical timestamp."""
    if ms < 0:
        ms = 0
    hours, rest = divmod(ms, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    seconds, millis = divmod(rest, 1000)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d},{millis:03d}"


def split_time_line(line: str) -> Optional[Tuple[str, str, str]]:
    """Split ``start --> end [settings]`` into its three parts.

    Returns None when the line carries no arrow.
    """
    if ARROW not in line:
        return None
    start, _, rest = line.partition(ARROW)
    parts = rest.strip().split(None, 1)
    end = parts[0] if parts else ""
    settings = parts[1].strip() if len(parts) > 1 else ""
    return start.strip(), end, settings


def parse_time_line(line: str, source_format: SubtitleFormat) -> Optional[TimeRange]:
    """Parse a native time line into a canonical TimeRange."""
    parts = split_time_line(line)
    if parts is None:
        return None
    start, end, settings = parts
    return TimeRange(
        to_canonical(start, source_format),
        to_canonical(end, source_format),
        settings,
    )


def _settings_fit(settings: str, target_format: SubtitleFormat) -> bool:
    # SRT keeps only display coordinates; WebVTT keeps cue settings.
    is_coordinates = bool(_SRT_COORDINATES_RE.match(settings))
    if target_format == SubtitleFormat.SRT:
        return is_coordinates
    if target_format == SubtitleFormat.WEBVTT:
        return not is_coordinates
    return False


def format_time_line(time_range: TimeRange, target_format: SubtitleFormat) -> str:
    """Render a TimeRange as a native ``start --> end`` line."""
    start = from_canonical(time_range.start, target_format)
    end = from_canonical(time_range.end, target_format)
    line = f"{start} {ARROW} {end}"
    if time_range.settings and _settings_fit(time_range.settings, target_format):
        line = f"{line} {time_range.settings}"
    return line


def placeholder_range() -> TimeRange:
    return TimeRange(PLACEHOLDER_START, PLACEHOLDER_END)
