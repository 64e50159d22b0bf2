"""Advanced SubStation Alpha (.ass/.ssa) parsing and generation.

Only ``Dialogue:`` lines of the ``[Events]`` section are read. The field
order comes from the section's ``Format:`` line; a dialogue line that lacks
any of Start, End or Text is skipped rather than failing the file.
"""

import logging
import re
from typing import Dict, List, Optional

from ..core.models import LINE_BREAK, SubtitleDocument, SubtitleEntry, SubtitleFormat, TimeRange
from .srt import normalize_newlines
from .timecodes import from_canonical, to_canonical

logger = logging.getLogger(__name__)

EVENTS_SECTION = "[Events]"

# Field order used when [Events] carries no Format line.
DEFAULT_EVENT_FORMAT = [
    "Layer", "Start", "End", "Style", "Name",
    "MarginL", "MarginR", "MarginV", "Effect", "Text",
]

_OVERRIDE_TAG_RE = re.compile(r"\{[^}]*\}")
_FORCED_BREAK = "\\N"

ASS_HEADER = "\n".join([
    "[Script Info]",
    "ScriptType: v4.00+",
    "PlayResX: 1920",
    "PlayResY: 1080",
    "ScaledBorderAndShadow: yes",
    "",
    "[V4+ Styles]",
    "Format: Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, "
    "OutlineColour, BackColour, Bold, Italic, Underline, StrikeOut, "
    "ScaleX, ScaleY, Spacing, Angle, BorderStyle, Outline, Shadow, "
    "Alignment, MarginL, MarginR, MarginV, Encoding",
    "Style: Default,Arial,48,&H00FFFFFF,&H000000FF,&H00000000,&H64000000,"
    "0,0,0,0,100,100,0,0,1,2,0,2,10,10,30,1",
    "",
    EVENTS_SECTION,
    "Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text",
])


def clean_dialogue_text(text: str) -> str:
    """Remove ``{...}`` override blocks and turn ``\\N`` into line breaks."""
    return _OVERRIDE_TAG_RE.sub("", text).replace(_FORCED_BREAK, LINE_BREAK).strip()


def parse_dialogue(line: str, field_order: List[str]) -> Optional[Dict[str, str]]:
    """Split one ``Dialogue:`` line into its named fields.

    Returns None if Start, End or Text cannot be located.
    """
    positions = {name: idx for idx, name in enumerate(field_order)}
    if not all(name in positions for name in ("Start", "End", "Text")):
        return None

    _, _, payload = line.partition(":")
    # Text is the last field and may itself contain commas.
    values = payload.strip().split(",", len(field_order) - 1)
    if len(values) < len(field_order):
        return None

    return {
        "Start": values[positions["Start"]].strip(),
        "End": values[positions["End"]].strip(),
        "Text": values[positions["Text"]],
    }


def parse_ass(content: str) -> SubtitleDocument:
    """Parse the [Events] section of an ASS/SSA script."""
    entries: List[SubtitleEntry] = []
    in_events = False
    field_order = list(DEFAULT_EVENT_FORMAT)

    for line_number, raw_line in enumerate(normalize_newlines(content).split("\n"), start=1):
        line = raw_line.strip()
        if line.startswith("["):
            in_events = line.lower() == EVENTS_SECTION.lower()
            continue
        if not in_events:
            continue

        if line.startswith("Format:"):
            field_order = [name.strip() for name in line[len("Format:"):].split(",")]
        elif line.startswith("Dialogue:"):
            fields = parse_dialogue(line, field_order)
            if fields is None:
                logger.debug(f"Skipping malformed dialogue at line {line_number}")
                continue
            text = clean_dialogue_text(fields["Text"])
            if not text:
                logger.debug(f"Skipping dialogue without text at line {line_number}")
                continue
            time_range = TimeRange(
                to_canonical(fields["Start"], SubtitleFormat.ASS),
                to_canonical(fields["End"], SubtitleFormat.ASS),
            )
            entries.append(SubtitleEntry(len(entries) + 1, time_range, text))

    return SubtitleDocument(entries, SubtitleFormat.ASS)


def generate_ass(document: SubtitleDocument) -> str:
    """Render entries as a minimal ASS script with a single Default style."""
    lines = [ASS_HEADER]
    for entry in document:
        start = from_canonical(entry.time_range.start, SubtitleFormat.ASS)
        end = from_canonical(entry.time_range.end, SubtitleFormat.ASS)
        text = entry.text.replace(LINE_BREAK, _FORCED_BREAK)
        lines.append(f"Dialogue: 0,{start},{end},Default,,0,0,0,,{text}")
    return "\n".join(lines) + "\n"
