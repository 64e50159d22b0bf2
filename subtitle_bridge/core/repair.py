"""Renumbering and timing checks for parsed documents."""

import logging
from dataclasses import dataclass, field
from typing import List

from ..formats.timecodes import timestamp_to_ms
from .models import SubtitleDocument

logger = logging.getLogger(__name__)


@dataclass
class RepairReport:
    """Diagnostics from a repair pass.

    ``overlaps`` counts consecutive pairs whose first entry ends after the
    second one starts; ``inverted`` counts entries that end before they start.
    Positions are 0-based entry indices.
    """
    renumbered: int = 0
    overlaps: int = 0
    inverted: int = 0
    overlap_positions: List[int] = field(default_factory=list)
    inverted_positions: List[int] = field(default_factory=list)

    @property
    def anomalies(self) -> int:
        return self.overlaps + self.inverted


def repair_document(document: SubtitleDocument) -> RepairReport:
    """Renumber entries densely from 1 and count timing anomalies.

    Entries are never reordered and their text and time ranges are left
    untouched. Timestamps that cannot be parsed are ignored by the checks.
    """
    report = RepairReport()

    for number, entry in enumerate(document, start=1):
        if entry.sequence_number != number:
            report.renumbered += 1
            entry.sequence_number = number

    previous_end = None
    for position, entry in enumerate(document):
        start = timestamp_to_ms(entry.time_range.start)
        end = timestamp_to_ms(entry.time_range.end)

        if start is not None and end is not None and start > end:
            report.inverted += 1
            report.inverted_positions.append(position)

        if previous_end is not None and start is not None and previous_end > start:
            report.overlaps += 1
            report.overlap_positions.append(position)

        previous_end = end

    if report.renumbered:
        logger.info(f"Renumbered {report.renumbered} of {len(document)} entries")
    if report.overlaps:
        logger.warning(f"Found {report.overlaps} overlapping entries (previous end after next start)")
    if report.inverted:
        logger.warning(f"Found {report.inverted} entries ending before they start")

    return report
