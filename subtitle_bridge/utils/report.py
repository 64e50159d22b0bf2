"""Human-readable run report: statistics plus original/translated samples."""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Union

logger = logging.getLogger(__name__)


def format_report(result, sample_size: int = 20) -> str:
    """Render a TranslationResult as plain text."""
    stats = result.stats
    lines: List[str] = [
        "Subtitle translation report",
        f"Generated: {datetime.now().isoformat(timespec='seconds')}",
        "",
    ]
    if result.input_file is not None:
        lines.append(f"Input:  {result.input_file}")
    if result.output_file is not None:
        lines.append(f"Output: {result.output_file}")
    lines.append(f"Languages: {result.source_language} -> {result.target_language}")
    if result.dry_run:
        lines.append("Mode: dry run (nothing was translated)")
    lines.append("")

    lines.append("Statistics")
    lines.append("----------")
    lines.append(f"Entries:              {stats.entries}")
    lines.append(f"Batches:              {stats.total_batches} "
                 f"({stats.succeeded_batches} ok, {stats.failed_batches} failed)")
    lines.append(f"Changed entries:      {stats.changed_entries}")
    lines.append(f"Original chars:       {stats.original_chars}")
    lines.append(f"Translated chars:     {stats.translated_chars}")
    lines.append(f"Expansion ratio:      {stats.expansion_ratio:.2f}")
    lines.append(f"Average length:       {stats.average_original_length:.1f} -> "
                 f"{stats.average_translated_length:.1f}")
    if result.repair is not None:
        lines.append(f"Timing overlaps:      {stats.overlaps}")
        lines.append(f"Inverted ranges:      {stats.inverted}")
    lines.append(f"Elapsed:              {stats.elapsed_seconds:.1f}s")

    if result.context is not None:
        lines.extend(["", "Context", "-------", result.context.summary])

    if result.batch_errors:
        lines.extend(["", "Failed batches", "--------------"])
        for index, error in sorted(result.batch_errors.items()):
            lines.append(f"Batch {index + 1}: {error}")

    samples = result.document.entries[:sample_size]
    if samples:
        lines.extend(["", f"Sample ({len(samples)} of {len(result.document)} entries)", "------"])
        for entry in samples:
            lines.append(f"#{entry.sequence_number} {entry.time_range}")
            lines.append(f"  - {entry.original_text}")
            lines.append(f"  + {entry.text}")

    return "\n".join(lines) + "\n"


def write_report(result, path: Union[str, Path], sample_size: int = 20) -> Path:
    """Write the report for ``result`` to ``path``, creating parent directories."""
    report_path = Path(path)
    report_path.parent.mkdir(parents=True, exist_ok=True)
    report_path.write_text(format_report(result, sample_size), encoding='utf-8')
    logger.info(f"Report written to {report_path}")
    return report_path
