"""Core translator functionality for the subtitle bridge."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union
import asyncio
import logging
import time

from ..formats import output_format_for_path, read_subtitle_file, write_subtitle_file
from ..translators import BaseTranslator, TranslatorFactory
from ..utils.language import detect_language
from .batching import BatchTranslator, Sleep, partition
from .config import TranslationConfig
from .context import build_context
from .exceptions import (
    BatchTranslationError,
    ConfigurationError,
    EmptyDocumentError,
    ReassemblyError,
)
from .models import (
    BatchResult,
    SubtitleDocument,
    SubtitleEntry,
    TranslationBatch,
    TranslationContext,
)
from .repair import RepairReport, repair_document

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, BatchResult], None]


class RunState(str, Enum):
    """Stages of one translation run, in order."""
    CREATED = "created"
    PARSED = "parsed"
    REPAIRED = "repaired"
    CONTEXT_BUILT = "context_built"
    TRANSLATING = "translating"
    REASSEMBLED = "reassembled"
    WRITTEN = "written"


@dataclass
class TranslationStats:
    """Aggregate counters for a finished run."""
    entries: int = 0
    total_batches: int = 0
    succeeded_batches: int = 0
    failed_batches: int = 0
    original_chars: int = 0
    translated_chars: int = 0
    changed_entries: int = 0
    overlaps: int = 0
    inverted: int = 0
    elapsed_seconds: float = 0.0

    @property
    def expansion_ratio(self) -> float:
        if not self.original_chars:
            return 0.0
        return self.translated_chars / self.original_chars

    @property
    def average_original_length(self) -> float:
        return self.original_chars / self.entries if self.entries else 0.0

    @property
    def average_translated_length(self) -> float:
        return self.translated_chars / self.entries if self.entries else 0.0

    def as_dict(self) -> Dict[str, Any]:
        return {
            'entries': self.entries,
            'total_batches': self.total_batches,
            'succeeded_batches': self.succeeded_batches,
            'failed_batches': self.failed_batches,
            'original_chars': self.original_chars,
            'translated_chars': self.translated_chars,
            'expansion_ratio': round(self.expansion_ratio, 3),
            'average_original_length': round(self.average_original_length, 1),
            'average_translated_length': round(self.average_translated_length, 1),
            'changed_entries': self.changed_entries,
            'overlaps': self.overlaps,
            'inverted': self.inverted,
            'elapsed_seconds': round(self.elapsed_seconds, 2),
        }


@dataclass
class TranslationResult:
    """Result of a translation operation."""
    document: SubtitleDocument
    source_language: str
    target_language: str
    stats: TranslationStats
    context: Optional[TranslationContext] = None
    repair: Optional[RepairReport] = None
    batch_errors: Dict[int, str] = field(default_factory=dict)
    dry_run: bool = False
    input_file: Optional[Path] = None
    output_file: Optional[Path] = None

    @property
    def success(self) -> bool:
        return self.stats.failed_batches == 0


def reassemble(results: List[Optional[BatchResult]], expected_length: int) -> List[SubtitleEntry]:
    """Concatenate batch results in index order.

    Raises:
        ReassemblyError: If a slot is empty or the entry count changed
    """
    missing = [index for index, result in enumerate(results) if result is None]
    if missing:
        raise ReassemblyError(f"Batches without a result: {[i + 1 for i in missing]}")

    ordered = sorted(results, key=lambda result: result.index)
    entries = [entry for result in ordered for entry in result.entries]
    if len(entries) != expected_length:
        raise ReassemblyError(
            f"Reassembled {len(entries)} entries but the document has {expected_length}"
        )
    return entries


def compute_stats(
    document: SubtitleDocument,
    results: List[BatchResult],
    repair: Optional[RepairReport] = None,
) -> TranslationStats:
    """Count batches and characters of a reassembled document."""
    stats = TranslationStats(entries=len(document), total_batches=len(results))
    stats.succeeded_batches = sum(1 for result in results if result.succeeded)
    stats.failed_batches = stats.total_batches - stats.succeeded_batches
    for entry in document:
        stats.original_chars += len(entry.original_text)
        stats.translated_chars += len(entry.text)
        if entry.text != entry.original_text:
            stats.changed_entries += 1
    if repair is not None:
        stats.overlaps = repair.overlaps
        stats.inverted = repair.inverted
    return stats


class Translator:
    """Main translator class driving one document through the batch pipeline."""

    def __init__(
        self,
        config: Optional[TranslationConfig] = None,
        backend: Optional[BaseTranslator] = None,
        translator_type: str = 'mistral',
        backend_config: Optional[Dict[str, Any]] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        """Initialize the translator with the given configuration.

        Args:
            config: Run configuration; defaults to ``TranslationConfig()``
            backend: Ready backend instance; created from the factory when omitted
            translator_type: Factory key used when ``backend`` is omitted
            backend_config: Backend settings (endpoint, api_key, timeout)
            sleep: Coroutine used for backoff and request delays
        """
        self.config = config or TranslationConfig()
        self.state = RunState.CREATED
        self._sleep = sleep
        self.backend = backend or self._initialize_backend(translator_type, backend_config)

    def _initialize_backend(
        self,
        translator_type: str,
        backend_config: Optional[Dict[str, Any]],
    ) -> BaseTranslator:
        """Initialize the underlying backend."""
        try:
            return TranslatorFactory.create_translator(translator_type, backend_config or {})
        except Exception as e:
            logger.error(f"Failed to initialize translator: {e}")
            raise ConfigurationError(f"Failed to initialize translator: {e}") from e

    def _transition(self, state: RunState) -> None:
        logger.debug(f"Run state: {self.state.value} -> {state.value}")
        self.state = state

    def _resolve_config(self, document: SubtitleDocument) -> TranslationConfig:
        if self.config.source_language.strip().lower() != 'auto':
            return self.config
        detected = detect_language(document.texts())
        logger.info(f"Detected source language: {detected}")
        return self.config.updated(source_language=detected)

    async def _process_batch(
        self,
        batch_translator: BatchTranslator,
        batch: TranslationBatch,
        context: TranslationContext,
    ) -> BatchResult:
        try:
            translations = await batch_translator.translate_batch(batch, context)
        except BatchTranslationError as e:
            logger.error(f"Batch {batch.index + 1} kept original text: {e}")
            return BatchResult(batch.index, list(batch.entries), succeeded=False, error=str(e))

        entries = [entry.with_text(text) for entry, text in zip(batch.entries, translations)]
        return BatchResult(batch.index, entries)

    async def _run_pool(
        self,
        batch_translator: BatchTranslator,
        batches: List[TranslationBatch],
        context: TranslationContext,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> List[Optional[BatchResult]]:
        """Run batches through at most ``concurrency`` workers.

        Each worker writes only the slot addressed by its batch index, so
        completion order never affects the final order.
        """
        slots: List[Optional[BatchResult]] = [None] * len(batches)
        queue: asyncio.Queue = asyncio.Queue()
        for batch in batches:
            queue.put_nowait(batch)

        total = len(batches)
        completed = 0

        async def worker() -> None:
            nonlocal completed
            while True:
                try:
                    batch = queue.get_nowait()
                except asyncio.QueueEmpty:
                    return
                if batch.index > 0 and self.config.request_delay > 0:
                    await self._sleep(self.config.request_delay)

                result = await self._process_batch(batch_translator, batch, context)
                slots[batch.index] = result
                completed += 1

                progress = round(completed / total * 100)
                status = "done" if result.succeeded else "failed"
                logger.info(f"Batch {batch.index + 1}/{total} {status} ({progress}%)")
                if progress_callback is not None:
                    progress_callback(completed, total, result)

        workers = [
            asyncio.create_task(worker())
            for _ in range(min(self.config.concurrency, total))
        ]
        try:
            await asyncio.gather(*workers)
        except BaseException:
            for task in workers:
                task.cancel()
            raise
        return slots

    async def translate_document(
        self,
        document: SubtitleDocument,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> TranslationResult:
        """Translate ``document`` in place and return the run result.

        Raises:
            EmptyDocumentError: If the document has no entries
            ReassemblyError: If the reassembled document lost or gained entries
        """
        if not document:
            raise EmptyDocumentError("No subtitles found")
        self._transition(RunState.PARSED)
        started = time.monotonic()
        logger.info(f"Found {len(document)} subtitles")

        repair = None
        if self.config.autofix:
            repair = repair_document(document)
            self._transition(RunState.REPAIRED)

        config = self._resolve_config(document)
        batches = partition(document, config.batch_size)

        if config.dry_run:
            logger.info(
                f"Dry run: {len(batches)} batches of up to {config.batch_size} entries, "
                f"{config.source_language} -> {config.target_language}, nothing sent"
            )
            stats = compute_stats(document, [], repair)
            stats.total_batches = len(batches)
            stats.elapsed_seconds = time.monotonic() - started
            return TranslationResult(
                document=document,
                source_language=config.source_language,
                target_language=config.target_language,
                stats=stats,
                repair=repair,
                dry_run=True,
            )

        context = await build_context(self.backend, document, config)
        self._transition(RunState.CONTEXT_BUILT)

        logger.info(f"Translating {len(batches)} batches with concurrency {config.concurrency}")
        self._transition(RunState.TRANSLATING)
        batch_translator = BatchTranslator(self.backend, config, sleep=self._sleep)
        slots = await self._run_pool(batch_translator, batches, context, progress_callback)

        document.entries = reassemble(slots, len(document))
        self._transition(RunState.REASSEMBLED)

        results = [result for result in slots if result is not None]
        stats = compute_stats(document, results, repair)
        stats.elapsed_seconds = time.monotonic() - started
        if stats.failed_batches:
            logger.warning(f"{stats.failed_batches} of {stats.total_batches} batches kept their original text")

        return TranslationResult(
            document=document,
            source_language=config.source_language,
            target_language=config.target_language,
            stats=stats,
            context=context,
            repair=repair,
            batch_errors={result.index: result.error for result in results if not result.succeeded},
        )

    async def translate_file(
        self,
        input_file: Union[str, Path],
        output_file: Union[str, Path],
        progress_callback: Optional[ProgressCallback] = None,
    ) -> TranslationResult:
        """Translate a subtitle file and write the result in the output path's format.

        Raises:
            FileError: If the input file is missing or unreadable
            UnsupportedFormatError: If the output extension maps to no format
            EmptyDocumentError: If no subtitles could be parsed
        """
        input_path = Path(input_file)
        output_path = Path(output_file)
        output_format = output_format_for_path(output_path)

        document = read_subtitle_file(input_path)
        if not document:
            raise EmptyDocumentError(f"No subtitles found in {input_path}")

        result = await self.translate_document(document, progress_callback)
        result.input_file = input_path

        if result.dry_run:
            logger.info(f"Dry run: would write {output_format.value} to {output_path}")
            return result

        write_subtitle_file(result.document, output_path)
        self._transition(RunState.WRITTEN)
        result.output_file = output_path
        logger.info(f"Saved {len(result.document)} subtitles to {output_path}")
        return result

    async def close(self):
        """Close any resources used by the backend."""
        await self.backend.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
