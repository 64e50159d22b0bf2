"""Batch partitioning and per-batch translation with retries."""

import asyncio
import json
import logging
import re
from typing import Awaitable, Callable, List, Optional

from ..formats.srt import collapse_blank_lines
from ..translators.base import BaseTranslator
from .config import TranslationConfig
from .exceptions import (
    BatchTranslationError,
    ResponseFormatError,
    TranslationCountMismatch,
)
from .models import LINE_BREAK, SubtitleDocument, TranslationBatch, TranslationContext
from .prompts import ESCAPED_LINE_BREAK, build_batch_prompt, user_message

logger = logging.getLogger(__name__)

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")
_NUMBERED_LINE_RE = re.compile(r"^\s*\d+\s*[.)]\s*(.+)$")
_QUOTED_LINE_RE = re.compile(r'^\s*"(.+)"\s*,?\s*$')
# "key": value lines of a JSON object are structure, not translations.
_JSON_KEY_LINE_RE = re.compile(r'^\s*"[^"]+"\s*:')

Sleep = Callable[[float], Awaitable[None]]


def partition(document: SubtitleDocument, batch_size: int) -> List[TranslationBatch]:
    """Split a document into contiguous batches of at most ``batch_size`` entries."""
    if batch_size < 1:
        raise ValueError(f"batch_size must be at least 1, got {batch_size}")
    entries = document.entries
    return [
        TranslationBatch(index, entries[start:start + batch_size])
        for index, start in enumerate(range(0, len(entries), batch_size))
    ]


def _restore_line_breaks(text: str) -> str:
    return collapse_blank_lines(text.replace(ESCAPED_LINE_BREAK, LINE_BREAK))


def _from_json(content: str) -> Optional[List[str]]:
    match = _JSON_OBJECT_RE.search(content)
    if not match:
        return None
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    translations = parsed.get("translations") if isinstance(parsed, dict) else None
    if not isinstance(translations, list):
        return None
    if not all(isinstance(item, str) for item in translations):
        return None
    return translations


def _from_lines(content: str) -> List[str]:
    found = []
    for line in content.split("\n"):
        if not line.strip() or _JSON_KEY_LINE_RE.match(line):
            continue
        match = _NUMBERED_LINE_RE.match(line) or _QUOTED_LINE_RE.match(line)
        if match:
            found.append(match.group(1).strip())
    return found


def parse_translations(content: str, expected: int) -> List[str]:
    """Extract exactly ``expected`` translations from a backend reply.

    The first ``{...}`` span is parsed as JSON and its ``translations`` array
    used when it holds ``expected`` strings. Otherwise numbered or quoted
    lines are collected, and accepted only if there are ``expected`` of them.

    Raises:
        TranslationCountMismatch: If a candidate list has the wrong length
        ResponseFormatError: If nothing resembling translations was found
    """
    from_json = _from_json(content)
    if from_json is not None and len(from_json) == expected:
        return [_restore_line_breaks(text) for text in from_json]

    from_lines = _from_lines(content)
    if len(from_lines) == expected:
        return [_restore_line_breaks(text) for text in from_lines]

    if from_json is not None:
        raise TranslationCountMismatch(expected, len(from_json))
    if from_lines:
        raise TranslationCountMismatch(expected, len(from_lines))
    raise ResponseFormatError(f"Could not find translations in reply: {content[:200]!r}")


class BatchTranslator:
    """Translates one batch per backend request, retrying with linear backoff."""

    def __init__(
        self,
        backend: BaseTranslator,
        config: TranslationConfig,
        sleep: Sleep = asyncio.sleep,
    ):
        self.backend = backend
        self.config = config
        self._sleep = sleep

    async def request_translations(self, batch: TranslationBatch, context: TranslationContext) -> List[str]:
        """Run a single attempt: one request, one parse."""
        prompt = build_batch_prompt(batch.texts(), context.summary, self.config)
        reply = await self.backend.chat(
            user_message(prompt),
            model=self.config.model,
            temperature=self.config.temperature,
            max_tokens=self.config.max_tokens,
        )
        return parse_translations(reply, len(batch))

    async def translate_batch(
        self,
        batch: TranslationBatch,
        context: TranslationContext,
        retries: Optional[int] = None,
    ) -> List[str]:
        """Translate ``batch``, returning one string per entry in order.

        Makes at most ``retries + 1`` attempts. After failed attempt ``k``
        the next one starts ``retry_delay * k`` seconds later.

        Raises:
            BatchTranslationError: When every attempt failed; chained to the last error
        """
        retries = self.config.max_retries if retries is None else retries
        attempts = retries + 1
        last_error: Optional[Exception] = None

        for attempt in range(1, attempts + 1):
            try:
                return await self.request_translations(batch, context)
            except Exception as e:
                last_error = e
                if attempt == attempts:
                    break
                delay = self.config.retry_delay * attempt
                logger.warning(
                    f"Batch {batch.index + 1} attempt {attempt}/{attempts} failed: {e}. "
                    f"Retrying in {delay:.1f}s"
                )
                await self._sleep(delay)

        raise BatchTranslationError(batch.index, attempts, str(last_error)) from last_error
