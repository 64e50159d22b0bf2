"""One-off document synopsis shared by all batch requests."""

import logging

from ..translators.base import BaseTranslator
from .config import TranslationConfig
from .models import SubtitleDocument, TranslationContext
from .prompts import FALLBACK_CONTEXT, build_context_prompt, user_message

logger = logging.getLogger(__name__)


async def build_context(
    backend: BaseTranslator,
    document: SubtitleDocument,
    config: TranslationConfig,
) -> TranslationContext:
    """Summarise the first ``context_sample_size`` entries of ``document``.

    Any failure, including an empty reply, yields the fixed fallback context.
    """
    sample = [entry.text for entry in document.entries[:config.context_sample_size]]
    prompt = build_context_prompt(sample, config)
    try:
        summary = await backend.chat(
            user_message(prompt),
            model=config.model,
            temperature=config.temperature,
            max_tokens=config.context_max_tokens,
        )
    except Exception as e:
        logger.warning(f"Could not build translation context, using fallback: {e}")
        return TranslationContext(FALLBACK_CONTEXT, is_fallback=True)

    summary = (summary or "").strip()
    if not summary:
        logger.warning("Context summary was empty, using fallback")
        return TranslationContext(FALLBACK_CONTEXT, is_fallback=True)
    return TranslationContext(summary)
