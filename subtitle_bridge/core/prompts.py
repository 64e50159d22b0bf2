"""Prompt text for context summaries and batch translation."""

from typing import Dict, List, Sequence

from .config import TranslationConfig, TranslationStyle
from .models import LINE_BREAK

# Multi-line entries travel as a single numbered line.
ESCAPED_LINE_BREAK = "\\n"

FALLBACK_CONTEXT = (
    "General video content. Keep the translation natural and faithful to the "
    "original tone."
)

STYLE_DIRECTIVES: Dict[TranslationStyle, str] = {
    TranslationStyle.NATURAL: "Use fluent, natural phrasing a native speaker would use in everyday speech.",
    TranslationStyle.FORMAL: "Use a formal, polite register and avoid slang or contractions.",
    TranslationStyle.CASUAL: "Use a relaxed, conversational register; colloquialisms are welcome.",
    TranslationStyle.LITERAL: "Stay as close to the source wording as grammar allows.",
}


def user_message(content: str) -> List[Dict[str, str]]:
    return [{"role": "user", "content": content}]


def build_context_prompt(sample_texts: Sequence[str], config: TranslationConfig) -> str:
    """Ask for a short synopsis that will guide every batch."""
    sample = "\n".join(sample_texts)
    return (
        "Analyse the following subtitle excerpt and write a brief summary covering:\n"
        "1. Topic and genre of the content\n"
        "2. Main characters and specialised terminology\n"
        "3. Language style and tone\n"
        f"4. Cultural background a translator into {config.target_language} should keep in mind\n"
        "\n"
        "Subtitles:\n"
        f"{sample}\n"
        "\n"
        "Answer concisely."
    )


def build_batch_prompt(
    texts: Sequence[str],
    context: str,
    config: TranslationConfig,
) -> str:
    """Build the translation request for one batch.

    Lines are enumerated from 1 and the reply must be a JSON object holding
    exactly ``len(texts)`` strings.
    """
    numbered = "\n".join(
        f"{i}. {text.replace(LINE_BREAK, ESCAPED_LINE_BREAK)}"
        for i, text in enumerate(texts, start=1)
    )
    return (
        f"Translate the following {config.source_language} subtitles into "
        f"{config.target_language}.\n"
        "\n"
        "Context:\n"
        f"{context}\n"
        "\n"
        "Requirements:\n"
        "1. Keep the original meaning and tone\n"
        f"2. {STYLE_DIRECTIVES[config.style]}\n"
        "3. Keep specialised terminology accurate\n"
        "4. Keep line breaks inside a subtitle as \\n\n"
        f"5. Return exactly {len(texts)} translations, one per numbered line, in order\n"
        "\n"
        f"{config.source_language} subtitles:\n"
        f"{numbered}\n"
        "\n"
        "Answer with JSON only:\n"
        "{\n"
        '  "translations": [\n'
        '    "translation of line 1",\n'
        '    "translation of line 2",\n'
        "    ...\n"
        "  ]\n"
        "}"
    )
