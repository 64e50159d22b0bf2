"""Source-language detection for ``source_language="auto"``."""

import logging
import re
from typing import Sequence

from langdetect import DetectorFactory, LangDetectException, detect

logger = logging.getLogger(__name__)

# Make langdetect deterministic across runs.
DetectorFactory.seed = 0

DEFAULT_LANGUAGE = "English"

# ISO 639-1 codes returned by langdetect mapped to prompt-friendly names.
LANGUAGE_NAMES = {
    'ar': 'Arabic',
    'bg': 'Bulgarian',
    'bn': 'Bengali',
    'ca': 'Catalan',
    'cs': 'Czech',
    'da': 'Danish',
    'de': 'German',
    'el': 'Greek',
    'en': 'English',
    'es': 'Spanish',
    'et': 'Estonian',
    'fa': 'Persian',
    'fi': 'Finnish',
    'fr': 'French',
    'he': 'Hebrew',
    'hi': 'Hindi',
    'hr': 'Croatian',
    'hu': 'Hungarian',
    'id': 'Indonesian',
    'it': 'Italian',
    'ja': 'Japanese',
    'ko': 'Korean',
    'lt': 'Lithuanian',
    'lv': 'Latvian',
    'nl': 'Dutch',
    'no': 'Norwegian',
    'pl': 'Polish',
    'pt': 'Portuguese',
    'ro': 'Romanian',
    'ru': 'Russian',
    'sk': 'Slovak',
    'sl': 'Slovenian',
    'sv': 'Swedish',
    'th': 'Thai',
    'tl': 'Tagalog',
    'tr': 'Turkish',
    'uk': 'Ukrainian',
    'vi': 'Vietnamese',
    'zh-cn': 'Simplified Chinese',
    'zh-tw': 'Traditional Chinese',
}


def detect_language(texts: Sequence[str], sample_size: int = 100) -> str:
    """Detect the language of subtitle texts and return its English name.

    Falls back to English when detection fails or the code is unknown.
    """
    text = " ".join(texts[:sample_size])
    text = re.sub(r'<[^>]+>', '', text)
    try:
        code = detect(text)
    except LangDetectException as e:
        logger.warning(f"Language detection failed: {e}. Defaulting to {DEFAULT_LANGUAGE}.")
        return DEFAULT_LANGUAGE
    return LANGUAGE_NAMES.get(code, DEFAULT_LANGUAGE)


def language_slug(name: str) -> str:
    """Turn a language name into a filename-friendly suffix."""
    slug = re.sub(r'[^a-z0-9]+', '-', name.strip().lower()).strip('-')
    return slug or 'translated'
