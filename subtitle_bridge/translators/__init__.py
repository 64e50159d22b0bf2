"""Translation backends for the subtitle bridge."""

from .base import BaseTranslator
from .chat_translator import ChatCompletionsTranslator, MistralTranslator
from .translator_factory import TranslatorFactory

__all__ = [
    'BaseTranslator',
    'ChatCompletionsTranslator',
    'MistralTranslator',
    'TranslatorFactory',
]
