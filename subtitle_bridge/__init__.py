"""Subtitle Bridge - convert subtitle files between formats and translate them with an LLM."""

# Version of the package
__version__ = "0.1.0"

# Import core functionality
from .core import (
    Translator,
    TranslationConfig,
    TranslationResult,
    TranslationStyle,
    SubtitleDocument,
    SubtitleEntry,
    SubtitleFormat,
)
from .formats import parse_subtitles, generate_subtitles, read_subtitle_file, write_subtitle_file
from .cli.main import main as cli_main

__all__ = [
    'Translator',
    'TranslationConfig',
    'TranslationResult',
    'TranslationStyle',
    'SubtitleDocument',
    'SubtitleEntry',
    'SubtitleFormat',
    'parse_subtitles',
    'generate_subtitles',
    'read_subtitle_file',
    'write_subtitle_file',
    'cli_main',
    '__version__',
]
