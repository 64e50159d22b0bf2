"""Core functionality for the subtitle bridge."""

# models and exceptions first: formats and translators import them directly.
from .exceptions import (
    SubtitleBridgeError,
    TranslationError,
    BackendError,
    ResponseFormatError,
    TranslationCountMismatch,
    BatchTranslationError,
    ReassemblyError,
    ConfigurationError,
    FileError,
    ValidationError,
    UnsupportedFormatError,
    EmptyDocumentError,
)
from .models import (
    SubtitleFormat,
    TimeRange,
    SubtitleEntry,
    SubtitleDocument,
    TranslationBatch,
    TranslationContext,
    BatchResult,
)
from .config import TranslationConfig, TranslationStyle
from .repair import RepairReport, repair_document
from .batching import BatchTranslator, partition, parse_translations
from .translator import Translator, TranslationResult, TranslationStats, RunState

__all__ = [
    'SubtitleBridgeError', 'TranslationError', 'BackendError', 'ResponseFormatError',
    'TranslationCountMismatch', 'BatchTranslationError', 'ReassemblyError',
    'ConfigurationError', 'FileError', 'ValidationError', 'UnsupportedFormatError',
    'EmptyDocumentError',
    'SubtitleFormat', 'TimeRange', 'SubtitleEntry', 'SubtitleDocument',
    'TranslationBatch', 'TranslationContext', 'BatchResult',
    'TranslationConfig', 'TranslationStyle',
    'RepairReport', 'repair_document',
    'BatchTranslator', 'partition', 'parse_translations',
    'Translator', 'TranslationResult', 'TranslationStats', 'RunState',
]
