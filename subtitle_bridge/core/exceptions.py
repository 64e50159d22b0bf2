"""Custom exceptions for the subtitle bridge."""

from typing import Optional


class SubtitleBridgeError(Exception):
    """Base exception for all subtitle bridge errors."""
    pass


class TranslationError(SubtitleBridgeError):
    """Base exception for translation errors."""
    pass


class BackendError(TranslationError):
    """Exception raised when the translation backend cannot be reached or answers non-2xx."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class ResponseFormatError(TranslationError):
    """Exception raised when a backend reply cannot be turned into translations."""
    pass


class TranslationCountMismatch(ResponseFormatError):
    """Exception raised when a reply holds a different number of lines than the batch."""

    def __init__(self, expected: int, actual: int):
        super().__init__(f"Expected {expected} translations, got {actual}")
        self.expected = expected
        self.actual = actual


class BatchTranslationError(TranslationError):
    """Exception raised when a batch still fails after all retries."""

    def __init__(self, batch_index: int, attempts: int, message: str):
        super().__init__(f"Batch {batch_index + 1} failed after {attempts} attempt(s): {message}")
        self.batch_index = batch_index
        self.attempts = attempts


class ReassemblyError(TranslationError):
    """Exception raised when the reassembled document does not match the input length."""
    pass


class ConfigurationError(SubtitleBridgeError):
    """Exception raised for configuration errors."""
    pass


class FileError(SubtitleBridgeError):
    """Exception raised for file-related errors."""
    pass


class ValidationError(SubtitleBridgeError):
    """Exception raised for validation errors."""
    pass


class UnsupportedFormatError(ValidationError):
    """Exception raised when a path or content maps to no known subtitle format."""
    pass


class EmptyDocumentError(ValidationError):
    """Exception raised when parsing yields no subtitle entries."""
    pass
