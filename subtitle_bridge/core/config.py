"""Immutable run configuration passed through every translation call."""

from dataclasses import dataclass, replace
from enum import Enum

from .exceptions import ConfigurationError

DEFAULT_MODEL = "mistral-small-latest"


class TranslationStyle(str, Enum):
    """Tone directives understood by the prompt builder."""
    NATURAL = "natural"
    FORMAL = "formal"
    CASUAL = "casual"
    LITERAL = "literal"

    @classmethod
    def parse(cls, value) -> "TranslationStyle":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(style.value for style in cls)
            raise ConfigurationError(f"Unknown translation style '{value}'. Choose from: {choices}")


@dataclass(frozen=True)
class TranslationConfig:
    """Configuration for subtitle translation."""
    model: str = DEFAULT_MODEL
    source_language: str = "English"
    target_language: str = "Traditional Chinese"
    style: TranslationStyle = TranslationStyle.NATURAL
    batch_size: int = 10
    concurrency: int = 5
    max_retries: int = 3
    retry_delay: float = 2.0
    request_delay: float = 0.0
    autofix: bool = False
    dry_run: bool = False
    context_sample_size: int = 50
    temperature: float = 0.3
    max_tokens: int = 4000
    context_max_tokens: int = 1000

    def __post_init__(self):
        object.__setattr__(self, "style", TranslationStyle.parse(self.style))
        if self.batch_size < 1:
            raise ConfigurationError(f"batch_size must be at least 1, got {self.batch_size}")
        if self.concurrency < 1:
            raise ConfigurationError(f"concurrency must be at least 1, got {self.concurrency}")
        if self.max_retries < 0:
            raise ConfigurationError(f"max_retries cannot be negative, got {self.max_retries}")
        if self.retry_delay < 0 or self.request_delay < 0:
            raise ConfigurationError("Delays cannot be negative")
        if self.context_sample_size < 1:
            raise ConfigurationError(
                f"context_sample_size must be at least 1, got {self.context_sample_size}"
            )

    def updated(self, **changes) -> "TranslationConfig":
        """Return a copy with ``changes`` applied."""
        return replace(self, **changes)
