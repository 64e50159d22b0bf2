"""Registry of chat backends, keyed by the name used on the command line."""

from typing import Dict, Type, Optional, Any

from .base import BaseTranslator
from .chat_translator import ChatCompletionsTranslator, MistralTranslator


class TranslatorFactory:
    """Looks up chat backends by name and builds them from a settings dict.

    The CLI offers every registered name as a ``--translator`` choice and asks
    the registry which environment variable holds that backend's API key.
    """

    _translators: Dict[str, Type[BaseTranslator]] = {
        'mistral': MistralTranslator,
        'openai': ChatCompletionsTranslator,
    }

    @classmethod
    def register_translator(
        cls,
        translator_type: str,
        translator_class: Type[BaseTranslator]
    ) -> None:
        """Make a chat backend available under ``translator_type``.

        Raises:
            TypeError: If ``translator_class`` does not implement ``BaseTranslator.chat``
        """
        if not (isinstance(translator_class, type) and issubclass(translator_class, BaseTranslator)):
            raise TypeError(
                f"Backend for '{translator_type}' must subclass BaseTranslator, "
                f"got {translator_class!r}"
            )
        cls._translators[translator_type] = translator_class

    @classmethod
    def get_available_translators(cls) -> Dict[str, Type[BaseTranslator]]:
        """Snapshot of registered backend names and classes."""
        return dict(cls._translators)

    @classmethod
    def api_key_env(cls, translator_type: str) -> Optional[str]:
        """Environment variable holding the backend's bearer token, if it declares one."""
        translator_class = cls._translators.get(translator_type)
        return getattr(translator_class, 'api_key_env', None)

    @classmethod
    def create_translator(
        cls,
        translator_type: str,
        config: Optional[Dict[str, Any]] = None
    ) -> BaseTranslator:
        """Build the chat backend registered as ``translator_type``.

        ``config`` carries connection settings (``endpoint``, ``api_key``,
        ``timeout``); the model and sampling options travel with each
        ``chat`` call instead.

        Raises:
            ValueError: If no backend is registered under that name
        """
        translator_class = cls._translators.get(translator_type)
        if translator_class is None:
            choices = ', '.join(sorted(cls._translators))
            raise ValueError(f"Unknown translator type: {translator_type}. Choose from: {choices}")
        return translator_class(config or {})
