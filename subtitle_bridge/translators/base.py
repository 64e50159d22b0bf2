"""Base backend interface for the subtitle bridge."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class BaseTranslator(ABC):
    """Abstract base class for all translation backends.

    A backend takes role-tagged chat messages and returns the model's reply
    as free-form text. Parsing that text is the caller's job.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize the backend with the given configuration.

        Args:
            config: Configuration dictionary for the backend
        """
        self.config = config or {}

    @abstractmethod
    async def chat(
        self,
        messages: List[Dict[str, str]],
        model: str,
        temperature: float = 0.3,
        max_tokens: Optional[int] = None,
    ) -> str:
        """Send a chat request and return the reply text.

        Args:
            messages: Role-tagged messages, e.g. ``[{"role": "user", "content": "..."}]``
            model: Model identifier understood by the backend
            temperature: Sampling temperature
            max_tokens: Upper bound on reply tokens, if the backend supports one

        Returns:
            The reply content

        Raises:
            BackendError: If the request fails or the backend answers non-2xx
            ResponseFormatError: If the reply payload has no usable content
        """
        pass

    async def close(self):
        """Close any resources used by the backend."""
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
