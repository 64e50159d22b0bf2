"""Chat-completions backends (OpenAI-compatible HTTP APIs such as Mistral)."""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import aiohttp

from ..core.exceptions import BackendError, ResponseFormatError
from .base import BaseTranslator

logger = logging.getLogger(__name__)

MISTRAL_API_URL = "https://api.mistral.ai/v1/chat/completions"
OPENAI_API_URL = "https://api.openai.com/v1/chat/completions"


class ChatCompletionsTranslator(BaseTranslator):
    """Backend speaking the ``/chat/completions`` protocol over aiohttp."""

    default_endpoint = OPENAI_API_URL
    api_key_env = "OPENAI_API_KEY"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize the chat backend.

        Args:
            config: Configuration dictionary with the following keys:
                - endpoint: Full URL of the chat completions endpoint
                - api_key: Bearer token sent in the Authorization header
                - timeout: Request timeout in seconds
        """
        super().__init__(config)
        self.endpoint = self.config.get('endpoint') or self.default_endpoint
        self.api_key = self.config.get('api_key') or ''
        self.timeout = aiohttp.ClientTimeout(total=float(self.config.get('timeout', 120)))
        self.session = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create an aiohttp client session."""
        if self.session is None or self.session.closed:
            headers = {'Content-Type': 'application/json'}
            if self.api_key:
                headers['Authorization'] = f"Bearer {self.api_key}"
            self.session = aiohttp.ClientSession(timeout=self.timeout, headers=headers)
        return self.session

    async def chat(
        self,
        messages: List[Dict[str, str]],
        model: str,
        temperature: float = 0.3,
        max_tokens: Optional[int] = None,
    ) -> str:
        payload: Dict[str, Any] = {
            'model': model,
            'messages': messages,
            'temperature': temperature,
        }
        if max_tokens:
            payload['max_tokens'] = max_tokens

        session = await self._get_session()
        try:
            async with session.post(self.endpoint, json=payload) as response:
                if response.status < 200 or response.status >= 300:
                    error_text = await response.text()
                    raise BackendError(
                        f"Chat request failed with status {response.status}: {error_text[:500]}",
                        status=response.status,
                    )
                try:
                    data = await response.json(content_type=None)
                except ValueError as e:
                    raise ResponseFormatError(f"Backend reply is not valid JSON: {e}") from e
        except asyncio.TimeoutError as e:
            raise BackendError("Chat request timed out") from e
        except aiohttp.ClientError as e:
            raise BackendError(f"Chat request failed: {e}") from e

        return self._extract_content(data)

    @staticmethod
    def _extract_content(data: Any) -> str:
        """Pull ``choices[0].message.content`` out of a completions payload."""
        if not isinstance(data, dict):
            raise ResponseFormatError(f"Unexpected response format: {str(data)[:200]}")
        choices = data.get('choices')
        if not choices:
            raise ResponseFormatError(f"Response missing 'choices', got keys: {list(data.keys())}")

        first = choices[0]
        content = None
        message = first.get('message') if isinstance(first, dict) else None
        if isinstance(message, dict):
            content = message.get('content')
        if content is None and isinstance(first, dict):
            content = first.get('text')

        if not isinstance(content, str) or not content.strip():
            raise ResponseFormatError("Response has no message content")
        return content

    async def close(self):
        """Close the HTTP session."""
        if self.session and not self.session.closed:
            await self.session.close()
            self.session = None


class MistralTranslator(ChatCompletionsTranslator):
    """Chat backend preset for the Mistral AI API."""

    default_endpoint = MISTRAL_API_URL
    api_key_env = "MISTRAL_API_KEY"
