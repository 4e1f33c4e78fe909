"""
Tagging service clients.

Two backends share one contract: send a system prompt plus a user message,
get back the raw JSON text of the reply. `OpenAITaggingClient` talks to any
OpenAI-compatible chat completions endpoint (DeepSeek by default);
`GeminiTaggingClient` talks to Gemini through google-genai.

Neither client retries. A failed request raises, and the caller decides what
a failure means for its batch.

File: llm/client.py
Created: 2026-10-13
Last Modified: 2026-10-18
"""

import asyncio
import logging
import os
import time
from typing import Optional, Protocol

from google import genai
from google.genai import types
from openai import AsyncOpenAI

log = logging.getLogger(__name__)

# Minimum spacing between requests from one client
MIN_REQUEST_INTERVAL = 0.1  # seconds

DEFAULT_BASE_URL = "https://api.deepseek.com"
DEFAULT_OPENAI_MODEL = "deepseek-chat"
DEFAULT_GEMINI_MODEL = "gemini-3-flash-preview"
DEFAULT_TIMEOUT = 60.0  # seconds


class TaggingClient(Protocol):
    """Anything that can answer a tagging request with JSON text."""

    async def complete_json(self, system_prompt: str, user_message: str) -> Optional[str]:
        ...

    @property
    def request_count(self) -> int:
        ...


class _RateLimitedClient:
    """Request spacing and counting shared by both backends."""

    def __init__(self):
        self._last_request_time = 0.0
        self._request_count = 0

    async def _rate_limit(self) -> None:
        """Enforce rate limiting between requests."""
        now = time.time()
        elapsed = now - self._last_request_time
        if elapsed < MIN_REQUEST_INTERVAL:
            await asyncio.sleep(MIN_REQUEST_INTERVAL - elapsed)
        self._last_request_time = time.time()
        self._request_count += 1

    @property
    def request_count(self) -> int:
        """Number of API requests made."""
        return self._request_count


class OpenAITaggingClient(_RateLimitedClient):
    """
    Client for an OpenAI-compatible chat completions API.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: str = DEFAULT_OPENAI_MODEL,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Initialize the client.

        Args:
            api_key: Bearer credential. If not provided, reads TAGGING_API_KEY.
            base_url: Endpoint base URL (defaults to DeepSeek)
            model: Chat model name
            timeout: Per-request timeout in seconds

        Raises:
            ValueError: If no API key provided or found in environment
        """
        super().__init__()
        self.api_key = api_key or os.environ.get("TAGGING_API_KEY")
        if not self.api_key:
            raise ValueError(
                "Tagging API key required. Set TAGGING_API_KEY environment variable "
                "or pass api_key parameter."
            )

        self.base_url = base_url or DEFAULT_BASE_URL
        self.model = model
        self.client = AsyncOpenAI(
            api_key=self.api_key,
            base_url=self.base_url,
            timeout=timeout,
            max_retries=0,
        )

    async def complete_json(self, system_prompt: str, user_message: str) -> Optional[str]:
        """
        Send one tagging request.

        Returns:
            The reply text, or None if the reply had no content
        """
        await self._rate_limit()

        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message},
            ],
            response_format={"type": "json_object"},
        )

        if not response.choices:
            log.warning("Tagging response had no choices")
            return None

        content = response.choices[0].message.content
        log.debug(f"Raw tagging response: {content}")
        return content.strip() if content else None


class GeminiTaggingClient(_RateLimitedClient):
    """
    Client for Gemini, asked to answer in JSON.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_GEMINI_MODEL,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Initialize the Gemini client.

        Args:
            api_key: Gemini API key. If not provided, reads from GEMINI_API_KEY env var.
            model: Gemini model name
            base_url: Optional endpoint override
            timeout: Per-request timeout in seconds

        Raises:
            ValueError: If no API key provided or found in environment
        """
        super().__init__()
        self.api_key = api_key or os.environ.get("GEMINI_API_KEY")
        if not self.api_key:
            raise ValueError(
                "Gemini API key required. Set GEMINI_API_KEY environment variable "
                "or pass api_key parameter."
            )

        self.model = model
        self.base_url = base_url
        # HttpOptions.timeout is in milliseconds
        http_options = types.HttpOptions(base_url=self.base_url, timeout=int(timeout * 1000))
        self.client = genai.Client(api_key=self.api_key, http_options=http_options)

    async def complete_json(self, system_prompt: str, user_message: str) -> Optional[str]:
        await self._rate_limit()

        response = await asyncio.to_thread(
            self.client.models.generate_content,
            model=self.model,
            contents=user_message,
            config=types.GenerateContentConfig(
                system_instruction=system_prompt,
                response_mime_type="application/json",
            ),
        )

        if not response.text:
            log.warning("Empty response from Gemini")
            return None

        log.debug(f"Raw tagging response: {response.text}")
        return response.text.strip()


def build_tagging_client(config) -> TaggingClient:
    """Create the tagging client for `config.provider`."""
    if config.provider == "openai":
        return OpenAITaggingClient(
            api_key=config.api_key,
            base_url=config.base_url,
            model=config.model or DEFAULT_OPENAI_MODEL,
            timeout=config.request_timeout,
        )
    if config.provider == "gemini":
        return GeminiTaggingClient(
            api_key=config.api_key,
            model=config.model or DEFAULT_GEMINI_MODEL,
            base_url=config.base_url,
            timeout=config.request_timeout,
        )
    raise ValueError(f"Unknown tagging provider: {config.provider!r} (expected 'openai' or 'gemini')")
