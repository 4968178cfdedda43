"""
Completion Service Client

This module wraps the OpenAI async client behind the small streaming
contract the requester needs: start a streaming chat completion for one
user message, iterate its text fragments, and close it.

Architecture:
    - Uses openai.AsyncOpenAI for request framing and SSE parsing
    - Supports dependency injection of the client factory (for testability)
    - Async/await pattern for non-blocking I/O operations
"""

import logging
from typing import Any, AsyncIterator, Callable, Optional

from openai import AsyncOpenAI

from .config import DEFAULT_MODEL

logger = logging.getLogger(__name__)


class CompletionStream:
    """
    Async iterator over the text fragments of one streaming completion.

    Chunks that carry no choices or an empty delta are skipped, so every
    yielded value is a non-empty string.
    """

    def __init__(self, raw_stream: Any):
        self._raw = raw_stream
        self._iter: Optional[AsyncIterator[Any]] = None
        self._closed = False

    def __aiter__(self) -> "CompletionStream":
        return self

    async def __anext__(self) -> str:
        if self._iter is None:
            self._iter = self._raw.__aiter__()
        while True:
            chunk = await self._iter.__anext__()
            if not chunk.choices:
                continue
            content = chunk.choices[0].delta.content
            if content:
                return content

    async def close(self) -> None:
        """Close the underlying HTTP response."""
        if self._closed:
            return
        self._closed = True
        await self._raw.close()


class CompletionClient:
    """
    Streaming chat completion client.

    Attributes:
        model: Model identifier sent with every request
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: Optional[str] = None,
        client_factory: Optional[Callable[..., Any]] = None,
    ):
        """
        Initialize the completion client.

        Args:
            api_key: Completion service credential
            model: Model identifier
            base_url: Optional API endpoint override
            client_factory: Optional factory for the underlying API client
                            (for dependency injection/testing)
        """
        self.model = model
        factory = client_factory or AsyncOpenAI
        self._client = factory(api_key=api_key, base_url=base_url)
        self._closed = False

        logger.info("CompletionClient initialized for model: %s", model)

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def stream_completion(self, content: str) -> CompletionStream:
        """
        Start a streaming completion with content as the only user message.

        Args:
            content: The submitted message

        Returns:
            CompletionStream yielding text fragments

        Raises:
            ConnectionError: If the client has been closed
            openai.OpenAIError: If the request cannot be started
        """
        if self._closed:
            raise ConnectionError("Completion client is closed")

        logger.info("Requesting streaming completion from %s", self.model)
        raw_stream = await self._client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": content}],
            stream=True,
        )
        return CompletionStream(raw_stream)

    async def close(self) -> None:
        """Release the underlying HTTP client."""
        if self._closed:
            return
        self._closed = True
        await self._client.close()
        logger.info("CompletionClient closed")
