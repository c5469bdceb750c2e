"""LLM provider abstraction and the Anthropic Claude backend."""

from typing import AsyncIterator, Protocol

import anthropic

from ..errors import ProviderError
from ..models import AnthropicConfig

DEFAULT_MAX_TOKENS = 4096


class ILLMProvider(Protocol):
    """Abstraction for text generation backends."""

    async def generate(self, prompt: str) -> str:
        """Generate a full completion for a single user prompt."""
        ...

    def generate_stream(self, prompt: str) -> AsyncIterator[str]:
        """Yield completion text chunks in arrival order.

        The iterator is lazy, finite and cannot be restarted. Chunks already
        yielded stay valid even if the stream later raises ProviderError.
        """
        ...

    async def aclose(self) -> None:
        """Release the underlying client."""
        ...


class AnthropicProvider:
    """Anthropic Claude API provider."""

    name = "anthropic"

    def __init__(self, config: AnthropicConfig, max_tokens: int = DEFAULT_MAX_TOKENS):
        config.validate()
        self._model = config.model
        self._max_tokens = max_tokens
        self._client = anthropic.AsyncAnthropic(api_key=config.api_key)

    @property
    def model(self) -> str:
        return self._model

    def _messages(self, prompt: str) -> list[dict]:
        return [{"role": "user", "content": prompt}]

    async def generate(self, prompt: str) -> str:
        """Generate completion using Claude API."""
        try:
            response = await self._client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                messages=self._messages(prompt),
            )
        except Exception as e:
            raise ProviderError(f"anthropic generation failed: {e}") from e

        if not response.content:
            raise ProviderError("no response from anthropic")
        text = next((block.text for block in response.content if block.type == "text"), "")
        if not text:
            raise ProviderError("empty response from anthropic")
        return text

    async def generate_stream(self, prompt: str) -> AsyncIterator[str]:
        """Stream text deltas from Claude API."""
        try:
            stream = await self._client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                messages=self._messages(prompt),
                stream=True,
            )
        except Exception as e:
            raise ProviderError(f"anthropic stream failed: {e}") from e

        try:
            async for event in stream:
                if event.type == "content_block_delta" and event.delta.type == "text_delta":
                    yield event.delta.text
        except Exception as e:
            raise ProviderError(f"anthropic stream error: {e}") from e
        finally:
            await stream.close()

    async def aclose(self) -> None:
        await self._client.close()
