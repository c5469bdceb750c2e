"""OpenAI chat completions backend."""

from typing import AsyncIterator

import openai

from ..errors import ProviderError
from ..models import OpenAIConfig
from .llm_provider import DEFAULT_MAX_TOKENS


class OpenAIProvider:
    """OpenAI (or OpenAI-compatible endpoint) provider."""

    name = "openai"

    def __init__(self, config: OpenAIConfig, max_tokens: int = DEFAULT_MAX_TOKENS):
        config.validate()
        self._model = config.model
        self._max_tokens = max_tokens
        self._client = openai.AsyncOpenAI(
            api_key=config.api_key,
            base_url=config.api_endpoint,
        )

    @property
    def model(self) -> str:
        return self._model

    def _messages(self, prompt: str) -> list[dict]:
        return [{"role": "user", "content": prompt}]

    async def generate(self, prompt: str) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                max_tokens=self._max_tokens,
                messages=self._messages(prompt),
            )
        except Exception as e:
            raise ProviderError(f"openai generation failed: {e}") from e

        if not response.choices:
            raise ProviderError("no response from openai")
        content = response.choices[0].message.content
        if not content:
            raise ProviderError("empty response from openai")
        return content

    async def generate_stream(self, prompt: str) -> AsyncIterator[str]:
        try:
            stream = await self._client.chat.completions.create(
                model=self._model,
                max_tokens=self._max_tokens,
                messages=self._messages(prompt),
                stream=True,
            )
        except Exception as e:
            raise ProviderError(f"openai stream creation failed: {e}") from e

        try:
            async for chunk in stream:
                if not chunk.choices:
                    continue
                content = chunk.choices[0].delta.content
                if content:
                    yield content
        except Exception as e:
            raise ProviderError(f"openai stream error: {e}") from e
        finally:
            await stream.close()

    async def aclose(self) -> None:
        await self._client.close()
