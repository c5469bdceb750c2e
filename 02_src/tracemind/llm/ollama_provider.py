"""Local Ollama backend over its HTTP generate API."""

import json
from typing import AsyncIterator

import httpx

from ..errors import ProviderError
from ..models import OllamaConfig

GENERATE_PATH = "/api/generate"
CONNECT_TIMEOUT_S = 10.0


class OllamaProvider:
    """Ollama server provider (newline-delimited JSON streaming)."""

    name = "ollama"

    def __init__(self, config: OllamaConfig, client: httpx.AsyncClient | None = None):
        config.validate()
        self._model = config.model
        # No read timeout: long generations are bounded by request cancellation.
        self._client = client or httpx.AsyncClient(
            base_url=config.endpoint,
            timeout=httpx.Timeout(CONNECT_TIMEOUT_S, read=None),
        )

    @property
    def model(self) -> str:
        return self._model

    def _body(self, prompt: str, stream: bool) -> dict:
        return {"model": self._model, "prompt": prompt, "stream": stream}

    async def generate(self, prompt: str) -> str:
        try:
            response = await self._client.post(GENERATE_PATH, json=self._body(prompt, False))
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ProviderError(f"ollama generation failed: {e}") from e

        if data.get("error"):
            raise ProviderError(f"ollama generation failed: {data['error']}")
        text = data.get("response")
        if not text:
            raise ProviderError("no response from ollama")
        return text

    async def generate_stream(self, prompt: str) -> AsyncIterator[str]:
        try:
            async with self._client.stream(
                "POST", GENERATE_PATH, json=self._body(prompt, True)
            ) as response:
                if response.status_code >= 400:
                    body = (await response.aread()).decode("utf-8", errors="replace")
                    raise ProviderError(
                        f"ollama stream failed: HTTP {response.status_code}: {body.strip()}"
                    )

                async for line in response.aiter_lines():
                    if not line.strip():
                        continue
                    data = json.loads(line)
                    if data.get("error"):
                        raise ProviderError(f"ollama stream failed: {data['error']}")
                    chunk = data.get("response")
                    if chunk:
                        yield chunk
                    if data.get("done"):
                        break
        except ProviderError:
            raise
        except (httpx.HTTPError, ValueError) as e:
            raise ProviderError(f"ollama stream failed: {e}") from e

    async def aclose(self) -> None:
        await self._client.aclose()
