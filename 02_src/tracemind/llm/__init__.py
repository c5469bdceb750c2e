"""LLM module."""

from .factory import create_provider
from .llm_provider import DEFAULT_MAX_TOKENS, AnthropicProvider, ILLMProvider
from .ollama_provider import OllamaProvider
from .openai_provider import OpenAIProvider

__all__ = [
    "ILLMProvider",
    "AnthropicProvider",
    "OpenAIProvider",
    "OllamaProvider",
    "create_provider",
    "DEFAULT_MAX_TOKENS",
]
