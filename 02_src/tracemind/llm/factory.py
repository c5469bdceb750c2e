"""Backend selection from a typed provider configuration."""

from ..errors import ProviderConfigError
from ..logging_config import get_logger
from ..models import AnthropicConfig, OllamaConfig, OpenAIConfig, ProviderConfig
from .llm_provider import AnthropicProvider, ILLMProvider
from .ollama_provider import OllamaProvider
from .openai_provider import OpenAIProvider

logger = get_logger(__name__)


def create_provider(config: ProviderConfig) -> ILLMProvider:
    """Build the backend for a configuration record.

    Validation happens here, before any client is constructed or any
    network call is made.
    """
    config.validate()

    if isinstance(config, OpenAIConfig):
        provider: ILLMProvider = OpenAIProvider(config)
    elif isinstance(config, AnthropicConfig):
        provider = AnthropicProvider(config)
    elif isinstance(config, OllamaConfig):
        provider = OllamaProvider(config)
    else:
        raise ProviderConfigError(f"unsupported provider config: {type(config).__name__}")

    logger.info("Created %s provider (model=%s)", config.kind.value, config.model)
    return provider
