"""Generation backend connection and per-provider configuration records."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Union

from ..errors import ProviderConfigError

DEFAULT_OPENAI_ENDPOINT = "https://api.openai.com/v1"


class ProviderKind(str, Enum):
    """Supported generation backends."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    OLLAMA = "ollama"


class ConnectionStatus(str, Enum):
    """Result of the last connection test."""

    UNTESTED = "untested"
    CONNECTED = "connected"
    ERROR = "error"


@dataclass(frozen=True)
class OpenAIConfig:
    """Hosted OpenAI-compatible chat completions backend."""

    model: str
    api_key: str
    api_endpoint: str = DEFAULT_OPENAI_ENDPOINT

    kind = ProviderKind.OPENAI

    def validate(self) -> None:
        if not self.model:
            raise ProviderConfigError("openai model is required")
        if not self.api_key:
            raise ProviderConfigError("openai api_key is required")


@dataclass(frozen=True)
class AnthropicConfig:
    """Hosted Anthropic messages backend."""

    model: str
    api_key: str

    kind = ProviderKind.ANTHROPIC

    def validate(self) -> None:
        if not self.model:
            raise ProviderConfigError("anthropic model is required")
        if not self.api_key:
            raise ProviderConfigError("anthropic api_key is required")


@dataclass(frozen=True)
class OllamaConfig:
    """Local Ollama server."""

    endpoint: str
    model: str

    kind = ProviderKind.OLLAMA

    def validate(self) -> None:
        if not self.endpoint:
            raise ProviderConfigError("ollama endpoint is required")
        if not self.model:
            raise ProviderConfigError("ollama model is required")


ProviderConfig = Union[OpenAIConfig, AnthropicConfig, OllamaConfig]


@dataclass
class AIConnection:
    """A saved generation backend connection."""

    id: str
    name: str
    provider: ProviderKind
    config: dict[str, Any] = field(default_factory=dict)
    credentials: dict[str, str] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    status: ConnectionStatus = ConnectionStatus.UNTESTED

    @property
    def model(self) -> str:
        model = self.config.get("model")
        return model if isinstance(model, str) and model else "unknown"

    def provider_config(self) -> ProviderConfig:
        """Typed, validated configuration for this connection's backend."""

        def config_str(key: str) -> str:
            value = self.config.get(key)
            return value if isinstance(value, str) else ""

        if self.provider is ProviderKind.OPENAI:
            config = OpenAIConfig(
                model=config_str("model"),
                api_key=self.credentials.get("api_key", ""),
                api_endpoint=config_str("api_endpoint") or DEFAULT_OPENAI_ENDPOINT,
            )
        elif self.provider is ProviderKind.ANTHROPIC:
            config = AnthropicConfig(
                model=config_str("model"),
                api_key=self.credentials.get("api_key", ""),
            )
        else:
            config = OllamaConfig(
                endpoint=config_str("endpoint"),
                model=config_str("model"),
            )

        config.validate()
        return config

    def to_dict(self, include_credentials: bool = False) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "provider": self.provider.value,
            "config": dict(self.config),
            "created_at": self.created_at.isoformat(),
            "status": self.status.value,
        }
        if include_credentials:
            data["credentials"] = dict(self.credentials)
        return data
