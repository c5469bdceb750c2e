"""Project-level configuration and path helpers."""

import os
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ProviderConfigError
from .models.connections import (
    DEFAULT_OPENAI_ENDPOINT,
    AnthropicConfig,
    OllamaConfig,
    OpenAIConfig,
    ProviderConfig,
    ProviderKind,
)

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"

DEFAULT_MEMORY_CAPACITY = 50
DEFAULT_OLLAMA_MODEL = "mistral"
DEFAULT_OLLAMA_ENDPOINT = "http://localhost:11434"


def _split_origins(value: str) -> list[str]:
    return [origin.strip() for origin in value.split(",") if origin.strip()]


@dataclass(frozen=True)
class Settings:
    """Process settings, read once from the environment."""

    api_host: str = "localhost"
    api_port: int = 8080
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    log_file: str = str(DEFAULT_LOG_PATH)
    memory_capacity: int = DEFAULT_MEMORY_CAPACITY
    llm_provider: str = ProviderKind.OLLAMA.value
    llm_model: str | None = None
    llm_endpoint: str | None = None
    llm_api_key: str | None = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        try:
            api_port = int(os.getenv("API_PORT", "8080"))
            capacity = int(os.getenv("HEALTH_MEMORY_CAPACITY", str(DEFAULT_MEMORY_CAPACITY)))
        except ValueError as e:
            raise ValueError(f"Invalid numeric setting: {e}") from e

        return cls(
            api_host=os.getenv("API_HOST", "localhost"),
            api_port=api_port,
            cors_origins=_split_origins(os.getenv("CORS_ORIGINS", "*")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE", str(DEFAULT_LOG_PATH)),
            memory_capacity=capacity,
            llm_provider=os.getenv("LLM_PROVIDER", ProviderKind.OLLAMA.value).lower(),
            llm_model=os.getenv("LLM_MODEL") or os.getenv("OLLAMA_MODEL"),
            llm_endpoint=os.getenv("LLM_ENDPOINT"),
            llm_api_key=os.getenv("LLM_API_KEY"),
        )

    def provider_config(self) -> ProviderConfig:
        """Typed configuration record for the default generation backend."""
        try:
            kind = ProviderKind(self.llm_provider)
        except ValueError:
            raise ProviderConfigError(f"unsupported provider: {self.llm_provider}")

        if kind is ProviderKind.OPENAI:
            config = OpenAIConfig(
                model=self.llm_model or "",
                api_key=self.llm_api_key or os.getenv("OPENAI_API_KEY", ""),
                api_endpoint=self.llm_endpoint or DEFAULT_OPENAI_ENDPOINT,
            )
        elif kind is ProviderKind.ANTHROPIC:
            config = AnthropicConfig(
                model=self.llm_model or "",
                api_key=self.llm_api_key or os.getenv("ANTHROPIC_API_KEY", ""),
            )
        else:
            config = OllamaConfig(
                endpoint=self.llm_endpoint or DEFAULT_OLLAMA_ENDPOINT,
                model=self.llm_model or DEFAULT_OLLAMA_MODEL,
            )

        config.validate()
        return config
