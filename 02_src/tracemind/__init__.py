"""TraceMind: symbolic trace analysis with streamed AI explanations."""

from .analyzer import analyze_trace
from .app import Application, IApplication
from .config import Settings
from .connections import ConnectionStore, IConnectionStore
from .design import DesignGenerator
from .errors import (
    InputError,
    InternalError,
    NotFoundError,
    ProviderConfigError,
    ProviderError,
    TraceMindError,
)
from .llm import AnthropicProvider, ILLMProvider, OllamaProvider, OpenAIProvider, create_provider
from .memory import HealthMemory, IHealthMemory
from .models import (
    AIConnection,
    InfrastructureDesign,
    Span,
    SymbolicFact,
    SystemHealth,
    Trace,
    TraceAnalysis,
)
from .pipeline import ExplanationPipeline, PipelineState, StreamEvent

__all__ = [
    # Application
    "Application",
    "IApplication",
    "Settings",
    # Models
    "Span",
    "Trace",
    "SymbolicFact",
    "SystemHealth",
    "TraceAnalysis",
    "AIConnection",
    "InfrastructureDesign",
    # Components
    "analyze_trace",
    "IHealthMemory",
    "HealthMemory",
    "ILLMProvider",
    "AnthropicProvider",
    "OpenAIProvider",
    "OllamaProvider",
    "create_provider",
    "ExplanationPipeline",
    "PipelineState",
    "StreamEvent",
    "IConnectionStore",
    "ConnectionStore",
    "DesignGenerator",
    # Errors
    "TraceMindError",
    "InputError",
    "ProviderConfigError",
    "ProviderError",
    "InternalError",
    "NotFoundError",
]
