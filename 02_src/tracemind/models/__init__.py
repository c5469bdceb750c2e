"""Core data models for TraceMind."""

from .connections import (
    AIConnection,
    AnthropicConfig,
    ConnectionStatus,
    OllamaConfig,
    OpenAIConfig,
    ProviderConfig,
    ProviderKind,
)
from .design import Component, DesignMeta, InfrastructureDesign
from .payloads import (
    ConnectionRequest,
    DesignPayload,
    FactPayload,
    SpanPayload,
    TracePayload,
    parse_design,
    parse_trace,
    validation_message,
)
from .trace import (
    Attribute,
    FactType,
    Severity,
    Span,
    SpanStatus,
    SymbolicFact,
    SystemHealth,
    Trace,
    TraceAnalysis,
)

__all__ = [
    # Traces
    "Attribute",
    "Span",
    "SpanStatus",
    "Trace",
    # Analysis
    "FactType",
    "Severity",
    "SymbolicFact",
    "SystemHealth",
    "TraceAnalysis",
    # Connections
    "AIConnection",
    "ConnectionStatus",
    "ProviderKind",
    "ProviderConfig",
    "OpenAIConfig",
    "AnthropicConfig",
    "OllamaConfig",
    # Design
    "Component",
    "DesignMeta",
    "InfrastructureDesign",
    # Request payloads
    "TracePayload",
    "SpanPayload",
    "FactPayload",
    "ConnectionRequest",
    "DesignPayload",
    "parse_trace",
    "parse_design",
    "validation_message",
]
