"""Span, trace and analysis data models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

STATUS_ERROR = "ERROR"


class FactType(str, Enum):
    """Kinds of symbolic fact."""

    LATENCY_BOTTLENECK = "LATENCY_BOTTLENECK"
    LATENCY_WARNING = "LATENCY_WARNING"
    ERROR_ORIGIN = "ERROR_ORIGIN"


class Severity(str, Enum):
    """Fact severity."""

    CRITICAL = "critical"
    WARNING = "warning"


@dataclass(frozen=True)
class Attribute:
    """An OTel metadata key-value pair."""

    key: str
    value: Any


@dataclass(frozen=True)
class SpanStatus:
    """Span completion status."""

    code: str
    message: str = ""


@dataclass(frozen=True)
class Span:
    """An OTel-aligned unit of work."""

    span_id: str
    trace_id: str
    name: str
    start_time: datetime
    end_time: datetime
    status: SpanStatus
    parent_span_id: str | None = None
    kind: str = ""
    attributes: tuple[Attribute, ...] = ()
    resource_names: tuple[str, ...] = ()

    @property
    def latency_ms(self) -> float:
        """Duration in milliseconds. Zero or negative values are kept as-is."""
        return (self.end_time - self.start_time).total_seconds() * 1000.0

    @property
    def is_error(self) -> bool:
        return self.status.code == STATUS_ERROR

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "span_id": self.span_id,
            "trace_id": self.trace_id,
            "name": self.name,
            "kind": self.kind,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "status": {"code": self.status.code},
        }
        if self.parent_span_id:
            data["parent_span_id"] = self.parent_span_id
        if self.status.message:
            data["status"]["message"] = self.status.message
        if self.attributes:
            data["attributes"] = [{"key": a.key, "value": a.value} for a in self.attributes]
        if self.resource_names:
            data["resource_names"] = list(self.resource_names)
        return data


@dataclass(frozen=True)
class Trace:
    """A collection of spans in arrival order."""

    trace_id: str
    spans: tuple[Span, ...] = ()

    def to_dict(self) -> dict:
        return {
            "trace_id": self.trace_id,
            "spans": [span.to_dict() for span in self.spans],
        }


@dataclass(frozen=True)
class SymbolicFact:
    """A pre-computed insight about a trace."""

    type: FactType
    service: str
    description: str
    severity: Severity

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "service": self.service,
            "description": self.description,
            "severity": self.severity.value,
        }


@dataclass(frozen=True)
class SystemHealth:
    """Aggregate snapshot of the rolling trace window."""

    recent_error_rate: float = 0.0
    slowest_services: tuple[str, ...] = ()
    last_update: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "recent_error_rate": self.recent_error_rate,
            "slowest_services": list(self.slowest_services),
            "last_update": self.last_update.isoformat(),
        }


@dataclass(frozen=True)
class TraceAnalysis:
    """Raw trace combined with symbolic reasoning and a unary AI explanation."""

    trace: Trace
    symbolic_facts: tuple[SymbolicFact, ...]
    system_context: SystemHealth
    ai_explanation: str = ""

    def to_dict(self) -> dict:
        return {
            "trace": self.trace.to_dict(),
            "symbolic_facts": [f.to_dict() for f in self.symbolic_facts],
            "system_context": self.system_context.to_dict(),
            "ai_explanation": self.ai_explanation,
        }
