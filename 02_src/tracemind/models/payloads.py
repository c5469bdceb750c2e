"""Pydantic request payloads and their conversion to the domain records."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import InputError, InternalError, ProviderConfigError
from .connections import AIConnection, ProviderKind
from .design import Component, InfrastructureDesign
from .trace import Attribute, FactType, Severity, Span, SpanStatus, SymbolicFact, Trace


def validation_message(errors: list[dict]) -> str:
    """Flatten pydantic errors into `field.path: message; ...`."""
    parts = []
    for error in errors:
        loc = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {error['msg']}" if loc else error["msg"])
    return "; ".join(parts)


def _as_utc(value: datetime) -> datetime:
    # Timestamps without an offset are taken as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class AttributePayload(BaseModel):
    key: str
    value: Any = None


class StatusPayload(BaseModel):
    code: str = Field(min_length=1)
    message: str | None = None


class SpanPayload(BaseModel):
    """One OTel span as sent by a client. Timestamps are RFC 3339."""

    span_id: str = Field(min_length=1)
    trace_id: str | None = None
    parent_span_id: str | None = None
    name: str = Field(min_length=1)
    kind: str | None = None
    start_time: datetime
    end_time: datetime
    status: StatusPayload
    attributes: list[AttributePayload] | None = None
    resource_names: list[str] | None = None

    def to_span(self, trace_id: str = "") -> Span:
        return Span(
            span_id=self.span_id,
            trace_id=self.trace_id or trace_id,
            name=self.name,
            start_time=_as_utc(self.start_time),
            end_time=_as_utc(self.end_time),
            status=SpanStatus(code=self.status.code, message=self.status.message or ""),
            parent_span_id=self.parent_span_id or None,
            kind=self.kind or "",
            attributes=tuple(Attribute(key=a.key, value=a.value) for a in self.attributes or ()),
            resource_names=tuple(self.resource_names or ()),
        )


class TracePayload(BaseModel):
    """Request body of the analysis endpoints."""

    trace_id: str = Field(min_length=1)
    spans: list[SpanPayload] | None = None

    def to_trace(self) -> Trace:
        return Trace(
            trace_id=self.trace_id,
            spans=tuple(span.to_span(self.trace_id) for span in self.spans or ()),
        )


class FactPayload(BaseModel):
    type: FactType
    service: str = ""
    description: str = ""
    severity: Severity

    def to_fact(self) -> SymbolicFact:
        return SymbolicFact(
            type=self.type,
            service=self.service,
            description=self.description,
            severity=self.severity,
        )


def parse_trace(data: Any) -> Trace:
    """Validate a decoded JSON trace, raising InputError when malformed."""
    try:
        return TracePayload.model_validate(data).to_trace()
    except ValidationError as e:
        raise InputError(f"invalid trace: {validation_message(e.errors())}") from e


class ConnectionRequest(BaseModel):
    """Request body for saving a connection."""

    name: str = ""
    provider: str = ""
    config: dict[str, Any] | None = None
    credentials: dict[str, str] | None = None

    def to_connection(self, connection_id: str = "") -> AIConnection:
        """Build an unsaved connection. Per-provider fields are checked on add."""
        if not self.name:
            raise ProviderConfigError("connection name is required")
        if not self.provider:
            raise ProviderConfigError("provider is required")
        try:
            kind = ProviderKind(self.provider)
        except ValueError:
            raise ProviderConfigError(f"unsupported provider: {self.provider}")

        return AIConnection(
            id=connection_id,
            name=self.name,
            provider=kind,
            config=dict(self.config or {}),
            credentials=dict(self.credentials or {}),
        )


class ComponentPayload(BaseModel):
    # Generated manifests sometimes carry numbers or nulls where strings belong.
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    id: str | None = None
    name: str | None = None
    type: str | None = None
    api_version: str | None = Field(default=None, alias="apiVersion")
    kind: str | None = None
    spec: dict[str, Any] | None = None
    metadata: dict[str, Any] | None = None

    def to_component(self) -> Component:
        return Component(
            id=self.id or "",
            name=self.name or "",
            type=self.type or "",
            api_version=self.api_version or "",
            kind=self.kind or "",
            spec=self.spec or {},
            metadata=self.metadata or {},
        )


class DesignPayload(BaseModel):
    """An infrastructure design document. Metadata is not read back."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: str | None = None
    description: str | None = None
    version: str | None = None
    components: list[ComponentPayload] | None = None

    def to_design(self) -> InfrastructureDesign:
        return InfrastructureDesign(
            name=self.name or "",
            description=self.description or "",
            version=self.version or "",
            components=[c.to_component() for c in self.components or ()],
        )


def parse_design(data: Any) -> InfrastructureDesign:
    """Validate a generated design document, raising InternalError when malformed."""
    try:
        return DesignPayload.model_validate(data).to_design()
    except ValidationError as e:
        raise InternalError(f"failed to parse JSON response: {validation_message(e.errors())}") from e
