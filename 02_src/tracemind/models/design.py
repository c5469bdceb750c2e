"""Infrastructure design data models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class Component:
    """A single manifest in a design (Deployment, Service, ...)."""

    id: str = ""
    name: str = ""
    type: str = ""
    api_version: str = ""
    kind: str = ""
    spec: dict[str, Any] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "apiVersion": self.api_version,
            "kind": self.kind,
            "spec": self.spec,
            "metadata": self.metadata,
        }


@dataclass
class DesignMeta:
    """Provenance of a generated design."""

    generated_by: str
    prompt: str
    provider: str
    model: str
    generated_at: datetime

    def to_dict(self) -> dict:
        return {
            "generated_by": self.generated_by,
            "prompt": self.prompt,
            "provider": self.provider,
            "model": self.model,
            "generated_at": self.generated_at.isoformat(),
        }


@dataclass
class InfrastructureDesign:
    """A generated infrastructure design."""

    name: str = ""
    description: str = ""
    version: str = ""
    components: list[Component] = field(default_factory=list)
    metadata: DesignMeta | None = None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "version": self.version,
            "components": [c.to_dict() for c in self.components],
            "metadata": self.metadata.to_dict() if self.metadata else None,
        }
