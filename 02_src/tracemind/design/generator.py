"""Infrastructure design generation from a natural-language request."""

import asyncio
import json
import uuid
from datetime import datetime, timezone
from typing import AsyncIterator

from ..connections import IConnectionStore
from ..errors import InputError, InternalError, ProviderError
from ..logging_config import get_logger
from ..models import AIConnection, DesignMeta, InfrastructureDesign, parse_design
from ..pipeline.events import DESIGN, StreamEvent
from ..pipeline.relay import CANCELLED_MESSAGE, ChunkRelay, StreamCancelled
from ..prompts import build_infrastructure_prompt

logger = get_logger(__name__)

GENERATED_BY = "TraceMind AI Adapter"
DEFAULT_VERSION = "1.0.0"


def _strip_code_fence(response: str) -> str:
    text = response.strip()
    text = text.removeprefix("```json")
    text = text.removeprefix("```")
    text = text.removesuffix("```")
    return text.strip()


def parse_design_response(
    response: str, prompt: str, connection: AIConnection
) -> InfrastructureDesign:
    """Parse the generator's JSON output and fill in defaults and metadata."""
    try:
        data = json.loads(_strip_code_fence(response))
    except json.JSONDecodeError as e:
        raise InternalError(f"failed to parse JSON response: {e}") from e

    design = parse_design(data)
    for component in design.components:
        if not component.id:
            component.id = str(uuid.uuid4())

    design.name = design.name or f"design-{uuid.uuid4().hex[:8]}"
    design.version = design.version or DEFAULT_VERSION
    design.metadata = DesignMeta(
        generated_by=GENERATED_BY,
        prompt=prompt,
        provider=connection.provider.value,
        model=connection.model,
        generated_at=datetime.now(timezone.utc),
    )
    return design


def validate_design(design: InfrastructureDesign) -> None:
    """Check that a design is complete enough to apply."""
    if not design.name:
        raise InputError("design name is required")
    if not design.components:
        raise InputError("design must have at least one component")

    for i, component in enumerate(design.components):
        if not component.name:
            raise InputError(f"component {i}: name is required")
        if not component.kind:
            raise InputError(f"component {component.name}: kind is required")
        if not component.api_version:
            raise InputError(f"component {component.name}: apiVersion is required")


class DesignGenerator:
    """Generate infrastructure designs with a saved connection's backend."""

    def __init__(self, connections: IConnectionStore):
        self._connections = connections

    def check_request(self, user_prompt: str, connection_id: str) -> AIConnection:
        """Reject an incomplete request and return the connection it names."""
        if not user_prompt:
            raise InputError("prompt is required")
        if not connection_id:
            raise InputError("connection_id is required")
        return self._connections.get(connection_id)

    async def generate(self, user_prompt: str, connection_id: str) -> InfrastructureDesign:
        connection = self.check_request(user_prompt, connection_id)
        provider = self._connections.provider_for(connection_id)

        response = await provider.generate(build_infrastructure_prompt(user_prompt))
        design = parse_design_response(response, user_prompt, connection)
        logger.info("Generated design %s with %d components", design.name, len(design.components))
        return design

    async def stream(
        self,
        user_prompt: str,
        connection_id: str,
        cancel: asyncio.Event | None = None,
    ) -> AsyncIterator[StreamEvent]:
        """Yield token events, then the parsed design and `done`, or one `error`.

        Request validation and connection lookup happen before the first
        event, so those failures raise instead of streaming.
        """
        connection = self.check_request(user_prompt, connection_id)
        provider = self._connections.provider_for(connection_id)

        relay = ChunkRelay(provider.generate_stream(build_infrastructure_prompt(user_prompt)), cancel)
        tokens: list[str] = []
        try:
            async for chunk in relay:
                tokens.append(chunk)
                yield StreamEvent.token(chunk)
        except ProviderError as e:
            yield StreamEvent.error(e.message)
            return
        except StreamCancelled:
            yield StreamEvent.error(CANCELLED_MESSAGE)
            return
        except Exception as e:
            logger.error("Design stream for connection %s failed: %s", connection_id, e, exc_info=True)
            yield StreamEvent.error(f"internal error: {e}")
            return
        finally:
            await relay.aclose()

        try:
            design = parse_design_response("".join(tokens), user_prompt, connection)
        except InternalError as e:
            logger.error("Design parse failed: %s", e.message)
            yield StreamEvent.error(f"Failed to parse design: {e.message}")
            return

        yield StreamEvent(DESIGN, json.dumps(design.to_dict()))
        yield StreamEvent.done()
