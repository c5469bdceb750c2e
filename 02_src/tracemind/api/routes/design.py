"""Infrastructure design API routes."""

from pydantic import BaseModel
from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse

from ...app import Application
from ...design import validate_design
from ...models import DesignPayload
from .streaming import sse_response


class DesignRequest(BaseModel):
    """Request model for design generation."""

    prompt: str = ""
    connection_id: str = ""


def create_design_router(app: Application) -> APIRouter:
    """Create design router."""
    router = APIRouter(prefix="/api/design", tags=["design"])

    @router.post("")
    async def generate_design(request: DesignRequest) -> dict:
        """Generate a design in one blocking call."""
        design = await app.designs.generate(request.prompt, request.connection_id)
        return design.to_dict()

    @router.post("/stream")
    async def generate_design_stream(request: Request, body: DesignRequest) -> StreamingResponse:
        """Stream generation tokens, then the parsed design, as SSE."""
        # Reject bad requests with a status code before the stream starts.
        app.designs.check_request(body.prompt, body.connection_id)
        return sse_response(
            request,
            lambda cancel: app.designs.stream(body.prompt, body.connection_id, cancel),
        )

    @router.post("/validate")
    async def check_design(payload: DesignPayload) -> dict:
        """Validate a design document."""
        validate_design(payload.to_design())
        return {"status": "valid"}

    return router
