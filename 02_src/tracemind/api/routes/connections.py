"""Connection registry API routes."""

from pydantic import BaseModel
from fastapi import APIRouter

from ...app import Application
from ...errors import ProviderError
from ...logging_config import get_logger
from ...models import ConnectionRequest, ConnectionStatus

logger = get_logger(__name__)

TEST_PROMPT = "Reply with 'OK' if you can read this."


class TestConnectionRequest(BaseModel):
    """Request model for testing a connection."""

    connection_id: str


class StatusResponse(BaseModel):
    """Response model for status."""

    status: str
    message: str
    response: str | None = None


def create_connections_router(app: Application) -> APIRouter:
    """Create connections router."""
    router = APIRouter(prefix="/api/connections", tags=["connections"])

    @router.post("")
    async def create_connection(request: ConnectionRequest) -> dict:
        """Validate and save a connection."""
        connection = app.connections.add(request.to_connection())
        return connection.to_dict()

    @router.get("")
    async def list_connections() -> list[dict]:
        """List saved connections without credentials."""
        return [c.to_dict() for c in app.connections.list_all()]

    @router.post("/test", response_model=StatusResponse)
    async def test_connection(request: TestConnectionRequest) -> dict:
        """Send a short prompt through the connection and record the outcome."""
        provider = app.connections.provider_for(request.connection_id)
        try:
            response = await provider.generate(TEST_PROMPT)
        except ProviderError as e:
            logger.warning("Connection %s test failed: %s", request.connection_id, e.message)
            app.connections.set_status(request.connection_id, ConnectionStatus.ERROR)
            return {"status": ConnectionStatus.ERROR.value, "message": e.message}

        app.connections.set_status(request.connection_id, ConnectionStatus.CONNECTED)
        return {
            "status": ConnectionStatus.CONNECTED.value,
            "message": "Connection successful",
            "response": response,
        }

    @router.delete("/{connection_id}", response_model=StatusResponse)
    async def delete_connection(connection_id: str) -> dict:
        """Delete a connection and close its client."""
        provider = app.connections.delete(connection_id)
        await provider.aclose()
        return {"status": "success", "message": "Connection deleted"}

    return router
