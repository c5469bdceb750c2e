"""Trace analysis API routes."""

from datetime import datetime
from pydantic import BaseModel, Field
from fastapi import APIRouter, Query, Request
from fastapi.responses import StreamingResponse

from ...app import Application
from ...llm import ILLMProvider
from ...models import FactPayload, TracePayload
from .streaming import sse_response


class EvaluateRequest(BaseModel):
    """Request model for grading an explanation."""

    trace: TracePayload
    facts: list[FactPayload] = Field(default_factory=list)
    explanation: str


class EvaluateResponse(BaseModel):
    """Response model for an evaluation."""

    evaluation: str


class HealthResponse(BaseModel):
    """Response model for the aggregate health view."""

    recent_error_rate: float
    slowest_services: list[str]
    last_update: datetime


def _use_structured(structured: str) -> bool:
    # Only an explicit "false" selects the raw prompt.
    return structured.lower() != "false"


def create_analysis_router(app: Application) -> APIRouter:
    """Create analysis router."""
    router = APIRouter(prefix="/api", tags=["analysis"])

    def provider_for(connection_id: str | None) -> ILLMProvider | None:
        if not connection_id:
            return None
        return app.connections.provider_for(connection_id)

    @router.post("/analyze")
    async def analyze_trace_stream(
        request: Request,
        payload: TracePayload,
        structured: str = Query("true", description="'false' sends spans only"),
        connection_id: str | None = Query(None, description="Saved connection to use"),
    ) -> StreamingResponse:
        """Stream metadata, explanation tokens and a terminal event as SSE."""
        trace = payload.to_trace()
        run = app.pipeline.start(trace, _use_structured(structured), provider_for(connection_id))
        return sse_response(request, lambda cancel: app.pipeline.stream(run, cancel))

    @router.post("/explain")
    async def explain_trace(
        payload: TracePayload,
        structured: str = Query("true"),
        connection_id: str | None = Query(None),
    ) -> dict:
        """Analyze a trace and return the full explanation in one response."""
        trace = payload.to_trace()
        analysis = await app.pipeline.explain(
            trace, _use_structured(structured), provider_for(connection_id)
        )
        return analysis.to_dict()

    @router.post("/evaluate", response_model=EvaluateResponse)
    async def evaluate_explanation(
        request: EvaluateRequest,
        connection_id: str | None = Query(None),
    ) -> dict:
        """Grade an explanation's causal correctness against the symbolic facts."""
        trace = request.trace.to_trace()
        facts = [f.to_fact() for f in request.facts]
        evaluation = await app.pipeline.evaluate(
            trace, facts, request.explanation, provider_for(connection_id)
        )
        return {"evaluation": evaluation}

    @router.get("/health", response_model=HealthResponse)
    async def get_health() -> dict:
        """Current aggregate health of the rolling trace window."""
        return app.memory.health().to_dict()

    return router
