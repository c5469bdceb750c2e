"""FastAPI application setup."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..app import Application
from ..errors import TraceMindError
from ..logging_config import get_logger
from ..models import validation_message
from .routes import analysis, connections, control, design

logger = get_logger(__name__)


async def handle_tracemind_error(request: Request, exc: TraceMindError) -> JSONResponse:
    """Convert domain errors into a JSON error response."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report a malformed request body as a 400 with a flat message."""
    message = validation_message(exc.errors())
    logger.info("%s %s rejected: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=400, content={"detail": message})


def create_fastapi_app(application: Application | None = None) -> FastAPI:
    """Create and configure FastAPI application."""
    application = application or Application()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifespan."""
        await application.start()
        yield
        await application.stop()

    fastapi_app = FastAPI(
        title="TraceMind API",
        description="Symbolic trace analysis with streamed AI explanations",
        version="0.1.0",
        lifespan=lifespan,
    )
    fastapi_app.state.application = application

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=application.settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    fastapi_app.add_exception_handler(TraceMindError, handle_tracemind_error)
    fastapi_app.add_exception_handler(RequestValidationError, handle_validation_error)

    fastapi_app.include_router(analysis.create_analysis_router(application))
    fastapi_app.include_router(connections.create_connections_router(application))
    fastapi_app.include_router(design.create_design_router(application))
    fastapi_app.include_router(control.create_control_router(application))

    return fastapi_app
