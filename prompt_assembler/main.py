"""FastAPI application entry point.

Main application setup with middleware, routing, and lifecycle management.
"""

import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from prompt_assembler import __version__
from prompt_assembler.api import (
    admin_router,
    assemble_router,
    export_router,
    extract_router,
    templates_router,
)
from prompt_assembler.api.schemas import ErrorResponse
from prompt_assembler.core.config import Settings, get_settings
from prompt_assembler.core.factory import ComponentFactory
from prompt_assembler.core.logging_config import request_id_var, setup_logging

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Closes the network clients held by the component factory on shutdown.
    """
    settings: Settings = app.state.settings

    # Startup
    logger.info(
        f"Starting Prompt Template Assembler API "
        f"(store={settings.store_type}, templates_root={settings.templates_root})"
    )

    yield

    # Shutdown
    logger.info("Shutting down Prompt Template Assembler API...")
    try:
        await app.state.factory.aclose()
        logger.info("Component clients closed")
    except Exception as e:
        logger.error(f"Error closing component clients: {e}", exc_info=True)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings. If None, loads from environment.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title="Prompt Template Assembler",
        description="Extracts placeholder values from documents and assembles prompt templates",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Store settings and components in app state
    app.state.settings = settings
    app.state.factory = ComponentFactory(settings)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        """Tag every request with an ID and log its start and end."""
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        token = request_id_var.set(request_id)
        start = time.perf_counter()
        logger.info(f"{request.method} {request.url.path} started")
        try:
            response = await call_next(request)
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code} "
                f"({elapsed_ms:.1f} ms)"
            )
        finally:
            request_id_var.reset(token)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    # Include routers
    for router in (
        templates_router,
        extract_router,
        assemble_router,
        export_router,
        admin_router,
    ):
        app.include_router(router)
    logger.info("Registered API routers")

    # Health check endpoint
    @app.get("/health", tags=["health"])
    async def health_check():
        """Health check endpoint for load balancers and monitoring."""
        return {
            "status": "healthy",
            "service": "prompt-template-assembler",
            "version": __version__,
        }

    # Exception handlers
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request, exc):
        """Handle Pydantic validation errors."""
        logger.warning(f"Validation error: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "detail": "Validation error",
                "errors": jsonable_errors(exc),
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request, exc):
        """Handle uncaught exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(
                detail="Internal server error",
                error_code="INTERNAL_ERROR",
            ).model_dump(),
        )

    logger.info("FastAPI application created successfully")
    return app


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Return validation errors without non-serializable context objects."""
    return [{k: v for k, v in err.items() if k != "ctx"} for err in exc.errors()]


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    logger.info("Starting uvicorn server on port 8000...")
    uvicorn.run(
        "prompt_assembler.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower(),
    )
