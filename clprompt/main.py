"""
FastAPI application entry point for the CL prompt workspace.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clprompt import __version__
from clprompt.api.errors import setup_error_handlers
from clprompt.api.routers import v1_router
from clprompt.api.schemas.common import HealthResponse
from clprompt.infra.config.logging_config import get_logger, setup_logging
from clprompt.infra.config.settings import get_settings
from clprompt.infra.middleware.request_context import RequestContextMiddleware

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger = get_logger("app")
    logger.info(
        "app.startup",
        app_name=settings.app_name,
        environment=settings.environment,
        storage=settings.project_storage,
    )

    yield

    logger.info("app.shutdown", app_name=settings.app_name)


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Computation Layer authoring workspace",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)

    setup_error_handlers(app)
    app.include_router(v1_router, prefix="/api")

    @app.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        return HealthResponse(
            status="healthy", service=settings.app_name, version=__version__
        )

    return app


app = create_app()
