"""
Todo API - FastAPI Application

Main application entry point for the Todo API and its OpenAPI documents.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI

from todoapp import __version__
from todoapp.config import settings
from todoapp.database import close_db, init_db
from todoapp.docs.openapi import setup_openapi
from todoapp.docs.openapi_metadata import OPENAPI_TITLE
from todoapp.middleware.logging import configure_logging, logging_middleware
from todoapp.routes import swagger_ui, todo
from todoapp.routes.errors import setup_problem_handlers


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    logger = structlog.get_logger()

    try:
        logger.info(
            "Starting Todo API",
            version=__version__,
            environment=settings.ENVIRONMENT,
        )

        await init_db()

        yield
    finally:
        logger.info("Shutting down Todo API")
        await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    configure_logging(settings.LOG_LEVEL, json_logs=not settings.is_development)

    app = FastAPI(
        title=OPENAPI_TITLE,
        version=__version__,
        openapi_url=None,
        docs_url=None,
        redoc_url=None,
        lifespan=lifespan,
    )

    # Add logging middleware
    @app.middleware("http")
    async def add_logging_middleware(request, call_next):
        return await logging_middleware(request, call_next)

    setup_problem_handlers(app)

    # Include routers
    app.include_router(todo.router)
    app.include_router(swagger_ui.router)

    # OpenAPI documents
    setup_openapi(app)

    return app


# Create application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "todoapp.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
        reload=settings.DEBUG,
    )
