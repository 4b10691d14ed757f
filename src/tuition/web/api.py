"""FastAPI application factory.

Main entry point for the student progress dashboard Web API.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tuition.config.app_config import load_app_config
from tuition.core.link_titles import LinkTitleResolver
from tuition.db.progress_repository import ProgressRepository
from tuition.web.routes import (
    auth_router,
    dashboard_router,
    health_router,
    tools_router,
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan context manager for startup/shutdown events."""
    # Startup
    config = load_app_config()
    logger.info(
        "api_startup",
        spreadsheet_configured=config.sheets.get_spreadsheet_id() is not None,
        students_range=config.sheets.students_range,
        progress_range=config.sheets.progress_range,
        enrich_titles=config.links.enrich_titles,
    )
    yield
    logger.info("api_shutdown")


def create_app(
    repository: ProgressRepository | None = None,
    resolver: LinkTitleResolver | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        repository: Data source for logins; built from config on first use if None
        resolver: Link title resolver; built from config on first use if None

    Returns:
        Configured FastAPI app instance
    """
    app = FastAPI(
        title="Tuition Progress API",
        description="Web API for the student progress dashboard",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.repository = repository
    app.state.resolver = resolver

    # CORS middleware for web clients
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(dashboard_router)
    app.include_router(tools_router)

    return app


# Default app instance for uvicorn
app = create_app()
