"""orderdocs API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map OrderDocsError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py, registered once here
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from orderdocs.api.error_handlers import register_error_handlers
from orderdocs.api.routes import (
    artifacts,
    health,
    reference_documents,
    storage_settings,
    work_orders,
)
from orderdocs.config import get_settings
from orderdocs.infrastructure.database import init_db
from orderdocs.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("orderdocs API started")
    yield
    logger.info("orderdocs API shutting down")


app = FastAPI(
    title="orderdocs API", version="1.0.0", lifespan=lifespan,
)

# CORS from settings
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Report-Saved", "X-Report-Filename", "X-Report-Revision", "X-Report-Warning"],
)

# Routes
app.include_router(health.router)
app.include_router(work_orders.router)
app.include_router(artifacts.router)
app.include_router(reference_documents.router)
app.include_router(storage_settings.router)

register_error_handlers(app)
