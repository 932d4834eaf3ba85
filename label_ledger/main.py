"""FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from label_ledger import __version__
from label_ledger.api.v1 import backup, health, label_settings, labels
from label_ledger.config import settings
from label_ledger.db import dispose_engine, engine, init_db
from label_ledger.logging import setup_logging

# Configure logging before anything else
setup_logging()

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup/shutdown events."""
    logger.info("Starting Palm label ledger", debug=settings.debug, database_url=settings.database_url)

    # Tables and zero counters for any process type without a row
    await init_db(engine)

    yield

    logger.info("Shutting down Palm label ledger")
    await dispose_engine()
    logger.info("Database connections disposed")


app = FastAPI(
    title="Palm Label Ledger API",
    description="Sequential barcode issuance and batch history for produce labels",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware for the label UI
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.backend_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(health.router, prefix="/api/v1", tags=["health"])
app.include_router(labels.router, prefix="/api/v1", tags=["labels"])
app.include_router(label_settings.router, prefix="/api/v1", tags=["settings"])
app.include_router(backup.router, prefix="/api/v1", tags=["backup"])
