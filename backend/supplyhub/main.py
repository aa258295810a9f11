"""FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from supplyhub.api.v1 import health, requests
from supplyhub.config import settings
from supplyhub.db import dispose_engine
from supplyhub.logging import setup_logging

# Configure logging before anything else
setup_logging()

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup/shutdown events."""
    logger.info("Starting Supply Hub API", debug=settings.debug)

    yield

    logger.info("Shutting down Supply Hub API")
    await dispose_engine()
    logger.info("Database connections disposed")


app = FastAPI(
    title="Supply Hub API",
    description="Daily supply request ledger",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.backend_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix="/api/v1", tags=["health"])
app.include_router(requests.router, prefix="/api/v1", tags=["requests"])
