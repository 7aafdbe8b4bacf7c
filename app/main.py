"""
Main FastAPI application.

This is the entry point for the API server. AI jobs are executed by the
worker in ``app.workers.ai_job_runner``; the API only creates and reports them.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.core.config import settings
from app.core.logging_config import setup_logging
from app.errors import AppError, app_error_handler
from app.routers import ai_jobs, event_ai, health
from app.utils.background import drain_background_tasks

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging on startup; let detached tasks settle on shutdown."""
    setup_logging()
    logger.info("Starting %s", settings.APP_NAME)

    yield

    await drain_background_tasks()
    logger.info("Shutting down %s", settings.APP_NAME)


# Create the FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="Batch AI orchestration for event guest lists: enrichment, scoring, seating and introductions",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_exception_handler(AppError, app_error_handler)

# Include routers (API endpoints)
app.include_router(health.router, tags=["Health"])
app.include_router(ai_jobs.router)
app.include_router(event_ai.router)


@app.get("/")
async def root():
    return {"name": settings.APP_NAME, "docs": "/docs", "health": "/health"}
