"""
FastAPI application entry point for the Funnel Planner.

Run locally:
    uvicorn funnel_planner.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from funnel_planner import __version__
from funnel_planner.api import api_router
from funnel_planner.core.config import get_settings
from funnel_planner.core.store import get_store

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log startup and shutdown; the in-memory store is created on first use."""
    logger.info(
        f"Funnel Planner API starting (tax multiplier {settings.tax_multiplier}, "
        f"leads edit policy {settings.leads_edit_policy.value})"
    )
    yield
    logger.info(f"Funnel Planner API shutting down with {len(get_store())} project(s) in memory")


app = FastAPI(
    title="Funnel Planner API",
    version=__version__,
    description=(
        "Quarterly funnel planning for marketing projects: plan derivation, "
        "weekly targets, performance tracking, platform forecasts and "
        "cross-project dashboards."
    ),
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


@app.get("/")
async def root():
    """API name and version."""
    return {
        "name": "Funnel Planner API",
        "version": __version__,
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


# Run with uvicorn when executed directly
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "funnel_planner.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
