# src/fm_monitor/main.py
"""Main entry point for the FM Monitor application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from fm_monitor import __version__
from fm_monitor.api.v1 import monitoring_router, system_router
from fm_monitor.core.settings import settings
from fm_monitor.services.carrier import get_carrier_client

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="FM Monitor API",
    description="Delivery tracking monitor for FM Transportes shipments",
    version=__version__,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(monitoring_router, prefix="/api/v1")
app.include_router(system_router, prefix="/api/v1")


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await get_carrier_client().close()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "FM Monitor API",
        "version": __version__,
        "description": "Delivery tracking monitor for FM Transportes shipments",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("fm_monitor.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
