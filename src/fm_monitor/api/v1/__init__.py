"""Version 1 API endpoints."""

from .endpoints import monitoring_router, system_router

__all__ = [
    "monitoring_router",
    "system_router",
]
