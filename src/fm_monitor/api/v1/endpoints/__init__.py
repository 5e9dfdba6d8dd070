"""API endpoint modules for version 1."""

from .monitoring import router as monitoring_router
from .system import router as system_router

__all__ = [
    "monitoring_router",
    "system_router",
]
