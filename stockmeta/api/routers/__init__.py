"""API routers."""

from .export import router as export_router
from .health import router as health_router
from .jobs import router as jobs_router

__all__ = [
    "export_router",
    "health_router",
    "jobs_router",
]
