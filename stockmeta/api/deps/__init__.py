"""Dependency providers for FastAPI routes."""

from stockmeta.api.deps.dependencies import (
    get_batch_service,
    get_service_cache,
)

__all__ = [
    "get_batch_service",
    "get_service_cache",
]
