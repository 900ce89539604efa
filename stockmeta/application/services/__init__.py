"""Service orchestrators."""

from .batch_service import BatchService

__all__ = ["BatchService"]
