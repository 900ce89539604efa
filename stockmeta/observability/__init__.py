"""
Observability module.

Provides logging configuration and safe structured logging helpers.
"""

from stockmeta.observability.log_utils import log_with_context
from stockmeta.observability.logger import configure_logging

__all__ = ["configure_logging", "log_with_context"]
