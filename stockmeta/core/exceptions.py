"""
Exception hierarchy for the StockMeta application.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class StockMetaException(Exception):
    """Base exception for all StockMeta application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(StockMetaException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class JobNotFoundError(StockMetaException):
    """Raised when a job id is not present in the store."""

    def __init__(self, job_id: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize job not found error.

        Args:
            job_id: ID of the missing job
            details: Additional context
        """
        details = details or {}
        details["job_id"] = job_id
        self.job_id = job_id
        super().__init__(f"Job not found: {job_id}", details)


class IllegalTransitionError(StockMetaException):
    """
    Raised when a job is asked to move along an edge the state machine forbids.

    This signals a scheduler bug, never bad user input.
    """

    def __init__(
        self,
        job_id: str,
        current: str,
        requested: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize illegal transition error.

        Args:
            job_id: ID of the job
            current: Status the job is in
            requested: Status that was requested
            details: Additional context
        """
        details = details or {}
        details.update({"job_id": job_id, "current": current, "requested": requested})
        self.job_id = job_id
        self.current = current
        self.requested = requested
        super().__init__(
            f"Illegal transition {current} -> {requested} for job {job_id}",
            details,
        )


class AnalysisError(StockMetaException):
    """Raised when the vision model call or its output parsing fails."""

    def __init__(
        self,
        message: str,
        model: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize analysis error.

        Args:
            message: Error message
            model: Model that was called
            details: Additional context
        """
        details = details or {}
        if model:
            details["model"] = model
        super().__init__(message, details)
