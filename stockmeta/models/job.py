"""
Job API schemas.

Response models for job listing, submission, stats and scheduler state.

Dependencies: pydantic
System role: Job status API contracts
"""

from datetime import datetime

from pydantic import BaseModel, Field


class JobResponse(BaseModel):
    """Public view of one job (payload bytes are never exposed)."""

    id: str
    filename: str
    mime_type: str
    status: str
    title: str | None = None
    tags: list[str] = Field(default_factory=list)
    error: str | None = None
    preview_url: str
    created_at: datetime
    updated_at: datetime


class QueueStats(BaseModel):
    """Counts per status over the whole store."""

    total: int = 0
    pending: int = 0
    processing: int = 0
    completed: int = 0
    failed: int = 0
    completion_rate: int = Field(
        default=0,
        description="Percentage (0-100) of jobs in a terminal state",
    )


class SchedulerStateResponse(BaseModel):
    """Snapshot of the scheduler's run state."""

    running: bool
    drained: bool
    in_flight: int
    pending: int
    max_concurrent_requests: int


class SubmitResponse(BaseModel):
    """Response for a batch submission."""

    jobs: list[JobResponse]
    skipped: list[str] = Field(
        default_factory=list,
        description="Uploaded file names rejected because they are not images",
    )
    scheduler: SchedulerStateResponse


class JobListResponse(BaseModel):
    """All jobs in submission order plus aggregate counts and run state."""

    items: list[JobResponse]
    stats: QueueStats
    scheduler: SchedulerStateResponse
