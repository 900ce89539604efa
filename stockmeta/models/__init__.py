"""Pydantic schemas shared by the API, services and analysis boundary."""

from stockmeta.models.analysis import AnalysisResult, MAX_STORED_TAGS
from stockmeta.models.job import (
    JobListResponse,
    JobResponse,
    QueueStats,
    SchedulerStateResponse,
    SubmitResponse,
)

__all__ = [
    "AnalysisResult",
    "MAX_STORED_TAGS",
    "JobListResponse",
    "JobResponse",
    "QueueStats",
    "SchedulerStateResponse",
    "SubmitResponse",
]
