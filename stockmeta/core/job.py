"""
Job entity and per-job state machine.

PENDING -> IN_FLIGHT -> COMPLETED | FAILED. Terminal states are final and
nothing ever re-enters PENDING.

Dependencies: dataclasses, enum
System role: Unit of work for one submitted image
"""

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone


class JobStatus(str, enum.Enum):
    """
    Job execution states.

    PENDING: Waiting in the queue for a free concurrency slot
    IN_FLIGHT: Analysis call outstanding
    COMPLETED: Title and tags populated
    FAILED: Error message populated
    """

    PENDING = "pending"
    IN_FLIGHT = "in_flight"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({JobStatus.COMPLETED, JobStatus.FAILED})

ALLOWED_TRANSITIONS: dict[JobStatus, frozenset[JobStatus]] = {
    JobStatus.PENDING: frozenset({JobStatus.IN_FLIGHT}),
    JobStatus.IN_FLIGHT: frozenset({JobStatus.COMPLETED, JobStatus.FAILED}),
    JobStatus.COMPLETED: frozenset(),
    JobStatus.FAILED: frozenset(),
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ImageUpload:
    """Raw image submitted by the user."""

    filename: str
    mime_type: str
    data: bytes


@dataclass
class Job:
    """
    One unit of work per submitted image.

    Attributes:
        id: Opaque unique id, stable for the job's lifetime
        filename: Original file name, always exported
        mime_type: Content type sent along with the payload
        payload: Raw image bytes, never mutated
        preview: Preview handle acquired at submission
        status: Current state machine position
        title: Set only when COMPLETED
        tags: Set only when COMPLETED
        error: Set only when FAILED
    """

    id: str
    filename: str
    mime_type: str
    payload: bytes = field(repr=False)
    preview: str
    status: JobStatus = JobStatus.PENDING
    title: str | None = None
    tags: list[str] = field(default_factory=list)
    error: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def can_transition_to(self, new_status: JobStatus) -> bool:
        return new_status in ALLOWED_TRANSITIONS[self.status]

    def touch(self) -> None:
        self.updated_at = _utcnow()
