"""
Job item store.

Single source of truth for submitted jobs, the FIFO pending queue and the
set of in-flight ids. Every mutation is synchronous, so callers running on
one event loop never observe a half-applied step.

Dependencies: stockmeta.core.job, stockmeta.core.previews
System role: Authoritative job state for display, stats and export
"""

import logging
import uuid
from collections import deque
from typing import Iterable, Union

from stockmeta.core.exceptions import IllegalTransitionError, JobNotFoundError
from stockmeta.core.job import ImageUpload, Job, JobStatus
from stockmeta.core.previews import PreviewRegistry
from stockmeta.models.analysis import AnalysisResult

logger = logging.getLogger(__name__)

TransitionPayload = Union[AnalysisResult, str, None]


class JobStore:
    """
    In-memory job collection with queue and in-flight bookkeeping.

    Jobs stay in the store after reaching a terminal state until clear().
    Each clear() bumps `generation` so late settlements from the previous
    session can be told apart.
    """

    def __init__(self, previews: PreviewRegistry | None = None) -> None:
        self.previews = previews if previews is not None else PreviewRegistry()
        self._jobs: dict[str, Job] = {}
        self._queue: deque[str] = deque()
        self._in_flight: set[str] = set()
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def pending_count(self) -> int:
        return len(self._queue)

    @property
    def in_flight_count(self) -> int:
        return len(self._in_flight)

    def __len__(self) -> int:
        return len(self._jobs)

    def __contains__(self, job_id: object) -> bool:
        return job_id in self._jobs

    def get(self, job_id: str) -> Job:
        """Return the job or raise JobNotFoundError."""
        try:
            return self._jobs[job_id]
        except KeyError:
            raise JobNotFoundError(job_id) from None

    def list_jobs(self) -> list[Job]:
        """All jobs in submission order."""
        return list(self._jobs.values())

    def queued_ids(self) -> list[str]:
        """Snapshot of the pending queue, head first."""
        return list(self._queue)

    def submit(self, images: Iterable[ImageUpload]) -> list[Job]:
        """
        Create one PENDING job per image and enqueue them in input order.

        Does not trigger scheduling.

        Args:
            images: Uploaded images

        Returns:
            list[Job]: Created jobs, same order as input
        """
        created = []
        for image in images:
            job = Job(
                id=str(uuid.uuid4()),
                filename=image.filename,
                mime_type=image.mime_type,
                payload=image.data,
                preview=self.previews.acquire(image.data),
            )
            self._jobs[job.id] = job
            self._queue.append(job.id)
            created.append(job)

        logger.info(
            f"{__name__}:submit - queued={len(created)} "
            f"pending={len(self._queue)} total={len(self._jobs)}"
        )
        return created

    def admit_next(self) -> Job | None:
        """
        Pop the queue head and move it to IN_FLIGHT in one step.

        Returns:
            Job | None: Admitted job, or None when the queue is empty
        """
        if not self._queue:
            return None
        job = self._jobs[self._queue.popleft()]
        self._in_flight.add(job.id)
        return self._apply(job, JobStatus.IN_FLIGHT)

    def transition(
        self,
        job_id: str,
        new_status: JobStatus,
        result_or_error: TransitionPayload = None,
    ) -> Job:
        """
        Apply one legal state machine edge.

        COMPLETED requires an AnalysisResult; FAILED requires an error message.
        IN_FLIGHT is only reachable through admit_next().

        Raises:
            JobNotFoundError: Unknown job id
            IllegalTransitionError: Edge not allowed from the current status
        """
        job = self.get(job_id)
        if new_status is JobStatus.IN_FLIGHT or not job.can_transition_to(new_status):
            raise IllegalTransitionError(job_id, job.status.value, new_status.value)

        if new_status is JobStatus.COMPLETED:
            if not isinstance(result_or_error, AnalysisResult):
                raise TypeError("COMPLETED transition requires an AnalysisResult")
            job.title = result_or_error.title
            job.tags = list(result_or_error.tags)
            self._in_flight.discard(job_id)
        elif new_status is JobStatus.FAILED:
            job.error = str(result_or_error) if result_or_error else "Unknown error"
            self._in_flight.discard(job_id)

        return self._apply(job, new_status)

    def _apply(self, job: Job, new_status: JobStatus) -> Job:
        job.status = new_status
        job.touch()
        logger.debug(f"{__name__}:transition - job_id={job.id} status={new_status.value}")
        return job

    def clear(self) -> int:
        """
        Discard every job, the queue and the in-flight set.

        Outstanding analysis calls are not cancelled; their results are
        ignored on settlement because their ids no longer resolve.

        Returns:
            int: Number of jobs discarded
        """
        count = len(self._jobs)
        released = self.previews.release_all()
        self._jobs.clear()
        self._queue.clear()
        self._in_flight.clear()
        self._generation += 1
        logger.info(
            f"{__name__}:clear - discarded={count} previews_released={released} "
            f"generation={self._generation}"
        )
        return count
