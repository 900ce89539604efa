"""
Batch service orchestrator.

Coordinates the job store and scheduler for the HTTP layer: batch
submission, manual start, bulk clear, listing, stats and CSV export.

Dependencies: stockmeta.core
System role: Job runner orchestration
"""

import logging
from typing import Iterable

from stockmeta.core.csv_export import render_csv
from stockmeta.core.exceptions import ValidationError
from stockmeta.core.job import ImageUpload, Job
from stockmeta.core.job_store import JobStore
from stockmeta.core.scheduler import Scheduler
from stockmeta.core.stats import compute_stats
from stockmeta.models.job import QueueStats, SchedulerStateResponse

logger = logging.getLogger(__name__)


def is_image(mime_type: str | None) -> bool:
    """Uploads are accepted only with an image/* content type."""
    return bool(mime_type) and mime_type.startswith("image/")


class BatchService:
    """
    Batch service orchestrator.

    Owns no state of its own; the store and scheduler are injected so one
    pair can be shared by every request.
    """

    def __init__(self, store: JobStore, scheduler: Scheduler, auto_start: bool = False) -> None:
        """
        Initialize batch service.

        Args:
            store: Job store
            scheduler: Scheduler driving that store
            auto_start: Begin processing as soon as a batch is submitted
        """
        self.store = store
        self.scheduler = scheduler
        self.auto_start = auto_start

    def submit(self, images: Iterable[ImageUpload]) -> list[Job]:
        """
        Enqueue a batch of images.

        Processing starts immediately when auto_start is enabled or a run
        is already in progress; otherwise it waits for start().

        Raises:
            ValidationError: Batch is empty
        """
        images = list(images)
        if not images:
            raise ValidationError("No images to submit", field="files")

        jobs = self.store.submit(images)
        if self.auto_start or self.scheduler.is_running:
            self.scheduler.start()
        return jobs

    def start(self) -> list[Job]:
        """Start generating metadata for everything pending."""
        return self.scheduler.start()

    def clear(self) -> int:
        """Discard all jobs; outstanding calls settle into nothing."""
        count = self.store.clear()
        self.scheduler.reset()
        return count

    def get_job(self, job_id: str) -> Job:
        return self.store.get(job_id)

    def list_jobs(self) -> list[Job]:
        return self.store.list_jobs()

    def stats(self) -> QueueStats:
        return compute_stats(self.store.list_jobs())

    def scheduler_state(self) -> SchedulerStateResponse:
        return SchedulerStateResponse(
            running=self.scheduler.is_running,
            drained=self.scheduler.is_drained,
            in_flight=self.store.in_flight_count,
            pending=self.store.pending_count,
            max_concurrent_requests=self.scheduler.concurrency,
        )

    def preview(self, job_id: str) -> bytes:
        """JPEG thumbnail for a job."""
        job = self.store.get(job_id)
        return self.store.previews.render(job.preview)

    def export_csv(self) -> str:
        jobs = self.store.list_jobs()
        logger.info(f"{__name__}:export_csv - rows={len(jobs)}")
        return render_csv(jobs)
