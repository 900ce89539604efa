"""
Queue statistics projection.

Read-only counts per status derived from the job store.

Dependencies: stockmeta.core.job
System role: Progress summary for dashboards and polling clients
"""

from collections import Counter
from typing import Iterable

from stockmeta.core.job import Job, JobStatus
from stockmeta.models.job import QueueStats


def compute_stats(jobs: Iterable[Job]) -> QueueStats:
    """Count jobs per status; completion_rate is terminal jobs over total, rounded."""
    counts = Counter(job.status for job in jobs)
    total = sum(counts.values())
    finished = counts[JobStatus.COMPLETED] + counts[JobStatus.FAILED]
    return QueueStats(
        total=total,
        pending=counts[JobStatus.PENDING],
        processing=counts[JobStatus.IN_FLIGHT],
        completed=counts[JobStatus.COMPLETED],
        failed=counts[JobStatus.FAILED],
        completion_rate=round(finished * 100 / total) if total else 0,
    )
