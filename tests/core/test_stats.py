"""Tests for the queue statistics projection."""

from stockmeta.core.job import JobStatus
from stockmeta.core.stats import compute_stats
from stockmeta.models.analysis import AnalysisResult


def test_empty_store_has_zero_stats() -> None:
    """No jobs means all zeroes and a 0% completion rate."""
    stats = compute_stats([])

    assert stats.total == 0
    assert stats.completion_rate == 0


def test_counts_each_status(store, uploads) -> None:
    """Each status is counted once and terminal jobs drive the rate."""
    jobs = store.submit(uploads(6))
    for _ in range(4):
        store.admit_next()
    store.transition(jobs[0].id, JobStatus.COMPLETED, AnalysisResult(title="t"))
    store.transition(jobs[1].id, JobStatus.FAILED, "boom")

    stats = compute_stats(store.list_jobs())

    assert stats.total == 6
    assert stats.pending == 2
    assert stats.processing == 2
    assert stats.completed == 1
    assert stats.failed == 1
    assert stats.completion_rate == 33


def test_completion_rate_reaches_100(store, uploads) -> None:
    """All terminal jobs means 100%."""
    jobs = store.submit(uploads(2))
    store.admit_next()
    store.admit_next()
    store.transition(jobs[0].id, JobStatus.COMPLETED, AnalysisResult(title="t"))
    store.transition(jobs[1].id, JobStatus.FAILED, "x")

    assert compute_stats(store.list_jobs()).completion_rate == 100
