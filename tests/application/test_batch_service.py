"""
Test suite for BatchService.

Tests submission with and without auto-start, manual start, clear while
calls are outstanding, stats, preview and CSV export.

System role: Verification of the batch orchestration layer
"""

import asyncio

import pytest

from stockmeta.application.services.batch_service import BatchService, is_image
from stockmeta.core.exceptions import JobNotFoundError, ValidationError
from stockmeta.core.job import ImageUpload, JobStatus
from stockmeta.core.scheduler import Scheduler


@pytest.fixture
def batch_service(store, scheduler) -> BatchService:
    """Provide BatchService with manual start."""
    return BatchService(store=store, scheduler=scheduler)


class TestSubmit:
    """Test batch submission."""

    @pytest.mark.asyncio
    async def test_submit_waits_for_manual_start(self, batch_service, uploads, loop_turns) -> None:
        """Without auto_start nothing is admitted until start()."""
        jobs = batch_service.submit(uploads(4))
        await loop_turns()

        assert all(job.status is JobStatus.PENDING for job in jobs)
        assert batch_service.scheduler_state().running is False

        batch_service.start()

        assert batch_service.scheduler_state().in_flight == 3
        assert batch_service.scheduler_state().pending == 1

    @pytest.mark.asyncio
    async def test_submit_auto_starts(self, store, scheduler, uploads) -> None:
        """auto_start admits the batch immediately."""
        service = BatchService(store=store, scheduler=scheduler, auto_start=True)

        service.submit(uploads(5))

        state = service.scheduler_state()
        assert state.running is True
        assert state.in_flight == 3
        assert state.pending == 2
        assert state.max_concurrent_requests == 3

    @pytest.mark.asyncio
    async def test_submit_during_run_ticks(self, batch_service, uploads) -> None:
        """A batch added mid-run joins the run without another start()."""
        batch_service.submit(uploads(1))
        batch_service.start()

        batch_service.submit(uploads(3, start=1))

        assert batch_service.scheduler_state().in_flight == 3

    def test_submit_empty_batch_rejected(self, store, controlled_client) -> None:
        """Empty uploads are a validation error."""
        service = BatchService(store=store, scheduler=Scheduler(store=store, client=controlled_client))

        with pytest.raises(ValidationError):
            service.submit([])


class TestLifecycle:
    """Test full runs and clear."""

    @pytest.mark.asyncio
    async def test_run_to_completion_and_export(self, store, instant_client, uploads) -> None:
        """A full run leaves every job terminal and exportable."""
        instant_client.failing = {b"img-2"}
        scheduler = Scheduler(store=store, client=instant_client, concurrency=2)
        service = BatchService(store=store, scheduler=scheduler, auto_start=True)

        service.submit(uploads(5))
        await asyncio.wait_for(scheduler.wait_drained(), timeout=2)

        stats = service.stats()
        assert stats.completed == 4
        assert stats.failed == 1
        assert stats.completion_rate == 100
        assert service.get_job(service.list_jobs()[2].id).error == "model rejected img-2"

        lines = service.export_csv().splitlines()
        assert lines[0] == "Filename,Title,Keywords,Category,Releases"
        assert lines[1] == 'img-0.jpg,Title img-0,"one, two",,'
        assert lines[3] == "img-2.jpg,,,,"

    @pytest.mark.asyncio
    async def test_clear_while_in_flight(self, batch_service, controlled_client, uploads, loop_turns) -> None:
        """clear() empties the store and late settlements change nothing."""
        batch_service.submit(uploads(5))
        batch_service.start()
        await loop_turns()

        assert batch_service.clear() == 5
        for payload in list(controlled_client.outstanding):
            controlled_client.succeed(payload)
        await loop_turns()

        assert batch_service.list_jobs() == []
        assert batch_service.stats().total == 0
        state = batch_service.scheduler_state()
        assert state.running is False
        assert state.drained is True
        assert state.in_flight == 0

    @pytest.mark.asyncio
    async def test_get_unknown_job(self, batch_service) -> None:
        """Unknown ids raise JobNotFoundError."""
        with pytest.raises(JobNotFoundError):
            batch_service.get_job("nope")


class TestPreview:
    """Test preview rendering through the service."""

    def test_preview_renders_thumbnail(self, store, controlled_client, png_bytes) -> None:
        """Preview returns JPEG bytes for a real image."""
        service = BatchService(store=store, scheduler=Scheduler(store=store, client=controlled_client))
        job = service.submit([ImageUpload(filename="a.png", mime_type="image/png", data=png_bytes)])[0]

        thumbnail = service.preview(job.id)

        assert thumbnail.startswith(b"\xff\xd8")

    def test_preview_released_on_clear(self, store, controlled_client, png_bytes) -> None:
        """After clear the job and its preview are gone."""
        service = BatchService(store=store, scheduler=Scheduler(store=store, client=controlled_client))
        job = service.submit([ImageUpload(filename="a.png", mime_type="image/png", data=png_bytes)])[0]

        service.clear()

        assert job.preview not in store.previews
        with pytest.raises(JobNotFoundError):
            service.preview(job.id)


@pytest.mark.parametrize(
    "mime_type,expected",
    [("image/jpeg", True), ("image/png", True), ("application/pdf", False), ("", False), (None, False)],
)
def test_is_image(mime_type, expected) -> None:
    """Only image/* content types are accepted."""
    assert is_image(mime_type) is expected
