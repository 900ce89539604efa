"""Tests for the Adobe Stock CSV export."""

import csv
import io
from datetime import datetime, timezone

from stockmeta.core.csv_export import CSV_HEADER, export_filename, render_csv
from stockmeta.core.job import ImageUpload, JobStatus
from stockmeta.models.analysis import AnalysisResult


def complete(store, job, title: str, tags: list[str]) -> None:
    assert store.admit_next() is job
    store.transition(job.id, JobStatus.COMPLETED, AnalysisResult(title=title, tags=tags))


def test_header_only_for_empty_store() -> None:
    """Empty export is just the header line."""
    assert render_csv([]) == "Filename,Title,Keywords,Category,Releases\n"


def test_completed_job_row_quotes_title_and_keywords(store, uploads) -> None:
    """Comma-bearing title and the 47 joined tags are quoted."""
    job = store.submit(uploads(1))[0]
    tags = ["beach", "sunset"] + [f"tag{i}" for i in range(45)]
    complete(store, job, "Sunset over the bay, golden hour", tags)

    lines = render_csv([job]).splitlines()

    expected_keywords = ", ".join(tags)
    assert len(tags) == 47
    assert lines[1] == f'img-0.jpg,"Sunset over the bay, golden hour","{expected_keywords}",,'


def test_inner_quotes_are_doubled(store) -> None:
    """Double quotes inside a field are escaped by doubling."""
    job = store.submit([ImageUpload(filename='the "best" shot.jpg', mime_type="image/jpeg", data=b"x")])[0]
    complete(store, job, 'A "hero" portrait', ["portrait"])

    row = render_csv([job]).splitlines()[1]

    assert row == '"the ""best"" shot.jpg","A ""hero"" portrait",portrait,,'


def test_every_job_exported_regardless_of_status(store, uploads) -> None:
    """Pending, in-flight and failed jobs still export their filename."""
    jobs = store.submit(uploads(3))
    store.admit_next()
    store.admit_next()
    store.transition(jobs[1].id, JobStatus.FAILED, "boom")

    rows = list(csv.reader(io.StringIO(render_csv(store.list_jobs()))))

    assert tuple(rows[0]) == CSV_HEADER
    assert rows[1:] == [
        ["img-0.jpg", "", "", "", ""],
        ["img-1.jpg", "", "", "", ""],
        ["img-2.jpg", "", "", "", ""],
    ]


def test_newline_in_title_is_quoted(store, uploads) -> None:
    """Multi-line titles survive a CSV round trip."""
    job = store.submit(uploads(1))[0]
    complete(store, job, "Line one\nline two", ["a"])

    rows = list(csv.reader(io.StringIO(render_csv([job]))))

    assert rows[1][1] == "Line one\nline two"


def test_export_filename_uses_timestamp() -> None:
    """Download name embeds a colon-free timestamp."""
    now = datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    assert export_filename(now) == "AdobeStock_Metadata_2025-01-02T03-04-05.csv"
