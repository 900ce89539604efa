"""
Adobe Stock CSV export.

Header must be exactly: Filename,Title,Keywords,Category,Releases.
One row per job regardless of status. Category and Releases stay blank.

Dependencies: csv (stdlib)
System role: Export of generated metadata for marketplace import
"""

import csv
import io
from datetime import datetime, timezone
from typing import Iterable

from stockmeta.core.job import Job

CSV_HEADER = ("Filename", "Title", "Keywords", "Category", "Releases")
KEYWORD_SEPARATOR = ", "


def job_to_row(job: Job) -> tuple[str, str, str, str, str]:
    """Columns for one job; non-completed jobs export blank metadata."""
    return (
        job.filename,
        job.title or "",
        KEYWORD_SEPARATOR.join(job.tags),
        "",
        "",
    )


def render_csv(jobs: Iterable[Job]) -> str:
    """
    Render jobs as Adobe Stock CSV text.

    Fields containing a comma, double quote or newline are quoted with
    inner quotes doubled; everything else is written bare.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    writer.writerows(job_to_row(job) for job in jobs)
    return buffer.getvalue()


def export_filename(now: datetime | None = None) -> str:
    """Download name like AdobeStock_Metadata_2025-01-01T12-00-00.csv."""
    now = now or datetime.now(timezone.utc)
    return f"AdobeStock_Metadata_{now.strftime('%Y-%m-%dT%H-%M-%S')}.csv"
