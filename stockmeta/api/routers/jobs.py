"""
Job API endpoints.

Routes:
- POST /jobs - Upload a batch of images
- POST /jobs/start - Start generating metadata for pending jobs
- GET /jobs - List jobs with stats
- GET /jobs/stats - Counts per status
- GET /jobs/{id} - One job
- GET /jobs/{id}/preview - JPEG thumbnail
- DELETE /jobs - Clear the session

Dependencies: stockmeta.application.services, stockmeta.models
System role: Job submission and status HTTP API
"""

import logging

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile

from stockmeta.api.deps import get_batch_service
from stockmeta.application.services.batch_service import BatchService, is_image
from stockmeta.core.exceptions import JobNotFoundError, ValidationError
from stockmeta.core.job import ImageUpload, Job
from stockmeta.models.job import (
    JobListResponse,
    JobResponse,
    QueueStats,
    SchedulerStateResponse,
    SubmitResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["jobs"])


def to_job_response(job: Job) -> JobResponse:
    """Public projection of a job without its payload."""
    return JobResponse(
        id=job.id,
        filename=job.filename,
        mime_type=job.mime_type,
        status=job.status.value,
        title=job.title,
        tags=job.tags,
        error=job.error,
        preview_url=f"/api/v1/jobs/{job.id}/preview",
        created_at=job.created_at,
        updated_at=job.updated_at,
    )


@router.post("", response_model=SubmitResponse, status_code=201)
async def submit_images(
    files: list[UploadFile] = File(...),
    batch_service: BatchService = Depends(get_batch_service),
) -> SubmitResponse:
    """
    Submit a batch of images for metadata generation.

    Files without an image/* content type are skipped and reported back.

    Raises:
        HTTPException(400): No image files in the upload
    """
    images = []
    skipped = []
    for upload in files:
        name = upload.filename or "unnamed"
        if not is_image(upload.content_type):
            skipped.append(name)
            continue
        images.append(
            ImageUpload(filename=name, mime_type=upload.content_type, data=await upload.read())
        )

    if skipped:
        logger.info(f"{__name__}:submit_images - skipped non-image files count={len(skipped)}")

    try:
        jobs = batch_service.submit(images)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)

    return SubmitResponse(
        jobs=[to_job_response(job) for job in jobs],
        skipped=skipped,
        scheduler=batch_service.scheduler_state(),
    )


@router.post("/start", response_model=SchedulerStateResponse)
async def start_processing(
    batch_service: BatchService = Depends(get_batch_service),
) -> SchedulerStateResponse:
    """Start generating metadata for every pending job."""
    batch_service.start()
    return batch_service.scheduler_state()


@router.get("", response_model=JobListResponse)
async def list_jobs(
    batch_service: BatchService = Depends(get_batch_service),
) -> JobListResponse:
    """List every job in submission order with aggregate stats and run state."""
    return JobListResponse(
        items=[to_job_response(job) for job in batch_service.list_jobs()],
        stats=batch_service.stats(),
        scheduler=batch_service.scheduler_state(),
    )


@router.get("/stats", response_model=QueueStats)
async def get_stats(
    batch_service: BatchService = Depends(get_batch_service),
) -> QueueStats:
    """Counts per status for progress polling."""
    return batch_service.stats()


@router.get("/scheduler", response_model=SchedulerStateResponse)
async def get_scheduler_state(
    batch_service: BatchService = Depends(get_batch_service),
) -> SchedulerStateResponse:
    """Whether a run is active, for clients polling until it drains."""
    return batch_service.scheduler_state()


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(
    job_id: str,
    batch_service: BatchService = Depends(get_batch_service),
) -> JobResponse:
    """
    Get one job.

    Raises:
        HTTPException(404): Job not found
    """
    try:
        return to_job_response(batch_service.get_job(job_id))
    except JobNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.get("/{job_id}/preview")
async def get_preview(
    job_id: str,
    batch_service: BatchService = Depends(get_batch_service),
) -> Response:
    """
    JPEG thumbnail for a job.

    Raises:
        HTTPException(404): Job not found
        HTTPException(422): Image bytes cannot be decoded
    """
    try:
        thumbnail = batch_service.preview(job_id)
    except JobNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.message)
    return Response(content=thumbnail, media_type="image/jpeg")


@router.delete("")
async def clear_jobs(
    batch_service: BatchService = Depends(get_batch_service),
) -> dict:
    """Clear the session and start over."""
    return {"cleared": batch_service.clear()}
