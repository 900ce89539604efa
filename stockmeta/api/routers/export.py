"""
Export API endpoints.

Routes: GET /export/csv

Dependencies: stockmeta.application.services, stockmeta.core.csv_export
System role: Metadata download HTTP API
"""

from fastapi import APIRouter, Depends, Response

from stockmeta.api.deps import get_batch_service
from stockmeta.application.services.batch_service import BatchService
from stockmeta.core.csv_export import export_filename

router = APIRouter(prefix="/export", tags=["export"])


@router.get("/csv")
async def export_csv(
    batch_service: BatchService = Depends(get_batch_service),
) -> Response:
    """Download every job as an Adobe Stock import CSV."""
    return Response(
        content=batch_service.export_csv(),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
    )
