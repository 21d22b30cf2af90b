from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from niaxtu_admin.api.dependencies import get_complaint_service
from niaxtu_admin.api.openapi import error_responses
from niaxtu_admin.api.schemas import ComplaintListResponse, ComplaintResponse
from niaxtu_admin.complaints import ComplaintService, ComplaintStatus

router = APIRouter(
    prefix="/complaints",
    tags=["complaints"],
)


@router.get(
    "",
    response_model=ComplaintListResponse,
    responses=error_responses(422, 500),
)
async def list_complaints(
    status: ComplaintStatus | None = Query(default=None, description="Filtrer par statut"),
    limit: int = Query(default=100, ge=1, le=500),
    service: ComplaintService = Depends(get_complaint_service),
) -> ComplaintListResponse:
    if status is not None:
        complaints = await service.list_by_status(status, limit=limit)
    else:
        complaints = await service.list_recent(limit=limit)
    return ComplaintListResponse(
        items=[ComplaintResponse.from_domain(complaint) for complaint in complaints],
        total=len(complaints),
    )
