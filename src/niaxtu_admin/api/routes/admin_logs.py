from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from niaxtu_admin.api.dependencies import get_audit_log_repository, get_request_log_repository
from niaxtu_admin.api.openapi import error_responses
from niaxtu_admin.api.schemas import (
    AuditLogItemResponse,
    AuditLogListResponse,
    RequestLogItemResponse,
    RequestLogListResponse,
)
from niaxtu_admin.storage.firestore_audit_log_repository import FirestoreAuditLogRepository
from niaxtu_admin.storage.firestore_request_log_repository import FirestoreRequestLogRepository

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
)


@router.get(
    "/logs",
    response_model=RequestLogListResponse,
    responses=error_responses(422, 500),
)
async def list_request_logs(
    limit: int = Query(default=100, ge=1, le=500),
    min_status: int | None = Query(default=None, ge=100, le=599, description="Code HTTP minimal"),
    repository: FirestoreRequestLogRepository = Depends(get_request_log_repository),
) -> RequestLogListResponse:
    entries = await repository.list_recent(limit=limit, min_status=min_status)
    return RequestLogListResponse(
        items=[RequestLogItemResponse.from_domain(entry) for entry in entries],
        total=len(entries),
    )


@router.get(
    "/audit-logs",
    response_model=AuditLogListResponse,
    responses=error_responses(422, 500),
)
async def list_audit_logs(
    entity_id: str | None = Query(default=None),
    limit: int = Query(default=100, ge=1, le=500),
    repository: FirestoreAuditLogRepository = Depends(get_audit_log_repository),
) -> AuditLogListResponse:
    records = await repository.list_recent(entity_id=entity_id, limit=limit)
    return AuditLogListResponse(
        items=[AuditLogItemResponse.from_domain(record) for record in records],
        total=len(records),
    )
