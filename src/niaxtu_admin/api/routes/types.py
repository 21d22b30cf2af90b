from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from niaxtu_admin.api.dependencies import (
    get_complaint_service,
    get_complaint_type_service,
    get_target_type_service,
)
from niaxtu_admin.api.errors import BadRequestError, to_api_error
from niaxtu_admin.api.openapi import error_responses
from niaxtu_admin.api.schemas import (
    ComplaintStatisticsResponse,
    ComplaintTypeCreateRequest,
    ComplaintTypeListResponse,
    ComplaintTypeResponse,
    ComplaintTypeUpdateRequest,
    TargetTypeCreateRequest,
    TargetTypeListResponse,
    TargetTypeResponse,
    TargetTypeUpdateRequest,
    ToggleResponse,
)
from niaxtu_admin.catalog import ComplaintTypeService, Severity, TargetTypeService
from niaxtu_admin.complaints import ComplaintService

router = APIRouter(
    prefix="/types",
    tags=["types"],
)


@router.get(
    "/complaints",
    response_model=ComplaintTypeListResponse,
    responses=error_responses(422, 500),
)
async def list_complaint_types(
    sector_id: str | None = Query(default=None, description="Filtrer par secteur"),
    severity: Severity | None = Query(default=None, description="Filtrer par sévérité"),
    active: bool | None = Query(default=None),
    service: ComplaintTypeService = Depends(get_complaint_type_service),
) -> ComplaintTypeListResponse:
    items = await service.list_items(active=active, sector_id=sector_id, severity=severity)
    return ComplaintTypeListResponse(
        items=[ComplaintTypeResponse.from_domain(item) for item in items],
        total=len(items),
    )


@router.get(
    "/complaints/{type_id}",
    response_model=ComplaintTypeResponse,
    responses=error_responses(404, 422, 500),
)
async def get_complaint_type(
    type_id: str,
    service: ComplaintTypeService = Depends(get_complaint_type_service),
) -> ComplaintTypeResponse:
    try:
        item = await service.get_item(type_id)
    except ValueError as exc:
        raise to_api_error(exc) from exc
    return ComplaintTypeResponse.from_domain(item)


@router.post(
    "/complaints",
    response_model=ComplaintTypeResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(409, 422, 500),
)
async def create_complaint_type(
    payload: ComplaintTypeCreateRequest,
    service: ComplaintTypeService = Depends(get_complaint_type_service),
) -> ComplaintTypeResponse:
    try:
        created = await service.create_item(
            name=payload.name,
            description=payload.description,
            sector_id=payload.sector_id,
            severity=payload.severity,
            auto_assignment=payload.auto_assignment,
        )
    except ValueError as exc:
        raise to_api_error(exc) from exc
    return ComplaintTypeResponse.from_domain(created)


@router.patch(
    "/complaints/{type_id}",
    response_model=ComplaintTypeResponse,
    responses=error_responses(400, 404, 409, 422, 500),
)
async def update_complaint_type(
    type_id: str,
    payload: ComplaintTypeUpdateRequest,
    service: ComplaintTypeService = Depends(get_complaint_type_service),
) -> ComplaintTypeResponse:
    if not payload.has_updates():
        raise BadRequestError("Indiquez au moins un champ à modifier.")
    try:
        updated = await service.update_item(
            type_id,
            name=payload.name,
            description=payload.description,
            severity=payload.severity,
            auto_assignment=payload.auto_assignment,
            is_active=payload.is_active,
        )
    except ValueError as exc:
        raise to_api_error(exc) from exc
    return ComplaintTypeResponse.from_domain(updated)


@router.post(
    "/complaints/{type_id}/toggle",
    response_model=ToggleResponse,
    responses=error_responses(404, 422, 500),
)
async def toggle_complaint_type(
    type_id: str,
    service: ComplaintTypeService = Depends(get_complaint_type_service),
) -> ToggleResponse:
    try:
        toggled = await service.toggle_item(type_id)
    except ValueError as exc:
        raise to_api_error(exc) from exc
    return ToggleResponse(id=toggled.item_id, is_active=toggled.is_active)


@router.delete(
    "/complaints/{type_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=error_responses(404, 409, 422, 500),
)
async def delete_complaint_type(
    type_id: str,
    service: ComplaintTypeService = Depends(get_complaint_type_service),
) -> Response:
    try:
        await service.delete_item(type_id)
    except ValueError as exc:
        raise to_api_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/complaints/{type_id}/statistics",
    response_model=ComplaintStatisticsResponse,
    responses=error_responses(404, 422, 500),
)
async def get_complaint_type_statistics(
    type_id: str,
    service: ComplaintTypeService = Depends(get_complaint_type_service),
    complaint_service: ComplaintService = Depends(get_complaint_service),
) -> ComplaintStatisticsResponse:
    try:
        complaint_type = await service.get_item(type_id)
        stats = await complaint_service.statistics_for("complaint_type_id", complaint_type.item_id)
    except ValueError as exc:
        raise to_api_error(exc) from exc
    return ComplaintStatisticsResponse.from_domain(stats)


@router.get(
    "/targets",
    response_model=TargetTypeListResponse,
    responses=error_responses(422, 500),
)
async def list_target_types(
    category: str | None = Query(default=None),
    active: bool | None = Query(default=None),
    service: TargetTypeService = Depends(get_target_type_service),
) -> TargetTypeListResponse:
    items = await service.list_items(active=active, category=category)
    return TargetTypeListResponse(items=[TargetTypeResponse.from_domain(item) for item in items], total=len(items))


@router.get(
    "/targets/{type_id}",
    response_model=TargetTypeResponse,
    responses=error_responses(404, 422, 500),
)
async def get_target_type(
    type_id: str,
    service: TargetTypeService = Depends(get_target_type_service),
) -> TargetTypeResponse:
    try:
        item = await service.get_item(type_id)
    except ValueError as exc:
        raise to_api_error(exc) from exc
    return TargetTypeResponse.from_domain(item)


@router.post(
    "/targets",
    response_model=TargetTypeResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(409, 422, 500),
)
async def create_target_type(
    payload: TargetTypeCreateRequest,
    service: TargetTypeService = Depends(get_target_type_service),
) -> TargetTypeResponse:
    try:
        created = await service.create_item(
            name=payload.name,
            description=payload.description,
            category=payload.category,
            examples=payload.examples,
        )
    except ValueError as exc:
        raise to_api_error(exc) from exc
    return TargetTypeResponse.from_domain(created)


@router.patch(
    "/targets/{type_id}",
    response_model=TargetTypeResponse,
    responses=error_responses(400, 404, 409, 422, 500),
)
async def update_target_type(
    type_id: str,
    payload: TargetTypeUpdateRequest,
    service: TargetTypeService = Depends(get_target_type_service),
) -> TargetTypeResponse:
    if not payload.has_updates():
        raise BadRequestError("Indiquez au moins un champ à modifier.")
    try:
        updated = await service.update_item(
            type_id,
            name=payload.name,
            description=payload.description,
            category=payload.category,
            examples=payload.examples,
            is_active=payload.is_active,
        )
    except ValueError as exc:
        raise to_api_error(exc) from exc
    return TargetTypeResponse.from_domain(updated)


@router.post(
    "/targets/{type_id}/toggle",
    response_model=ToggleResponse,
    responses=error_responses(404, 422, 500),
)
async def toggle_target_type(
    type_id: str,
    service: TargetTypeService = Depends(get_target_type_service),
) -> ToggleResponse:
    try:
        toggled = await service.toggle_item(type_id)
    except ValueError as exc:
        raise to_api_error(exc) from exc
    return ToggleResponse(id=toggled.item_id, is_active=toggled.is_active)


@router.delete(
    "/targets/{type_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=error_responses(404, 409, 422, 500),
)
async def delete_target_type(
    type_id: str,
    service: TargetTypeService = Depends(get_target_type_service),
) -> Response:
    try:
        await service.delete_item(type_id)
    except ValueError as exc:
        raise to_api_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
