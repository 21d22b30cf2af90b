from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from niaxtu_admin.api.dependencies import get_complaint_service, get_sector_service, get_sub_sector_service
from niaxtu_admin.api.errors import BadRequestError, to_api_error
from niaxtu_admin.api.openapi import error_responses
from niaxtu_admin.api.schemas import (
    ComplaintStatisticsResponse,
    SectorCreateRequest,
    SectorListResponse,
    SectorResponse,
    SectorUpdateRequest,
    SubSectorListResponse,
    SubSectorResponse,
    ToggleResponse,
)
from niaxtu_admin.catalog import SectorService, SubSectorService
from niaxtu_admin.complaints import ComplaintService

router = APIRouter(
    prefix="/sectors",
    tags=["sectors"],
)


@router.get(
    "",
    response_model=SectorListResponse,
    responses=error_responses(422, 500),
)
async def list_sectors(
    active: bool | None = Query(default=None, description="Filtrer par statut actif"),
    service: SectorService = Depends(get_sector_service),
) -> SectorListResponse:
    items = await service.list_items(active=active)
    return SectorListResponse(items=[SectorResponse.from_domain(item) for item in items], total=len(items))


@router.get(
    "/{sector_id}",
    response_model=SectorResponse,
    responses=error_responses(404, 422, 500),
)
async def get_sector(
    sector_id: str,
    service: SectorService = Depends(get_sector_service),
) -> SectorResponse:
    try:
        item = await service.get_item(sector_id)
    except ValueError as exc:
        raise to_api_error(exc) from exc
    return SectorResponse.from_domain(item)


@router.post(
    "",
    response_model=SectorResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(409, 422, 500),
)
async def create_sector(
    payload: SectorCreateRequest,
    service: SectorService = Depends(get_sector_service),
) -> SectorResponse:
    try:
        created = await service.create_item(
            name=payload.name,
            description=payload.description,
            icon=payload.icon,
            color=payload.color,
            order=payload.order,
        )
    except ValueError as exc:
        raise to_api_error(exc) from exc
    return SectorResponse.from_domain(created)


@router.patch(
    "/{sector_id}",
    response_model=SectorResponse,
    responses=error_responses(400, 404, 409, 422, 500),
)
async def update_sector(
    sector_id: str,
    payload: SectorUpdateRequest,
    service: SectorService = Depends(get_sector_service),
) -> SectorResponse:
    if not payload.has_updates():
        raise BadRequestError("Indiquez au moins un champ à modifier.")
    try:
        updated = await service.update_item(
            sector_id,
            name=payload.name,
            description=payload.description,
            icon=payload.icon,
            color=payload.color,
            order=payload.order,
            is_active=payload.is_active,
        )
    except ValueError as exc:
        raise to_api_error(exc) from exc
    return SectorResponse.from_domain(updated)


@router.post(
    "/{sector_id}/toggle",
    response_model=ToggleResponse,
    responses=error_responses(404, 422, 500),
)
async def toggle_sector(
    sector_id: str,
    service: SectorService = Depends(get_sector_service),
) -> ToggleResponse:
    try:
        toggled = await service.toggle_item(sector_id)
    except ValueError as exc:
        raise to_api_error(exc) from exc
    return ToggleResponse(id=toggled.item_id, is_active=toggled.is_active)


@router.delete(
    "/{sector_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=error_responses(404, 409, 422, 500),
)
async def delete_sector(
    sector_id: str,
    service: SectorService = Depends(get_sector_service),
) -> Response:
    try:
        await service.delete_item(sector_id)
    except ValueError as exc:
        raise to_api_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{sector_id}/subsectors",
    response_model=SubSectorListResponse,
    responses=error_responses(404, 422, 500),
)
async def list_sector_sub_sectors(
    sector_id: str,
    active: bool | None = Query(default=None),
    service: SectorService = Depends(get_sector_service),
    sub_sector_service: SubSectorService = Depends(get_sub_sector_service),
) -> SubSectorListResponse:
    try:
        sector = await service.get_item(sector_id)
        items = await sub_sector_service.list_items(active=active, sector_id=sector.item_id)
    except ValueError as exc:
        raise to_api_error(exc) from exc
    return SubSectorListResponse(items=[SubSectorResponse.from_domain(item) for item in items], total=len(items))


@router.get(
    "/{sector_id}/statistics",
    response_model=ComplaintStatisticsResponse,
    responses=error_responses(404, 422, 500),
)
async def get_sector_statistics(
    sector_id: str,
    service: SectorService = Depends(get_sector_service),
    complaint_service: ComplaintService = Depends(get_complaint_service),
) -> ComplaintStatisticsResponse:
    try:
        sector = await service.get_item(sector_id)
        stats = await complaint_service.statistics_for("sector_id", sector.item_id)
    except ValueError as exc:
        raise to_api_error(exc) from exc
    return ComplaintStatisticsResponse.from_domain(stats)
