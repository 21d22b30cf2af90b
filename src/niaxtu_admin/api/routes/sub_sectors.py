from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from niaxtu_admin.api.dependencies import get_sub_sector_service
from niaxtu_admin.api.errors import BadRequestError, to_api_error
from niaxtu_admin.api.openapi import error_responses
from niaxtu_admin.api.schemas import (
    SubSectorCreateRequest,
    SubSectorListResponse,
    SubSectorResponse,
    SubSectorUpdateRequest,
    ToggleResponse,
)
from niaxtu_admin.catalog import SubSectorService

router = APIRouter(
    prefix="/subsectors",
    tags=["sub-sectors"],
)


@router.get(
    "",
    response_model=SubSectorListResponse,
    responses=error_responses(422, 500),
)
async def list_sub_sectors(
    sector_id: str | None = Query(default=None, description="Filtrer par secteur"),
    active: bool | None = Query(default=None),
    service: SubSectorService = Depends(get_sub_sector_service),
) -> SubSectorListResponse:
    items = await service.list_items(active=active, sector_id=sector_id)
    return SubSectorListResponse(items=[SubSectorResponse.from_domain(item) for item in items], total=len(items))


@router.get(
    "/{sub_sector_id}",
    response_model=SubSectorResponse,
    responses=error_responses(404, 422, 500),
)
async def get_sub_sector(
    sub_sector_id: str,
    service: SubSectorService = Depends(get_sub_sector_service),
) -> SubSectorResponse:
    try:
        item = await service.get_item(sub_sector_id)
    except ValueError as exc:
        raise to_api_error(exc) from exc
    return SubSectorResponse.from_domain(item)


@router.post(
    "",
    response_model=SubSectorResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(409, 422, 500),
)
async def create_sub_sector(
    payload: SubSectorCreateRequest,
    service: SubSectorService = Depends(get_sub_sector_service),
) -> SubSectorResponse:
    try:
        created = await service.create_item(
            sector_id=payload.sector_id,
            name=payload.name,
            description=payload.description,
            icon=payload.icon,
            order=payload.order,
        )
    except ValueError as exc:
        raise to_api_error(exc) from exc
    return SubSectorResponse.from_domain(created)


@router.patch(
    "/{sub_sector_id}",
    response_model=SubSectorResponse,
    responses=error_responses(400, 404, 409, 422, 500),
)
async def update_sub_sector(
    sub_sector_id: str,
    payload: SubSectorUpdateRequest,
    service: SubSectorService = Depends(get_sub_sector_service),
) -> SubSectorResponse:
    if not payload.has_updates():
        raise BadRequestError("Indiquez au moins un champ à modifier.")
    try:
        updated = await service.update_item(
            sub_sector_id,
            name=payload.name,
            description=payload.description,
            icon=payload.icon,
            order=payload.order,
            is_active=payload.is_active,
        )
    except ValueError as exc:
        raise to_api_error(exc) from exc
    return SubSectorResponse.from_domain(updated)


@router.post(
    "/{sub_sector_id}/toggle",
    response_model=ToggleResponse,
    responses=error_responses(404, 422, 500),
)
async def toggle_sub_sector(
    sub_sector_id: str,
    service: SubSectorService = Depends(get_sub_sector_service),
) -> ToggleResponse:
    try:
        toggled = await service.toggle_item(sub_sector_id)
    except ValueError as exc:
        raise to_api_error(exc) from exc
    return ToggleResponse(id=toggled.item_id, is_active=toggled.is_active)


@router.delete(
    "/{sub_sector_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=error_responses(404, 409, 422, 500),
)
async def delete_sub_sector(
    sub_sector_id: str,
    service: SubSectorService = Depends(get_sub_sector_service),
) -> Response:
    try:
        await service.delete_item(sub_sector_id)
    except ValueError as exc:
        raise to_api_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
