from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from niaxtu_admin.api.dependencies import get_structure_service
from niaxtu_admin.api.errors import BadRequestError, to_api_error
from niaxtu_admin.api.openapi import error_responses
from niaxtu_admin.api.schemas import (
    StructureCreateRequest,
    StructureListResponse,
    StructureResponse,
    StructureUpdateRequest,
    ToggleResponse,
)
from niaxtu_admin.catalog import StructureService

router = APIRouter(
    prefix="/structures",
    tags=["structures"],
)


@router.get(
    "",
    response_model=StructureListResponse,
    responses=error_responses(422, 500),
)
async def list_structures(
    sector_id: str | None = Query(default=None),
    sub_sector_id: str | None = Query(default=None),
    city: str | None = Query(default=None, description="Ville exacte"),
    q: str | None = Query(default=None, description="Recherche partielle sur le nom"),
    active: bool | None = Query(default=None),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    service: StructureService = Depends(get_structure_service),
) -> StructureListResponse:
    items = await service.list_items(active=active, sector_id=sector_id, sub_sector_id=sub_sector_id, city=city)

    if q:
        needle = q.strip().lower()
        items = [item for item in items if needle in item.name.lower()]

    total = len(items)
    paged_items = items[offset : offset + limit]
    return StructureListResponse(items=[StructureResponse.from_domain(item) for item in paged_items], total=total)


@router.get(
    "/{structure_id}",
    response_model=StructureResponse,
    responses=error_responses(404, 422, 500),
)
async def get_structure(
    structure_id: str,
    service: StructureService = Depends(get_structure_service),
) -> StructureResponse:
    try:
        item = await service.get_item(structure_id)
    except ValueError as exc:
        raise to_api_error(exc) from exc
    return StructureResponse.from_domain(item)


@router.post(
    "",
    response_model=StructureResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(409, 422, 500),
)
async def create_structure(
    payload: StructureCreateRequest,
    service: StructureService = Depends(get_structure_service),
) -> StructureResponse:
    try:
        created = await service.create_item(
            sector_id=payload.sector_id,
            name=payload.name,
            sub_sector_id=payload.sub_sector_id,
            description=payload.description,
            structure_type=payload.structure_type,
            address=payload.address,
            city=payload.city,
            phone=payload.phone,
            email=payload.email,
        )
    except ValueError as exc:
        raise to_api_error(exc) from exc
    return StructureResponse.from_domain(created)


@router.patch(
    "/{structure_id}",
    response_model=StructureResponse,
    responses=error_responses(400, 404, 409, 422, 500),
)
async def update_structure(
    structure_id: str,
    payload: StructureUpdateRequest,
    service: StructureService = Depends(get_structure_service),
) -> StructureResponse:
    if not payload.has_updates():
        raise BadRequestError("Indiquez au moins un champ à modifier.")
    try:
        updated = await service.update_item(
            structure_id,
            name=payload.name,
            sub_sector_id=payload.sub_sector_id,
            description=payload.description,
            structure_type=payload.structure_type,
            address=payload.address,
            city=payload.city,
            phone=payload.phone,
            email=payload.email,
            is_active=payload.is_active,
        )
    except ValueError as exc:
        raise to_api_error(exc) from exc
    return StructureResponse.from_domain(updated)


@router.post(
    "/{structure_id}/toggle",
    response_model=ToggleResponse,
    responses=error_responses(404, 422, 500),
)
async def toggle_structure(
    structure_id: str,
    service: StructureService = Depends(get_structure_service),
) -> ToggleResponse:
    try:
        toggled = await service.toggle_item(structure_id)
    except ValueError as exc:
        raise to_api_error(exc) from exc
    return ToggleResponse(id=toggled.item_id, is_active=toggled.is_active)


@router.delete(
    "/{structure_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=error_responses(404, 409, 422, 500),
)
async def delete_structure(
    structure_id: str,
    service: StructureService = Depends(get_structure_service),
) -> Response:
    try:
        await service.delete_item(structure_id)
    except ValueError as exc:
        raise to_api_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
