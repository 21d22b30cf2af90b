from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from niaxtu_admin.api.dependencies import get_settings, get_statistics_service
from niaxtu_admin.api.openapi import error_responses
from niaxtu_admin.api.schemas import DashboardStatisticsResponse
from niaxtu_admin.settings import AppSettings
from niaxtu_admin.statistics import Period, StatisticsService

router = APIRouter(
    prefix="/statistics",
    tags=["statistics"],
)


@router.get(
    "/dashboard",
    response_model=DashboardStatisticsResponse,
    responses=error_responses(422, 500),
)
async def get_dashboard_statistics(
    period: Period | None = Query(default=None, description="Période d'analyse (défaut: configuration)"),
    settings: AppSettings = Depends(get_settings),
    service: StatisticsService = Depends(get_statistics_service),
) -> DashboardStatisticsResponse:
    resolved_period = period or Period(settings.default_statistics_period)
    stats = await service.dashboard(resolved_period)
    return DashboardStatisticsResponse.from_domain(stats)
