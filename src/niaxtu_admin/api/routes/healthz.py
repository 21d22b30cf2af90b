from fastapi import APIRouter, Depends

from niaxtu_admin.api.dependencies import get_settings
from niaxtu_admin.api.openapi import error_responses
from niaxtu_admin.api.schemas import HealthzResponse
from niaxtu_admin.settings import AppSettings

router = APIRouter(tags=["health"])


@router.get("/healthz", response_model=HealthzResponse, responses=error_responses(500))
def healthz(settings: AppSettings = Depends(get_settings)) -> HealthzResponse:
    return HealthzResponse(status="ok", environment=settings.app_env)
