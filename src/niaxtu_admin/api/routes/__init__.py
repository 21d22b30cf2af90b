from fastapi import APIRouter

from niaxtu_admin.api.routes.admin_logs import router as admin_logs_router
from niaxtu_admin.api.routes.complaints import router as complaints_router
from niaxtu_admin.api.routes.healthz import router as healthz_router
from niaxtu_admin.api.routes.sectors import router as sectors_router
from niaxtu_admin.api.routes.statistics import router as statistics_router
from niaxtu_admin.api.routes.structures import router as structures_router
from niaxtu_admin.api.routes.sub_sectors import router as sub_sectors_router
from niaxtu_admin.api.routes.types import router as types_router

api_router = APIRouter()
api_router.include_router(healthz_router)
api_router.include_router(sectors_router)
api_router.include_router(sub_sectors_router)
api_router.include_router(structures_router)
api_router.include_router(types_router)
api_router.include_router(complaints_router)
api_router.include_router(statistics_router)
api_router.include_router(admin_logs_router)
