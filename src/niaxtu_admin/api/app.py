from __future__ import annotations

from fastapi import FastAPI

from niaxtu_admin.api.errors import install_exception_handlers
from niaxtu_admin.api.middleware import install_request_logging_middleware
from niaxtu_admin.api.routes import api_router
from niaxtu_admin.settings import AppSettings, load_settings
from niaxtu_admin.storage.memory_store import DocumentStore


def create_app(
    *,
    store: DocumentStore | None = None,
    settings: AppSettings | None = None,
) -> FastAPI:
    app = FastAPI(
        title="Niaxtu Admin API",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    install_exception_handlers(app)

    app.state.store = store if store is not None else DocumentStore()
    app.state.settings = settings if settings is not None else load_settings()

    install_request_logging_middleware(app)
    app.include_router(api_router, prefix="/api/v1")
    return app
