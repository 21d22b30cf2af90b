from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
import logging
import time

from fastapi import FastAPI, Request
from starlette.responses import Response

from niaxtu_admin.api.dependencies import get_request_log_repository, get_settings
from niaxtu_admin.request_log import RequestLogEntry, should_persist

LOGGER = logging.getLogger(__name__)


async def _finish_request(request: Request, *, status_code: int, started_at: str, started: float) -> None:
    settings = get_settings(request)
    entry = RequestLogEntry(
        timestamp=started_at,
        method=request.method,
        path=request.url.path,
        status_code=status_code,
        duration_ms=int((time.perf_counter() - started) * 1000),
        client_ip=request.client.host if request.client else None,
        user_agent=request.headers.get("User-Agent"),
        environment=settings.app_env,
    )
    LOGGER.info(
        "request finished: %s %s status=%s duration_ms=%s",
        entry.method,
        entry.path,
        entry.status_code,
        entry.duration_ms,
    )
    if should_persist(
        entry,
        slow_request_ms=settings.slow_request_ms,
        admin_path_prefix=settings.admin_path_prefix,
    ):
        try:
            await get_request_log_repository(request).append(entry)
        except Exception:
            LOGGER.exception("failed to persist request log: %s %s", entry.method, entry.path)


def install_request_logging_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def _request_logging_middleware(
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        started_at = datetime.now(timezone.utc).isoformat()
        started = time.perf_counter()
        LOGGER.info("request started: %s %s", request.method, request.url.path)

        try:
            response = await call_next(request)
        except Exception:
            # The app-level handler renders the 500 after this middleware re-raises.
            await _finish_request(request, status_code=500, started_at=started_at, started=started)
            raise

        await _finish_request(request, status_code=response.status_code, started_at=started_at, started=started)
        return response
