from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from niaxtu_admin.catalog import (
    CatalogAlreadyExistsError,
    CatalogError,
    CatalogInUseError,
    CatalogNotFoundError,
)
from niaxtu_admin.complaints import ComplaintError
from niaxtu_admin.storage.memory_store import UnsupportedQueryError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Erreur interne du serveur."

HTTP_ERROR_CODES = {
    400: "bad_request",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    422: "validation_error",
    500: "internal_error",
}


class ErrorDetail(BaseModel):
    code: str = Field(description="Code d'erreur")
    message: str = Field(description="Message lisible par l'administrateur")
    details: list[dict[str, Any]] = Field(default_factory=list, description="Champs en erreur")


class ErrorResponse(BaseModel):
    error: ErrorDetail


@dataclass(frozen=True)
class APIError(Exception):
    status_code: int
    code: str
    message: str
    details: list[dict[str, Any]] | None = None


class BadRequestError(APIError):
    def __init__(self, message: str, *, details: list[dict[str, Any]] | None = None) -> None:
        super().__init__(400, "bad_request", message, details)


class NotFoundError(APIError):
    def __init__(self, message: str) -> None:
        super().__init__(404, "not_found", message)


class ConflictError(APIError):
    def __init__(self, message: str) -> None:
        super().__init__(409, "conflict", message)


class UnprocessableEntityError(APIError):
    def __init__(self, message: str, *, details: list[dict[str, Any]] | None = None) -> None:
        super().__init__(422, "validation_error", message, details)


class InternalServerError(APIError):
    def __init__(self, message: str = INTERNAL_ERROR_MESSAGE) -> None:
        super().__init__(500, "internal_error", message)


def to_api_error(exc: Exception) -> APIError:
    """Translate a domain exception raised by a service into its HTTP error.

    Missing items map to 404, duplicate names and deletes of referenced items
    to 409. Any other ``ValueError`` (bad id, empty name, unknown parent,
    invalid enum value) is an input problem and maps to 422.
    """
    if isinstance(exc, CatalogNotFoundError):
        return NotFoundError(str(exc))
    if isinstance(exc, (CatalogAlreadyExistsError, CatalogInUseError)):
        return ConflictError(str(exc))
    if isinstance(exc, UnsupportedQueryError):
        return InternalServerError()
    if isinstance(exc, ValueError):
        return UnprocessableEntityError(str(exc))
    return InternalServerError()


def _validation_details(exc: RequestValidationError) -> list[dict[str, Any]]:
    details = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ())]
        # ("body", "name") -> "name"; ("query", "period") -> "period"
        field = ".".join(location[1:]) if len(location) > 1 else ".".join(location)
        details.append({"field": field, "msg": error.get("msg", ""), "type": error.get("type", "")})
    return details


def build_error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    details: list[dict[str, Any]] | None = None,
) -> JSONResponse:
    payload = ErrorResponse(error=ErrorDetail(code=code, message=message, details=details or []))
    return JSONResponse(status_code=status_code, content=payload.model_dump(mode="json"))


def _render(exc: APIError) -> JSONResponse:
    return build_error_response(
        status_code=exc.status_code,
        code=exc.code,
        message=exc.message,
        details=exc.details,
    )


def install_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(APIError)
    async def _handle_api_error(_: Request, exc: APIError) -> JSONResponse:
        return _render(exc)

    @app.exception_handler(CatalogError)
    @app.exception_handler(ComplaintError)
    async def _handle_domain_error(request: Request, exc: ValueError) -> JSONResponse:
        logger.warning("domain error not translated by route %s: %s", request.url.path, exc)
        return _render(to_api_error(exc))

    @app.exception_handler(UnsupportedQueryError)
    async def _handle_unsupported_query(request: Request, exc: UnsupportedQueryError) -> JSONResponse:
        logger.error("unsupported store query on %s: %s", request.url.path, exc)
        return _render(InternalServerError())

    @app.exception_handler(RequestValidationError)
    async def _handle_validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
        return _render(UnprocessableEntityError("Données invalides.", details=_validation_details(exc)))

    @app.exception_handler(StarletteHTTPException)
    async def _handle_http_exception(_: Request, exc: StarletteHTTPException) -> JSONResponse:
        return build_error_response(
            status_code=exc.status_code,
            code=HTTP_ERROR_CODES.get(exc.status_code, "http_error"),
            message=str(exc.detail) if exc.detail else "Erreur HTTP.",
        )

    @app.exception_handler(Exception)
    async def _handle_unexpected_error(_: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception", exc_info=exc)
        return _render(InternalServerError())
