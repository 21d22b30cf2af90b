from __future__ import annotations

from typing import Any

from niaxtu_admin.api.errors import ErrorResponse

ERROR_RESPONSES: dict[int, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Requête invalide"},
    404: {"model": ErrorResponse, "description": "Ressource introuvable"},
    409: {"model": ErrorResponse, "description": "Conflit (doublon ou ressource utilisée)"},
    422: {"model": ErrorResponse, "description": "Données invalides"},
    500: {"model": ErrorResponse, "description": "Erreur interne"},
}


def error_responses(*codes: int) -> dict[int, dict[str, Any]]:
    responses: dict[int, dict[str, Any]] = {}
    for code in codes:
        if code in ERROR_RESPONSES:
            responses[code] = ERROR_RESPONSES[code]
    return responses
