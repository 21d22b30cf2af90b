from __future__ import annotations

from datetime import datetime, timezone
import re


COLLECTION_SECTORS = "sectors"
COLLECTION_SUB_SECTORS = "subSectors"
COLLECTION_STRUCTURES = "structures"
COLLECTION_COMPLAINT_TYPES = "complaintTypes"
COLLECTION_TARGET_TYPES = "targetTypes"
COLLECTION_COMPLAINTS = "complaints"
COLLECTION_REQUEST_LOGS = "logs"
COLLECTION_AUDIT_LOGS = "audit_logs"

ALL_COLLECTIONS = (
    COLLECTION_SECTORS,
    COLLECTION_SUB_SECTORS,
    COLLECTION_STRUCTURES,
    COLLECTION_COMPLAINT_TYPES,
    COLLECTION_TARGET_TYPES,
    COLLECTION_COMPLAINTS,
    COLLECTION_REQUEST_LOGS,
    COLLECTION_AUDIT_LOGS,
)

DOCUMENT_ID_PATTERN = re.compile(r"^[A-Za-z0-9_\-:.]{1,128}$")
HEX_COLOR_PATTERN = re.compile(r"^#[0-9a-fA-F]{6}$")


def normalize_document_id(document_id: str) -> str:
    normalized = str(document_id).strip()
    if not DOCUMENT_ID_PATTERN.match(normalized):
        raise ValueError(f"Identifiant invalide: {document_id}")
    return normalized


def normalize_name(name: str) -> str:
    value = str(name).strip()
    if not value:
        raise ValueError("Le nom est requis.")
    return value


def normalize_color(color: str) -> str:
    value = str(color).strip()
    if not HEX_COLOR_PATTERN.match(value):
        raise ValueError(f"Couleur hexadécimale invalide: {color}")
    return value.lower()


def normalize_iso_datetime(value: str) -> str:
    try:
        parsed = datetime.fromisoformat(str(value).strip())
    except ValueError as exc:
        raise ValueError(f"Invalid datetime format: {value}") from exc
    if parsed.tzinfo is None:
        raise ValueError(f"Datetime must include timezone offset: {value}")
    # Stored as UTC so string range queries order chronologically.
    return parsed.astimezone(timezone.utc).isoformat()
