from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
import logging
from typing import Any, Iterable, Protocol

from niaxtu_admin.storage.firestore_schema import normalize_document_id, normalize_iso_datetime

LOGGER = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60

REFERENCE_FIELDS = {
    "sector_id": "sectorId",
    "sub_sector_id": "subSectorId",
    "structure_id": "structureId",
    "complaint_type_id": "complaintTypeId",
    "target_type_id": "targetTypeId",
}


class ComplaintError(ValueError):
    """Base complaint error."""


class ComplaintStatus(str, Enum):
    PENDING = "en-attente"
    IN_PROGRESS = "en-traitement"
    RESOLVED = "resolue"
    REJECTED = "rejetee"


class ComplaintPriority(str, Enum):
    LOW = "faible"
    MEDIUM = "moyenne"
    HIGH = "elevee"
    URGENT = "urgente"
    CRITICAL = "critique"


@dataclass(frozen=True)
class Complaint:
    complaint_id: str
    title: str
    status: ComplaintStatus
    created_at: str
    priority: ComplaintPriority = ComplaintPriority.MEDIUM
    sector_id: str | None = None
    sub_sector_id: str | None = None
    structure_id: str | None = None
    complaint_type_id: str | None = None
    target_type_id: str | None = None
    resolved_at: str | None = None

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> Complaint:
        return cls(
            complaint_id=str(data["id"]),
            title=str(data.get("title") or "").strip(),
            status=ComplaintStatus(str(data.get("status") or ComplaintStatus.PENDING.value).strip().lower()),
            created_at=str(data["createdAt"]),
            priority=ComplaintPriority(str(data.get("priority") or ComplaintPriority.MEDIUM.value).strip().lower()),
            sector_id=_optional_id(data.get("sectorId")),
            sub_sector_id=_optional_id(data.get("subSectorId")),
            structure_id=_optional_id(data.get("structureId")),
            complaint_type_id=_optional_id(data.get("complaintTypeId")),
            target_type_id=_optional_id(data.get("targetTypeId")),
            resolved_at=_optional_id(data.get("resolvedAt")),
        )

    def to_document(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "status": self.status.value,
            "priority": self.priority.value,
            "sectorId": self.sector_id,
            "subSectorId": self.sub_sector_id,
            "structureId": self.structure_id,
            "complaintTypeId": self.complaint_type_id,
            "targetTypeId": self.target_type_id,
            "createdAt": self.created_at,
            "resolvedAt": self.resolved_at,
        }

    def resolution_seconds(self) -> float | None:
        if self.status is not ComplaintStatus.RESOLVED or not self.resolved_at:
            return None
        created = datetime.fromisoformat(self.created_at)
        resolved = datetime.fromisoformat(self.resolved_at)
        return max((resolved - created).total_seconds(), 0.0)


@dataclass(frozen=True)
class ComplaintStatistics:
    total: int
    pending: int
    in_progress: int
    resolved: int
    rejected: int
    average_resolution_days: float

    @classmethod
    def from_complaints(cls, complaints: Iterable[Complaint]) -> ComplaintStatistics:
        rows = list(complaints)
        counts = {status: 0 for status in ComplaintStatus}
        for complaint in rows:
            counts[complaint.status] += 1
        return cls(
            total=len(rows),
            pending=counts[ComplaintStatus.PENDING],
            in_progress=counts[ComplaintStatus.IN_PROGRESS],
            resolved=counts[ComplaintStatus.RESOLVED],
            rejected=counts[ComplaintStatus.REJECTED],
            average_resolution_days=average_resolution_days(rows),
        )


def average_resolution_days(complaints: Iterable[Complaint]) -> float:
    durations = [seconds for seconds in (c.resolution_seconds() for c in complaints) if seconds is not None]
    if not durations:
        return 0.0
    return round(sum(durations) / len(durations) / SECONDS_PER_DAY, 1)


class ComplaintRepository(Protocol):
    async def add(self, complaint: Complaint) -> str:
        """Store a complaint and return its generated id."""

    async def list_all(self) -> list[Complaint]:
        """List every complaint."""

    async def find_by(self, field_path: str, value: Any, *, limit: int | None = None) -> list[Complaint]:
        """List complaints whose field equals value."""

    async def list_since(self, created_from: str) -> list[Complaint]:
        """List complaints created at or after created_from."""


class ComplaintService:
    """Read model over complaints used by the dashboard and list screens."""

    def __init__(self, repository: ComplaintRepository) -> None:
        self._repository = repository

    @staticmethod
    def _now_iso() -> str:
        return datetime.now(timezone.utc).isoformat()

    async def record(
        self,
        *,
        title: str,
        status: ComplaintStatus | str = ComplaintStatus.PENDING,
        priority: ComplaintPriority | str = ComplaintPriority.MEDIUM,
        created_at: str | None = None,
        resolved_at: str | None = None,
        **references: str | None,
    ) -> Complaint:
        unknown = set(references) - set(REFERENCE_FIELDS)
        if unknown:
            raise ComplaintError(f"unknown complaint references: {', '.join(sorted(unknown))}")
        normalized_title = title.strip()
        if not normalized_title:
            raise ComplaintError("title must not be empty.")
        complaint = Complaint(
            complaint_id="",
            title=normalized_title,
            status=_parse_enum(ComplaintStatus, status),
            priority=_parse_enum(ComplaintPriority, priority),
            created_at=normalize_iso_datetime(created_at or self._now_iso()),
            resolved_at=normalize_iso_datetime(resolved_at) if resolved_at else None,
            **{key: normalize_document_id(value) for key, value in references.items() if value},
        )
        complaint_id = await self._repository.add(complaint)
        LOGGER.info("complaint recorded: id=%s status=%s", complaint_id, complaint.status.value)
        return Complaint.from_document({**complaint.to_document(), "id": complaint_id})

    async def list_by_status(self, status: ComplaintStatus | str, *, limit: int = 100) -> list[Complaint]:
        if limit <= 0:
            raise ComplaintError("limit must be > 0.")
        parsed = _parse_enum(ComplaintStatus, status)
        return await self._repository.find_by("status", parsed.value, limit=limit)

    async def list_since(self, created_from: str) -> list[Complaint]:
        return await self._repository.list_since(normalize_iso_datetime(created_from))

    async def list_all(self) -> list[Complaint]:
        return await self._repository.list_all()

    async def list_recent(self, *, limit: int = 100) -> list[Complaint]:
        if limit <= 0:
            raise ComplaintError("limit must be > 0.")
        complaints = await self._repository.list_all()
        complaints.sort(key=lambda complaint: complaint.created_at, reverse=True)
        return complaints[:limit]

    async def list_for(self, reference: str, item_id: str) -> list[Complaint]:
        if reference not in REFERENCE_FIELDS:
            raise ComplaintError(f"unknown complaint reference: {reference}")
        return await self._repository.find_by(REFERENCE_FIELDS[reference], normalize_document_id(item_id))

    async def statistics_for(self, reference: str, item_id: str) -> ComplaintStatistics:
        return ComplaintStatistics.from_complaints(await self.list_for(reference, item_id))


def _parse_enum(enum_type: type[Any], value: Any) -> Any:
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(str(value).strip().lower())
    except ValueError as exc:
        raise ComplaintError(f"invalid {enum_type.__name__}: {value}") from exc


def _optional_id(value: Any) -> str | None:
    if value is None:
        return None
    normalized = str(value).strip()
    return normalized or None
