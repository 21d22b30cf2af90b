from __future__ import annotations

from pydantic import BaseModel, Field

from niaxtu_admin.catalog import AuditLogRecord, ComplaintType, Sector, Severity, Structure, SubSector, TargetType
from niaxtu_admin.complaints import Complaint, ComplaintStatistics
from niaxtu_admin.request_log import RequestLogEntry
from niaxtu_admin.statistics import DashboardStatistics

HEX_COLOR = r"^#[0-9a-fA-F]{6}$"


class HealthzResponse(BaseModel):
    status: str = Field(default="ok")
    environment: str = Field(description="APP_ENV du processus")


class _UpdateRequest(BaseModel):
    def has_updates(self) -> bool:
        return any(value is not None for value in self.model_dump().values())


class SectorResponse(BaseModel):
    id: str
    name: str
    description: str
    icon: str
    color: str
    is_active: bool
    order: int
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_domain(cls, item: Sector) -> "SectorResponse":
        return cls(
            id=item.item_id,
            name=item.name,
            description=item.description,
            icon=item.icon,
            color=item.color,
            is_active=item.is_active,
            order=item.order,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )


class SectorListResponse(BaseModel):
    items: list[SectorResponse]
    total: int = Field(ge=0)


class SectorCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    description: str = Field(default="", max_length=1000)
    icon: str | None = Field(default=None, max_length=60)
    color: str | None = Field(default=None, pattern=HEX_COLOR)
    order: int | None = Field(default=None, ge=0)


class SectorUpdateRequest(_UpdateRequest):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    description: str | None = Field(default=None, max_length=1000)
    icon: str | None = Field(default=None, max_length=60)
    color: str | None = Field(default=None, pattern=HEX_COLOR)
    order: int | None = Field(default=None, ge=0)
    is_active: bool | None = None


class SubSectorResponse(BaseModel):
    id: str
    sector_id: str
    name: str
    description: str
    icon: str
    is_active: bool
    order: int
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_domain(cls, item: SubSector) -> "SubSectorResponse":
        return cls(
            id=item.item_id,
            sector_id=item.sector_id,
            name=item.name,
            description=item.description,
            icon=item.icon,
            is_active=item.is_active,
            order=item.order,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )


class SubSectorListResponse(BaseModel):
    items: list[SubSectorResponse]
    total: int = Field(ge=0)


class SubSectorCreateRequest(BaseModel):
    sector_id: str = Field(min_length=1, max_length=128)
    name: str = Field(min_length=1, max_length=120)
    description: str = Field(default="", max_length=1000)
    icon: str | None = Field(default=None, max_length=60)
    order: int | None = Field(default=None, ge=0)


class SubSectorUpdateRequest(_UpdateRequest):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    description: str | None = Field(default=None, max_length=1000)
    icon: str | None = Field(default=None, max_length=60)
    order: int | None = Field(default=None, ge=0)
    is_active: bool | None = None


class StructureResponse(BaseModel):
    id: str
    sector_id: str
    sub_sector_id: str | None
    name: str
    description: str
    structure_type: str
    address: str
    city: str
    phone: str
    email: str
    is_active: bool
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_domain(cls, item: Structure) -> "StructureResponse":
        return cls(
            id=item.item_id,
            sector_id=item.sector_id,
            sub_sector_id=item.sub_sector_id,
            name=item.name,
            description=item.description,
            structure_type=item.structure_type,
            address=item.address,
            city=item.city,
            phone=item.phone,
            email=item.email,
            is_active=item.is_active,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )


class StructureListResponse(BaseModel):
    items: list[StructureResponse]
    total: int = Field(ge=0)


class StructureCreateRequest(BaseModel):
    sector_id: str = Field(min_length=1, max_length=128)
    name: str = Field(min_length=1, max_length=160)
    sub_sector_id: str | None = Field(default=None, min_length=1, max_length=128)
    description: str = Field(default="", max_length=1000)
    structure_type: str = Field(default="", max_length=80)
    address: str = Field(default="", max_length=240)
    city: str = Field(default="", max_length=120)
    phone: str = Field(default="", max_length=40)
    email: str = Field(default="", max_length=160)


class StructureUpdateRequest(_UpdateRequest):
    name: str | None = Field(default=None, min_length=1, max_length=160)
    sub_sector_id: str | None = Field(default=None, max_length=128)
    description: str | None = Field(default=None, max_length=1000)
    structure_type: str | None = Field(default=None, max_length=80)
    address: str | None = Field(default=None, max_length=240)
    city: str | None = Field(default=None, max_length=120)
    phone: str | None = Field(default=None, max_length=40)
    email: str | None = Field(default=None, max_length=160)
    is_active: bool | None = None


class ComplaintTypeResponse(BaseModel):
    id: str
    name: str
    description: str
    sector_id: str | None
    severity: Severity
    auto_assignment: bool
    is_active: bool
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_domain(cls, item: ComplaintType) -> "ComplaintTypeResponse":
        return cls(
            id=item.item_id,
            name=item.name,
            description=item.description,
            sector_id=item.sector_id,
            severity=item.severity,
            auto_assignment=item.auto_assignment,
            is_active=item.is_active,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )


class ComplaintTypeListResponse(BaseModel):
    items: list[ComplaintTypeResponse]
    total: int = Field(ge=0)


class ComplaintTypeCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    description: str = Field(default="", max_length=1000)
    sector_id: str | None = Field(default=None, min_length=1, max_length=128)
    severity: Severity = Severity.MOYENNE
    auto_assignment: bool = False


class ComplaintTypeUpdateRequest(_UpdateRequest):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    description: str | None = Field(default=None, max_length=1000)
    severity: Severity | None = None
    auto_assignment: bool | None = None
    is_active: bool | None = None


class TargetTypeResponse(BaseModel):
    id: str
    name: str
    description: str
    category: str
    examples: list[str]
    is_active: bool
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_domain(cls, item: TargetType) -> "TargetTypeResponse":
        return cls(
            id=item.item_id,
            name=item.name,
            description=item.description,
            category=item.category,
            examples=list(item.examples),
            is_active=item.is_active,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )


class TargetTypeListResponse(BaseModel):
    items: list[TargetTypeResponse]
    total: int = Field(ge=0)


class TargetTypeCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    description: str = Field(default="", max_length=1000)
    category: str = Field(default="", max_length=80)
    examples: list[str] = Field(default_factory=list, max_length=20)


class TargetTypeUpdateRequest(_UpdateRequest):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    description: str | None = Field(default=None, max_length=1000)
    category: str | None = Field(default=None, max_length=80)
    examples: list[str] | None = Field(default=None, max_length=20)
    is_active: bool | None = None


class ToggleResponse(BaseModel):
    id: str
    is_active: bool


class ComplaintStatisticsResponse(BaseModel):
    total: int = Field(ge=0)
    pending: int = Field(ge=0)
    in_progress: int = Field(ge=0)
    resolved: int = Field(ge=0)
    rejected: int = Field(ge=0)
    average_resolution_days: float = Field(ge=0, description="Temps moyen de résolution (jours)")

    @classmethod
    def from_domain(cls, stats: ComplaintStatistics) -> "ComplaintStatisticsResponse":
        return cls(
            total=stats.total,
            pending=stats.pending,
            in_progress=stats.in_progress,
            resolved=stats.resolved,
            rejected=stats.rejected,
            average_resolution_days=stats.average_resolution_days,
        )


class ComplaintResponse(BaseModel):
    id: str
    title: str
    status: str
    priority: str
    sector_id: str | None
    sub_sector_id: str | None
    structure_id: str | None
    complaint_type_id: str | None
    target_type_id: str | None
    created_at: str
    resolved_at: str | None

    @classmethod
    def from_domain(cls, complaint: Complaint) -> "ComplaintResponse":
        return cls(
            id=complaint.complaint_id,
            title=complaint.title,
            status=complaint.status.value,
            priority=complaint.priority.value,
            sector_id=complaint.sector_id,
            sub_sector_id=complaint.sub_sector_id,
            structure_id=complaint.structure_id,
            complaint_type_id=complaint.complaint_type_id,
            target_type_id=complaint.target_type_id,
            created_at=complaint.created_at,
            resolved_at=complaint.resolved_at,
        )


class ComplaintListResponse(BaseModel):
    items: list[ComplaintResponse]
    total: int = Field(ge=0)


class LabelCountResponse(BaseModel):
    label: str
    count: int = Field(ge=0)


class DailyCountResponse(BaseModel):
    day: str
    count: int = Field(ge=0)


class DashboardStatisticsResponse(BaseModel):
    period: str
    generated_at: str
    total: int = Field(ge=0, description="Nombre de plaintes sur la période")
    by_status: dict[str, int]
    resolution_rate: float = Field(ge=0, le=100, description="Taux de résolution (%)")
    average_resolution_days: float = Field(ge=0)
    by_sector: list[LabelCountResponse]
    by_complaint_type: list[LabelCountResponse]
    timeline: list[DailyCountResponse]

    @classmethod
    def from_domain(cls, stats: DashboardStatistics) -> "DashboardStatisticsResponse":
        return cls(
            period=stats.period.value,
            generated_at=stats.generated_at,
            total=stats.total,
            by_status=dict(stats.by_status),
            resolution_rate=stats.resolution_rate,
            average_resolution_days=stats.average_resolution_days,
            by_sector=[LabelCountResponse(label=row.label, count=row.count) for row in stats.by_sector],
            by_complaint_type=[
                LabelCountResponse(label=row.label, count=row.count) for row in stats.by_complaint_type
            ],
            timeline=[DailyCountResponse(day=row.day, count=row.count) for row in stats.timeline],
        )


class RequestLogItemResponse(BaseModel):
    id: str | None
    timestamp: str
    method: str
    path: str
    status_code: int
    duration_ms: int
    success: bool

    @classmethod
    def from_domain(cls, entry: RequestLogEntry) -> "RequestLogItemResponse":
        return cls(
            id=entry.entry_id,
            timestamp=entry.timestamp,
            method=entry.method,
            path=entry.path,
            status_code=entry.status_code,
            duration_ms=entry.duration_ms,
            success=entry.success,
        )


class RequestLogListResponse(BaseModel):
    items: list[RequestLogItemResponse]
    total: int = Field(ge=0)


class AuditLogItemResponse(BaseModel):
    id: str | None
    action: str
    entity: str
    entity_id: str
    name: str
    acted_at: str

    @classmethod
    def from_domain(cls, record: AuditLogRecord) -> "AuditLogItemResponse":
        return cls(
            id=record.record_id,
            action=record.action.value,
            entity=record.entity.value,
            entity_id=record.entity_id,
            name=record.name,
            acted_at=record.acted_at,
        )


class AuditLogListResponse(BaseModel):
    items: list[AuditLogItemResponse]
    total: int = Field(ge=0)
