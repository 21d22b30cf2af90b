from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Iterable

from niaxtu_admin.catalog import ComplaintType, ComplaintTypeService, Sector, SectorService
from niaxtu_admin.complaints import Complaint, ComplaintService, ComplaintStatus, average_resolution_days

UNSPECIFIED_LABEL = "Non spécifié"


class Period(str, Enum):
    DAYS_7 = "7d"
    DAYS_30 = "30d"
    DAYS_90 = "90d"
    MONTHS_6 = "6m"
    YEAR_1 = "1y"

    @property
    def days(self) -> int:
        return _PERIOD_DAYS[self]


_PERIOD_DAYS = {
    Period.DAYS_7: 7,
    Period.DAYS_30: 30,
    Period.DAYS_90: 90,
    Period.MONTHS_6: 180,
    Period.YEAR_1: 365,
}


@dataclass(frozen=True)
class LabelCount:
    label: str
    count: int


@dataclass(frozen=True)
class DailyCount:
    day: str
    count: int


@dataclass(frozen=True)
class DashboardStatistics:
    period: Period
    generated_at: str
    total: int
    by_status: dict[str, int]
    resolution_rate: float
    average_resolution_days: float
    by_sector: list[LabelCount]
    by_complaint_type: list[LabelCount]
    timeline: list[DailyCount]


def period_start(now: datetime, period: Period) -> datetime:
    """First instant included in the period: midnight UTC ``days - 1`` days before ``now``."""
    today = now.astimezone(timezone.utc).date()
    first_day = today - timedelta(days=period.days - 1)
    return datetime(first_day.year, first_day.month, first_day.day, tzinfo=timezone.utc)


def _distribution(values: Iterable[str | None], labels: dict[str, str]) -> list[LabelCount]:
    counter = Counter(labels.get(value, UNSPECIFIED_LABEL) if value else UNSPECIFIED_LABEL for value in values)
    rows = [LabelCount(label=label, count=count) for label, count in counter.items()]
    return sorted(rows, key=lambda row: (-row.count, row.label))


def _timeline(complaints: list[Complaint], *, first_day: date, days: int) -> list[DailyCount]:
    counter = Counter(
        datetime.fromisoformat(complaint.created_at).astimezone(timezone.utc).date() for complaint in complaints
    )
    return [
        DailyCount(day=(first_day + timedelta(days=offset)).isoformat(), count=counter.get(first_day + timedelta(days=offset), 0))
        for offset in range(days)
    ]


def compute_dashboard_statistics(
    complaints: Iterable[Complaint],
    *,
    sectors: Iterable[Sector],
    complaint_types: Iterable[ComplaintType],
    now: datetime,
    period: Period,
) -> DashboardStatistics:
    start = period_start(now, period)
    rows = [
        complaint
        for complaint in complaints
        if datetime.fromisoformat(complaint.created_at).astimezone(timezone.utc) >= start
    ]
    by_status = {status.value: 0 for status in ComplaintStatus}
    for complaint in rows:
        by_status[complaint.status.value] += 1
    total = len(rows)
    resolved = by_status[ComplaintStatus.RESOLVED.value]

    return DashboardStatistics(
        period=period,
        generated_at=now.astimezone(timezone.utc).isoformat(),
        total=total,
        by_status=by_status,
        resolution_rate=round(resolved / total * 100, 1) if total else 0.0,
        average_resolution_days=average_resolution_days(rows),
        by_sector=_distribution(
            (complaint.sector_id for complaint in rows),
            {sector.item_id: sector.name for sector in sectors},
        ),
        by_complaint_type=_distribution(
            (complaint.complaint_type_id for complaint in rows),
            {complaint_type.item_id: complaint_type.name for complaint_type in complaint_types},
        ),
        timeline=_timeline(rows, first_day=start.date(), days=period.days),
    )


class StatisticsService:
    def __init__(
        self,
        complaint_service: ComplaintService,
        sector_service: SectorService,
        complaint_type_service: ComplaintTypeService,
    ) -> None:
        self._complaint_service = complaint_service
        self._sector_service = sector_service
        self._complaint_type_service = complaint_type_service

    async def dashboard(self, period: Period | str, *, now: datetime | None = None) -> DashboardStatistics:
        resolved_period = Period(period)
        current_time = now or datetime.now(timezone.utc)
        complaints = await self._complaint_service.list_since(period_start(current_time, resolved_period).isoformat())
        return compute_dashboard_statistics(
            complaints,
            sectors=await self._sector_service.list_items(),
            complaint_types=await self._complaint_type_service.list_items(),
            now=current_time,
            period=resolved_period,
        )
