from __future__ import annotations

from datetime import datetime, timezone
import unittest

from niaxtu_admin.api.dependencies import create_statistics_service
from niaxtu_admin.catalog import ComplaintType, Sector
from niaxtu_admin.complaints import (
    Complaint,
    ComplaintError,
    ComplaintPriority,
    ComplaintService,
    ComplaintStatistics,
    ComplaintStatus,
)
from niaxtu_admin.statistics import (
    UNSPECIFIED_LABEL,
    Period,
    StatisticsService,
    compute_dashboard_statistics,
    period_start,
)
from niaxtu_admin.storage.firestore_complaint_repository import FirestoreComplaintRepository
from niaxtu_admin.storage.memory_store import DocumentStore

NOW = datetime(2026, 3, 10, 15, 30, tzinfo=timezone.utc)


def _complaint(
    complaint_id: str,
    *,
    status: ComplaintStatus,
    created_at: str,
    resolved_at: str | None = None,
    sector_id: str | None = None,
    complaint_type_id: str | None = None,
) -> Complaint:
    return Complaint(
        complaint_id=complaint_id,
        title=f"Plainte {complaint_id}",
        status=status,
        created_at=created_at,
        resolved_at=resolved_at,
        sector_id=sector_id,
        complaint_type_id=complaint_type_id,
    )


class ComplaintServiceTest(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.store = DocumentStore()
        self.service = ComplaintService(FirestoreComplaintRepository(self.store))

    async def test_record_normalizes_fields(self) -> None:
        complaint = await self.service.record(
            title="  Attente aux urgences ",
            status="RESOLUE",
            priority=ComplaintPriority.HIGH,
            created_at="2026-03-01T10:00:00+02:00",
            resolved_at="2026-03-02T10:00:00+02:00",
            sector_id="health",
        )

        self.assertTrue(complaint.complaint_id)
        self.assertEqual(complaint.title, "Attente aux urgences")
        self.assertIs(complaint.status, ComplaintStatus.RESOLVED)
        self.assertEqual(complaint.created_at, "2026-03-01T08:00:00+00:00")
        self.assertEqual(complaint.sector_id, "health")

        stored = (await self.store.collection("complaints").document(complaint.complaint_id).get()).to_dict()
        self.assertEqual(stored["status"], "resolue")
        self.assertEqual(stored["priority"], "elevee")
        self.assertEqual(stored["sectorId"], "health")

    async def test_record_rejects_invalid_input(self) -> None:
        with self.assertRaises(ComplaintError):
            await self.service.record(title=" ")
        with self.assertRaises(ComplaintError):
            await self.service.record(title="x", status="ouverte")
        with self.assertRaises(ComplaintError):
            await self.service.record(title="x", region_id="dakar")
        with self.assertRaises(ValueError):
            await self.service.record(title="x", created_at="2026-03-01T10:00:00")

    async def test_list_by_status_honours_limit(self) -> None:
        for index in range(3):
            await self.service.record(title=f"Rejet {index}", status=ComplaintStatus.REJECTED)
        await self.service.record(title="En attente", status=ComplaintStatus.PENDING)

        rejected = await self.service.list_by_status("rejetee", limit=2)
        pending = await self.service.list_by_status(ComplaintStatus.PENDING)

        self.assertEqual([item.title for item in rejected], ["Rejet 0", "Rejet 1"])
        self.assertEqual([item.title for item in pending], ["En attente"])
        with self.assertRaises(ComplaintError):
            await self.service.list_by_status(ComplaintStatus.PENDING, limit=0)

    async def test_list_recent_newest_first(self) -> None:
        await self.service.record(title="Milieu", created_at="2026-03-03T00:00:00+00:00")
        await self.service.record(title="Ancienne", created_at="2026-03-01T00:00:00+00:00")
        await self.service.record(title="Récente", created_at="2026-03-06T00:00:00+00:00")

        recent = await self.service.list_recent(limit=2)

        self.assertEqual([item.title for item in recent], ["Récente", "Milieu"])
        with self.assertRaises(ComplaintError):
            await self.service.list_recent(limit=0)

    async def test_list_since_is_inclusive(self) -> None:
        await self.service.record(title="Ancienne", created_at="2026-03-01T00:00:00+00:00")
        await self.service.record(title="Limite", created_at="2026-03-05T00:00:00+00:00")
        await self.service.record(title="Récente", created_at="2026-03-06T12:00:00+00:00")

        since = await self.service.list_since("2026-03-05T01:00:00+01:00")

        self.assertEqual([item.title for item in since], ["Limite", "Récente"])

    async def test_statistics_for_reference(self) -> None:
        await self.service.record(
            title="A",
            status=ComplaintStatus.RESOLVED,
            created_at="2026-01-01T00:00:00+00:00",
            resolved_at="2026-01-03T12:00:00+00:00",
            sector_id="health",
        )
        await self.service.record(
            title="B",
            status=ComplaintStatus.RESOLVED,
            created_at="2026-01-01T00:00:00+00:00",
            resolved_at="2026-01-02T12:00:00+00:00",
            sector_id="health",
        )
        await self.service.record(title="C", status=ComplaintStatus.IN_PROGRESS, sector_id="health")
        await self.service.record(title="D", status=ComplaintStatus.PENDING, sector_id="education")

        stats = await self.service.statistics_for("sector_id", "health")

        self.assertEqual(
            stats,
            ComplaintStatistics(
                total=3,
                pending=0,
                in_progress=1,
                resolved=2,
                rejected=0,
                average_resolution_days=2.0,
            ),
        )
        with self.assertRaises(ComplaintError):
            await self.service.statistics_for("region_id", "dakar")


class ComplaintModelTest(unittest.TestCase):
    def test_resolution_only_counts_resolved(self) -> None:
        rejected = _complaint(
            "r",
            status=ComplaintStatus.REJECTED,
            created_at="2026-01-01T00:00:00+00:00",
            resolved_at="2026-01-02T00:00:00+00:00",
        )
        resolved = _complaint(
            "s",
            status=ComplaintStatus.RESOLVED,
            created_at="2026-01-01T00:00:00+00:00",
            resolved_at="2026-01-02T00:00:00+00:00",
        )

        self.assertIsNone(rejected.resolution_seconds())
        self.assertEqual(resolved.resolution_seconds(), 86400.0)

    def test_document_round_trip_keeps_camel_case(self) -> None:
        complaint = _complaint(
            "c1",
            status=ComplaintStatus.PENDING,
            created_at="2026-01-01T00:00:00+00:00",
            complaint_type_id="corruption",
        )

        document = complaint.to_document()

        self.assertEqual(document["complaintTypeId"], "corruption")
        self.assertEqual(Complaint.from_document({**document, "id": "c1"}), complaint)


class DashboardStatisticsTest(unittest.TestCase):
    def test_period_start(self) -> None:
        self.assertEqual(period_start(NOW, Period.DAYS_7), datetime(2026, 3, 4, tzinfo=timezone.utc))
        self.assertEqual(Period.MONTHS_6.days, 180)
        self.assertEqual(Period.YEAR_1.days, 365)

    def test_compute_dashboard_statistics(self) -> None:
        complaints = [
            _complaint(
                "a",
                status=ComplaintStatus.RESOLVED,
                created_at="2026-03-04T00:00:00+00:00",
                resolved_at="2026-03-05T12:00:00+00:00",
                sector_id="health",
                complaint_type_id="delay",
            ),
            _complaint(
                "b",
                status=ComplaintStatus.PENDING,
                created_at="2026-03-10T08:00:00+00:00",
                sector_id="health",
                complaint_type_id="delay",
            ),
            _complaint(
                "c",
                status=ComplaintStatus.REJECTED,
                created_at="2026-03-10T09:00:00+00:00",
                sector_id="deleted-sector",
            ),
            _complaint(
                "old",
                status=ComplaintStatus.RESOLVED,
                created_at="2026-03-03T23:59:59+00:00",
                sector_id="health",
            ),
        ]

        stats = compute_dashboard_statistics(
            complaints,
            sectors=[Sector(item_id="health", name="Santé")],
            complaint_types=[ComplaintType(item_id="delay", name="Retard")],
            now=NOW,
            period=Period.DAYS_7,
        )

        self.assertEqual(stats.total, 3)
        self.assertEqual(
            stats.by_status,
            {"en-attente": 1, "en-traitement": 0, "resolue": 1, "rejetee": 1},
        )
        self.assertEqual(stats.resolution_rate, 33.3)
        self.assertEqual(stats.average_resolution_days, 1.5)
        self.assertEqual(
            [(row.label, row.count) for row in stats.by_sector],
            [("Santé", 2), (UNSPECIFIED_LABEL, 1)],
        )
        self.assertEqual(
            [(row.label, row.count) for row in stats.by_complaint_type],
            [("Retard", 2), (UNSPECIFIED_LABEL, 1)],
        )
        self.assertEqual(len(stats.timeline), 7)
        self.assertEqual((stats.timeline[0].day, stats.timeline[0].count), ("2026-03-04", 1))
        self.assertEqual((stats.timeline[-1].day, stats.timeline[-1].count), ("2026-03-10", 2))
        self.assertEqual(sum(row.count for row in stats.timeline), 3)

    def test_empty_period(self) -> None:
        stats = compute_dashboard_statistics([], sectors=[], complaint_types=[], now=NOW, period=Period.DAYS_30)

        self.assertEqual(stats.total, 0)
        self.assertEqual(stats.resolution_rate, 0.0)
        self.assertEqual(stats.average_resolution_days, 0.0)
        self.assertEqual(stats.by_sector, [])
        self.assertEqual(len(stats.timeline), 30)


class StatisticsServiceTest(unittest.IsolatedAsyncioTestCase):
    async def test_dashboard_reads_from_store(self) -> None:
        store = DocumentStore()
        service: StatisticsService = create_statistics_service(store)
        complaints = ComplaintService(FirestoreComplaintRepository(store))
        await complaints.record(title="Récente", created_at="2026-03-09T10:00:00+00:00")
        await complaints.record(title="Ancienne", created_at="2026-01-01T10:00:00+00:00")

        stats = await service.dashboard("7d", now=NOW)

        self.assertIs(stats.period, Period.DAYS_7)
        self.assertEqual(stats.total, 1)
        self.assertEqual(stats.generated_at, NOW.isoformat())
        self.assertEqual(stats.by_sector[0].label, UNSPECIFIED_LABEL)


if __name__ == "__main__":
    unittest.main()
