from __future__ import annotations

import unittest

from niaxtu_admin.request_log import RequestLogEntry, should_persist
from niaxtu_admin.storage.firestore_request_log_repository import FirestoreRequestLogRepository
from niaxtu_admin.storage.memory_store import DocumentStore


def _entry(path: str, status_code: int = 200, duration_ms: int = 12, timestamp: str = "2026-03-10T10:00:00+00:00") -> RequestLogEntry:
    return RequestLogEntry(
        timestamp=timestamp,
        method="GET",
        path=path,
        status_code=status_code,
        duration_ms=duration_ms,
    )


class ShouldPersistTest(unittest.TestCase):
    def test_rules(self) -> None:
        cases = [
            (_entry("/api/v1/sectors"), False),
            (_entry("/api/v1/sectors", status_code=404), True),
            (_entry("/api/v1/sectors", status_code=500), True),
            (_entry("/api/v1/sectors", duration_ms=5000), False),
            (_entry("/api/v1/sectors", duration_ms=5001), True),
            (_entry("/api/v1/admin/logs"), True),
        ]
        for entry, expected in cases:
            with self.subTest(path=entry.path, status=entry.status_code, duration=entry.duration_ms):
                self.assertEqual(
                    should_persist(entry, slow_request_ms=5000, admin_path_prefix="/api/v1/admin/"),
                    expected,
                )

    def test_document_fields(self) -> None:
        entry = RequestLogEntry(
            timestamp="2026-03-10T10:00:00+00:00",
            method="post",
            path="/api/v1/sectors",
            status_code=409,
            duration_ms=7,
            client_ip="127.0.0.1",
            user_agent="testclient",
        )

        document = entry.to_document()

        self.assertEqual(document["statusCode"], 409)
        self.assertEqual(document["durationMs"], 7)
        self.assertFalse(document["success"])
        self.assertEqual(document["source"], "backend-api")
        restored = RequestLogEntry.from_document({**document, "id": "log-1"})
        self.assertEqual(restored.method, "POST")
        self.assertEqual(restored.entry_id, "log-1")
        self.assertEqual(restored.client_ip, "127.0.0.1")


class FirestoreRequestLogRepositoryTest(unittest.IsolatedAsyncioTestCase):
    async def test_list_recent_newest_first_with_status_filter(self) -> None:
        repository = FirestoreRequestLogRepository(DocumentStore())
        await repository.append(_entry("/a", status_code=200, timestamp="2026-03-10T10:00:00+00:00"))
        await repository.append(_entry("/b", status_code=404, timestamp="2026-03-10T10:01:00+00:00"))
        await repository.append(_entry("/c", status_code=500, timestamp="2026-03-10T10:02:00+00:00"))

        everything = await repository.list_recent()
        errors = await repository.list_recent(min_status=400, limit=1)

        self.assertEqual([entry.path for entry in everything], ["/c", "/b", "/a"])
        self.assertEqual([entry.path for entry in errors], ["/c"])
        self.assertTrue(all(entry.entry_id for entry in everything))
        with self.assertRaises(ValueError):
            await repository.list_recent(limit=0)


if __name__ == "__main__":
    unittest.main()
