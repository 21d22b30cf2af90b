from __future__ import annotations

from typing import Any

from niaxtu_admin.catalog import AuditLogRecord
from niaxtu_admin.storage.firestore_schema import COLLECTION_AUDIT_LOGS


class FirestoreAuditLogRepository:
    def __init__(self, client: Any) -> None:
        self._collection = client.collection(COLLECTION_AUDIT_LOGS)

    async def append(self, record: AuditLogRecord) -> str:
        ref = await self._collection.add(record.to_document())
        return ref.id

    async def list_recent(self, *, entity_id: str | None = None, limit: int = 100) -> list[AuditLogRecord]:
        if limit <= 0:
            raise ValueError("limit must be > 0.")
        if entity_id is not None:
            snapshot = await self._collection.where("entityId", "==", entity_id).get()
        else:
            snapshot = await self._collection.get()
        records = [AuditLogRecord.from_document(doc.to_dict() or {}) for doc in snapshot]
        # Stable sort keeps insertion order for records written in the same instant.
        records.sort(key=lambda record: record.acted_at, reverse=True)
        return records[:limit]
