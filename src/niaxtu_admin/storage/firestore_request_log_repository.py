from __future__ import annotations

from typing import Any

from niaxtu_admin.request_log import RequestLogEntry
from niaxtu_admin.storage.firestore_schema import COLLECTION_REQUEST_LOGS


class FirestoreRequestLogRepository:
    def __init__(self, client: Any) -> None:
        self._collection = client.collection(COLLECTION_REQUEST_LOGS)

    async def append(self, entry: RequestLogEntry) -> str:
        ref = await self._collection.add(entry.to_document())
        return ref.id

    async def list_recent(self, *, limit: int = 100, min_status: int | None = None) -> list[RequestLogEntry]:
        if limit <= 0:
            raise ValueError("limit must be > 0.")
        if min_status is not None:
            snapshot = await self._collection.where("statusCode", ">=", min_status).get()
        else:
            snapshot = await self._collection.get()
        entries = [RequestLogEntry.from_document(doc.to_dict() or {}) for doc in snapshot]
        entries.sort(key=lambda entry: entry.timestamp, reverse=True)
        return entries[:limit]
