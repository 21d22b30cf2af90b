from __future__ import annotations

from typing import Any

from niaxtu_admin.complaints import Complaint
from niaxtu_admin.storage.firestore_schema import COLLECTION_COMPLAINTS


class FirestoreComplaintRepository:
    def __init__(self, client: Any) -> None:
        self._collection = client.collection(COLLECTION_COMPLAINTS)

    async def add(self, complaint: Complaint) -> str:
        ref = await self._collection.add(complaint.to_document())
        return ref.id

    async def list_all(self) -> list[Complaint]:
        snapshot = await self._collection.get()
        return [Complaint.from_document(doc.to_dict() or {}) for doc in snapshot]

    async def find_by(self, field_path: str, value: Any, *, limit: int | None = None) -> list[Complaint]:
        query = self._collection.where(field_path, "==", value)
        if limit is not None:
            query = query.limit(limit)
        snapshot = await query.get()
        return [Complaint.from_document(doc.to_dict() or {}) for doc in snapshot]

    async def list_since(self, created_from: str) -> list[Complaint]:
        snapshot = await self._collection.where("createdAt", ">=", created_from).get()
        return [Complaint.from_document(doc.to_dict() or {}) for doc in snapshot]
