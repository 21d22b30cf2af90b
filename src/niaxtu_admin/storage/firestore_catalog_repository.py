from __future__ import annotations

from typing import Any, Generic

from niaxtu_admin.catalog import ItemT
from niaxtu_admin.storage.firestore_schema import normalize_document_id


class FirestoreCatalogRepository(Generic[ItemT]):
    def __init__(self, client: Any, collection_name: str, item_type: type[ItemT]) -> None:
        self._collection = client.collection(collection_name)
        self._item_type = item_type

    def new_id(self) -> str:
        return self._collection.document().id

    async def create(self, item: ItemT) -> None:
        await self._collection.document(item.item_id).set(item.to_document())

    async def get(self, item_id: str) -> ItemT | None:
        snapshot = await self._collection.document(normalize_document_id(item_id)).get()
        if not snapshot.exists:
            return None
        return self._item_type.from_document(snapshot.to_dict() or {})

    async def list_all(self) -> list[ItemT]:
        snapshot = await self._collection.get()
        return [self._item_type.from_document(doc.to_dict() or {}) for doc in snapshot]

    async def find_by(self, field_path: str, value: Any, *, limit: int | None = None) -> list[ItemT]:
        query = self._collection.where(field_path, "==", value)
        if limit is not None:
            query = query.limit(limit)
        snapshot = await query.get()
        return [self._item_type.from_document(doc.to_dict() or {}) for doc in snapshot]

    async def update(self, item: ItemT) -> bool:
        return await self._collection.document(item.item_id).update(item.to_document())

    async def delete(self, item_id: str) -> bool:
        return await self._collection.document(normalize_document_id(item_id)).delete()


class FirestoreCatalogLookup:
    """Cross-collection checks used by catalog services."""

    def __init__(self, client: Any) -> None:
        self._client = client

    async def document_exists(self, collection: str, document_id: str) -> bool:
        snapshot = await self._client.collection(collection).document(document_id).get()
        return snapshot.exists

    async def field_value(self, collection: str, document_id: str, field_path: str) -> Any:
        snapshot = await self._client.collection(collection).document(document_id).get()
        if not snapshot.exists:
            return None
        return snapshot.get(field_path)

    async def is_referenced(self, collection: str, field_path: str, value: str) -> bool:
        snapshot = await self._client.collection(collection).where(field_path, "==", value).limit(1).get()
        return not snapshot.empty
