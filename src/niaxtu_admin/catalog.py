from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
import logging
from typing import Any, ClassVar, Generic, Protocol, TypeVar

from niaxtu_admin.storage.firestore_schema import (
    COLLECTION_COMPLAINT_TYPES,
    COLLECTION_COMPLAINTS,
    COLLECTION_SECTORS,
    COLLECTION_STRUCTURES,
    COLLECTION_SUB_SECTORS,
    COLLECTION_TARGET_TYPES,
    normalize_color,
    normalize_document_id,
    normalize_name,
)
from niaxtu_admin.storage.memory_store import MISSING, resolve_field_path

LOGGER = logging.getLogger(__name__)

DEFAULT_SECTOR_ICON = "fa-layer-group"
DEFAULT_SECTOR_COLOR = "#3b82f6"
DEFAULT_SUB_SECTOR_ICON = "fa-folder"


class CatalogError(ValueError):
    """Base catalog error."""


class CatalogNotFoundError(CatalogError):
    """Raised when a target item does not exist."""


class CatalogAlreadyExistsError(CatalogError):
    """Raised when an item with the same name already exists in its scope."""


class CatalogInUseError(CatalogError):
    """Raised when deleting an item still referenced by other documents."""


class CatalogReferenceError(CatalogError):
    """Raised when a parent reference is missing or inconsistent."""


class CatalogEntity(str, Enum):
    SECTOR = "sector"
    SUB_SECTOR = "sub_sector"
    STRUCTURE = "structure"
    COMPLAINT_TYPE = "complaint_type"
    TARGET_TYPE = "target_type"

    @property
    def label(self) -> str:
        return _ENTITY_LABELS[self]


_ENTITY_LABELS = {
    CatalogEntity.SECTOR: "Secteur",
    CatalogEntity.SUB_SECTOR: "Sous-secteur",
    CatalogEntity.STRUCTURE: "Structure",
    CatalogEntity.COMPLAINT_TYPE: "Type de plainte",
    CatalogEntity.TARGET_TYPE: "Type de cible",
}


class Severity(str, Enum):
    FAIBLE = "faible"
    MOYENNE = "moyenne"
    ELEVEE = "elevee"
    CRITIQUE = "critique"


class AuditAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    TOGGLE = "TOGGLE"
    DELETE = "DELETE"


@dataclass(frozen=True)
class Sector:
    item_id: str
    name: str
    description: str = ""
    icon: str = DEFAULT_SECTOR_ICON
    color: str = DEFAULT_SECTOR_COLOR
    is_active: bool = True
    order: int = 0
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> Sector:
        return cls(
            item_id=str(data["id"]),
            name=str(data["name"]).strip(),
            description=str(data.get("description") or ""),
            icon=str(data.get("icon") or DEFAULT_SECTOR_ICON),
            color=str(data.get("color") or DEFAULT_SECTOR_COLOR),
            is_active=_coerce_bool(data.get("isActive"), field_name="isActive", default=True),
            order=int(data.get("order") or 0),
            created_at=_optional_str(data.get("createdAt")),
            updated_at=_optional_str(data.get("updatedAt")),
        )

    def to_document(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
            "color": self.color,
            "isActive": self.is_active,
            "order": self.order,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass(frozen=True)
class SubSector:
    item_id: str
    sector_id: str
    name: str
    description: str = ""
    icon: str = DEFAULT_SUB_SECTOR_ICON
    is_active: bool = True
    order: int = 0
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> SubSector:
        return cls(
            item_id=str(data["id"]),
            sector_id=str(data["sectorId"]),
            name=str(data["name"]).strip(),
            description=str(data.get("description") or ""),
            icon=str(data.get("icon") or DEFAULT_SUB_SECTOR_ICON),
            is_active=_coerce_bool(data.get("isActive"), field_name="isActive", default=True),
            order=int(data.get("order") or 0),
            created_at=_optional_str(data.get("createdAt")),
            updated_at=_optional_str(data.get("updatedAt")),
        )

    def to_document(self) -> dict[str, Any]:
        return {
            "sectorId": self.sector_id,
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
            "isActive": self.is_active,
            "order": self.order,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass(frozen=True)
class Structure:
    item_id: str
    sector_id: str
    name: str
    sub_sector_id: str | None = None
    description: str = ""
    structure_type: str = ""
    address: str = ""
    city: str = ""
    phone: str = ""
    email: str = ""
    is_active: bool = True
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> Structure:
        location = data.get("location") or {}
        contact = data.get("contact") or {}
        return cls(
            item_id=str(data["id"]),
            sector_id=str(data["sectorId"]),
            name=str(data["name"]).strip(),
            sub_sector_id=_optional_str(data.get("subSectorId")),
            description=str(data.get("description") or ""),
            structure_type=str(data.get("type") or ""),
            address=str(location.get("address") or ""),
            city=str(location.get("city") or ""),
            phone=str(contact.get("phone") or ""),
            email=str(contact.get("email") or ""),
            is_active=_coerce_bool(data.get("isActive"), field_name="isActive", default=True),
            created_at=_optional_str(data.get("createdAt")),
            updated_at=_optional_str(data.get("updatedAt")),
        )

    def to_document(self) -> dict[str, Any]:
        return {
            "sectorId": self.sector_id,
            "subSectorId": self.sub_sector_id,
            "name": self.name,
            "description": self.description,
            "type": self.structure_type,
            "location": {"address": self.address, "city": self.city},
            "contact": {"phone": self.phone, "email": self.email},
            "isActive": self.is_active,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass(frozen=True)
class ComplaintType:
    item_id: str
    name: str
    description: str = ""
    sector_id: str | None = None
    severity: Severity = Severity.MOYENNE
    auto_assignment: bool = False
    is_active: bool = True
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> ComplaintType:
        return cls(
            item_id=str(data["id"]),
            name=str(data["name"]).strip(),
            description=str(data.get("description") or ""),
            sector_id=_optional_str(data.get("sectorId")),
            severity=Severity(str(data.get("severity") or Severity.MOYENNE.value).strip().lower()),
            auto_assignment=_coerce_bool(data.get("autoAssignment"), field_name="autoAssignment", default=False),
            is_active=_coerce_bool(data.get("isActive"), field_name="isActive", default=True),
            created_at=_optional_str(data.get("createdAt")),
            updated_at=_optional_str(data.get("updatedAt")),
        )

    def to_document(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "sectorId": self.sector_id,
            "severity": self.severity.value,
            "autoAssignment": self.auto_assignment,
            "isActive": self.is_active,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass(frozen=True)
class TargetType:
    item_id: str
    name: str
    description: str = ""
    category: str = ""
    examples: tuple[str, ...] = ()
    is_active: bool = True
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> TargetType:
        return cls(
            item_id=str(data["id"]),
            name=str(data["name"]).strip(),
            description=str(data.get("description") or ""),
            category=str(data.get("category") or ""),
            examples=tuple(str(example) for example in data.get("examples") or ()),
            is_active=_coerce_bool(data.get("isActive"), field_name="isActive", default=True),
            created_at=_optional_str(data.get("createdAt")),
            updated_at=_optional_str(data.get("updatedAt")),
        )

    def to_document(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "examples": list(self.examples),
            "isActive": self.is_active,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass(frozen=True)
class AuditLogRecord:
    action: AuditAction
    entity: CatalogEntity
    entity_id: str
    name: str
    acted_at: str
    record_id: str | None = None

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> AuditLogRecord:
        return cls(
            action=AuditAction(str(data["action"]).strip().upper()),
            entity=CatalogEntity(str(data["entity"]).strip()),
            entity_id=str(data["entityId"]),
            name=str(data.get("name") or ""),
            acted_at=str(data["actedAt"]),
            record_id=_optional_str(data.get("id")),
        )

    def to_document(self) -> dict[str, Any]:
        return {
            "action": self.action.value,
            "entity": self.entity.value,
            "entityId": self.entity_id,
            "name": self.name,
            "actedAt": self.acted_at,
        }


ItemT = TypeVar("ItemT", Sector, SubSector, Structure, ComplaintType, TargetType)


class CatalogRepository(Protocol[ItemT]):
    def new_id(self) -> str:
        """Reserve a fresh document id."""

    async def create(self, item: ItemT) -> None:
        """Write a new item."""

    async def get(self, item_id: str) -> ItemT | None:
        """Get item by id."""

    async def list_all(self) -> list[ItemT]:
        """List all items in storage order."""

    async def find_by(self, field_path: str, value: Any, *, limit: int | None = None) -> list[ItemT]:
        """List items whose document field equals value."""

    async def update(self, item: ItemT) -> bool:
        """Merge item fields into its document. Return False when it does not exist."""

    async def delete(self, item_id: str) -> bool:
        """Delete item and return whether the item existed."""


class CatalogLookup(Protocol):
    async def document_exists(self, collection: str, document_id: str) -> bool:
        """Return whether the document exists."""

    async def field_value(self, collection: str, document_id: str, field_path: str) -> Any:
        """Return a field of a document, or None when either is missing."""

    async def is_referenced(self, collection: str, field_path: str, value: str) -> bool:
        """Return whether at least one document has field_path == value."""


class AuditLogRepository(Protocol):
    async def append(self, record: AuditLogRecord) -> str:
        """Append a catalog operation and return its id."""


class CatalogService(Generic[ItemT]):
    """Shared create/read/update/toggle/delete rules for reference data."""

    entity: ClassVar[CatalogEntity]
    # Domain filter name -> document field path.
    filter_fields: ClassVar[dict[str, str]] = {}
    # Documents that block deletion: (collection, field path holding this item's id).
    usages: ClassVar[tuple[tuple[str, str], ...]] = ()

    def __init__(
        self,
        repository: CatalogRepository[ItemT],
        *,
        lookup: CatalogLookup,
        audit_repository: AuditLogRepository | None = None,
    ) -> None:
        self._repository = repository
        self._lookup = lookup
        self._audit_repository = audit_repository

    @staticmethod
    def _now_iso() -> str:
        return datetime.now(timezone.utc).isoformat()

    @staticmethod
    def _sort_key(item: ItemT) -> tuple[Any, ...]:
        return (item.name.lower(), item.item_id)

    @staticmethod
    def _scope_key(item: ItemT) -> tuple[Any, ...]:
        return ()

    def _not_found(self, item_id: str) -> CatalogNotFoundError:
        return CatalogNotFoundError(f"{self.entity.label} non trouvé: {item_id}")

    async def list_items(self, *, active: bool | None = None, **filters: Any) -> list[ItemT]:
        conditions: list[tuple[str, Any]] = []
        for key, value in filters.items():
            if key not in self.filter_fields:
                raise CatalogError(f"unsupported filter: {key}")
            if value is not None:
                conditions.append((self.filter_fields[key], value))
        if active is not None:
            conditions.append(("isActive", bool(active)))

        if conditions:
            # The store evaluates one condition per query; the rest are applied here.
            field_path, value = conditions[0]
            items = await self._repository.find_by(field_path, value)
            for field_path, value in conditions[1:]:
                items = [item for item in items if _field_equals(item.to_document(), field_path, value)]
        else:
            items = await self._repository.list_all()
        return sorted(items, key=self._sort_key)

    async def get_item(self, item_id: str) -> ItemT:
        normalized_id = normalize_document_id(item_id)
        existing = await self._repository.get(normalized_id)
        if existing is None:
            raise self._not_found(normalized_id)
        return existing

    async def toggle_item(self, item_id: str, *, now_iso: str | None = None) -> ItemT:
        existing = await self.get_item(item_id)
        updated = replace(existing, is_active=not existing.is_active, updated_at=now_iso or self._now_iso())
        await self._write_update(updated)
        await self._record_audit(AuditAction.TOGGLE, updated, acted_at=updated.updated_at)
        return updated

    async def delete_item(self, item_id: str, *, now_iso: str | None = None) -> None:
        existing = await self.get_item(item_id)
        for collection, field_path in self.usages:
            if await self._lookup.is_referenced(collection, field_path, existing.item_id):
                raise CatalogInUseError(
                    f"Impossible de supprimer ce {self.entity.label.lower()} car il est utilisé ({collection})."
                )
        deleted = await self._repository.delete(existing.item_id)
        if not deleted:
            raise self._not_found(existing.item_id)
        LOGGER.info("%s deleted: id=%s name=%s", self.entity.value, existing.item_id, existing.name)
        await self._record_audit(AuditAction.DELETE, existing, acted_at=now_iso or self._now_iso())

    async def _ensure_unique_name(self, candidate: ItemT) -> None:
        # Globally scoped names only need to know whether any document matches.
        limit = None if self._scope_key(candidate) else 1
        for found in await self._repository.find_by("name", candidate.name, limit=limit):
            if found.item_id == candidate.item_id:
                continue
            if self._scope_key(found) == self._scope_key(candidate):
                raise CatalogAlreadyExistsError(
                    f"{self.entity.label} avec ce nom existe déjà: {candidate.name}"
                )

    async def _create(self, item: ItemT) -> ItemT:
        await self._ensure_unique_name(item)
        await self._repository.create(item)
        LOGGER.info("%s created: id=%s name=%s", self.entity.value, item.item_id, item.name)
        await self._record_audit(AuditAction.CREATE, item, acted_at=item.created_at or self._now_iso())
        return item

    async def _update(self, item_id: str, changes: dict[str, Any], *, now_iso: str | None) -> ItemT:
        existing = await self.get_item(item_id)
        updated = replace(existing, **changes, updated_at=now_iso or self._now_iso())
        if updated.name != existing.name:
            await self._ensure_unique_name(updated)
        await self._write_update(updated)
        await self._record_audit(AuditAction.UPDATE, updated, acted_at=updated.updated_at)
        return updated

    async def _write_update(self, item: ItemT) -> None:
        if not await self._repository.update(item):
            raise self._not_found(item.item_id)
        LOGGER.info("%s updated: id=%s", self.entity.value, item.item_id)

    async def _require_sector(self, sector_id: str) -> str:
        normalized_id = normalize_document_id(sector_id)
        if not await self._lookup.document_exists(COLLECTION_SECTORS, normalized_id):
            raise CatalogReferenceError(f"Secteur non trouvé: {normalized_id}")
        return normalized_id

    async def _record_audit(self, action: AuditAction, item: ItemT, *, acted_at: str | None) -> None:
        if self._audit_repository is None:
            return
        await self._audit_repository.append(
            AuditLogRecord(
                action=action,
                entity=self.entity,
                entity_id=item.item_id,
                name=item.name,
                acted_at=acted_at or self._now_iso(),
            )
        )

    async def _next_order(self, items: list[Any]) -> int:
        if not items:
            return 1
        return max(item.order for item in items) + 1


class SectorService(CatalogService[Sector]):
    entity = CatalogEntity.SECTOR
    usages = (
        (COLLECTION_SUB_SECTORS, "sectorId"),
        (COLLECTION_STRUCTURES, "sectorId"),
        (COLLECTION_COMPLAINT_TYPES, "sectorId"),
        (COLLECTION_COMPLAINTS, "sectorId"),
    )

    @staticmethod
    def _sort_key(item: Sector) -> tuple[Any, ...]:
        return (item.order, item.name.lower(), item.item_id)

    async def create_item(
        self,
        *,
        name: str,
        description: str = "",
        icon: str | None = None,
        color: str | None = None,
        order: int | None = None,
        now_iso: str | None = None,
    ) -> Sector:
        current_time = now_iso or self._now_iso()
        if order is None:
            order = await self._next_order(await self._repository.list_all())
        item = Sector(
            item_id=self._repository.new_id(),
            name=normalize_name(name),
            description=description.strip(),
            icon=(icon or DEFAULT_SECTOR_ICON).strip(),
            color=normalize_color(color) if color else DEFAULT_SECTOR_COLOR,
            is_active=True,
            order=order,
            created_at=current_time,
            updated_at=current_time,
        )
        return await self._create(item)

    async def update_item(
        self,
        item_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        icon: str | None = None,
        color: str | None = None,
        order: int | None = None,
        is_active: bool | None = None,
        now_iso: str | None = None,
    ) -> Sector:
        changes: dict[str, Any] = {}
        if name is not None:
            changes["name"] = normalize_name(name)
        if description is not None:
            changes["description"] = description.strip()
        if icon:
            changes["icon"] = icon.strip()
        if color:
            changes["color"] = normalize_color(color)
        if order is not None:
            changes["order"] = order
        if is_active is not None:
            changes["is_active"] = bool(is_active)
        return await self._update(item_id, changes, now_iso=now_iso)


class SubSectorService(CatalogService[SubSector]):
    entity = CatalogEntity.SUB_SECTOR
    filter_fields = {"sector_id": "sectorId"}
    usages = (
        (COLLECTION_STRUCTURES, "subSectorId"),
        (COLLECTION_COMPLAINTS, "subSectorId"),
    )

    @staticmethod
    def _sort_key(item: SubSector) -> tuple[Any, ...]:
        return (item.order, item.name.lower(), item.item_id)

    @staticmethod
    def _scope_key(item: SubSector) -> tuple[Any, ...]:
        return (item.sector_id,)

    async def create_item(
        self,
        *,
        sector_id: str,
        name: str,
        description: str = "",
        icon: str | None = None,
        order: int | None = None,
        now_iso: str | None = None,
    ) -> SubSector:
        normalized_sector_id = await self._require_sector(sector_id)
        current_time = now_iso or self._now_iso()
        if order is None:
            order = await self._next_order(await self._repository.find_by("sectorId", normalized_sector_id))
        item = SubSector(
            item_id=self._repository.new_id(),
            sector_id=normalized_sector_id,
            name=normalize_name(name),
            description=description.strip(),
            icon=(icon or DEFAULT_SUB_SECTOR_ICON).strip(),
            is_active=True,
            order=order,
            created_at=current_time,
            updated_at=current_time,
        )
        return await self._create(item)

    async def update_item(
        self,
        item_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        icon: str | None = None,
        order: int | None = None,
        is_active: bool | None = None,
        now_iso: str | None = None,
    ) -> SubSector:
        changes: dict[str, Any] = {}
        if name is not None:
            changes["name"] = normalize_name(name)
        if description is not None:
            changes["description"] = description.strip()
        if icon:
            changes["icon"] = icon.strip()
        if order is not None:
            changes["order"] = order
        if is_active is not None:
            changes["is_active"] = bool(is_active)
        return await self._update(item_id, changes, now_iso=now_iso)


class StructureService(CatalogService[Structure]):
    entity = CatalogEntity.STRUCTURE
    filter_fields = {
        "sector_id": "sectorId",
        "sub_sector_id": "subSectorId",
        "city": "location.city",
    }
    usages = ((COLLECTION_COMPLAINTS, "structureId"),)

    @staticmethod
    def _scope_key(item: Structure) -> tuple[Any, ...]:
        return (item.sector_id,)

    async def _require_sub_sector(self, sub_sector_id: str, *, sector_id: str) -> str:
        normalized_id = normalize_document_id(sub_sector_id)
        parent_sector_id = await self._lookup.field_value(COLLECTION_SUB_SECTORS, normalized_id, "sectorId")
        if parent_sector_id is None:
            raise CatalogReferenceError(f"Sous-secteur non trouvé: {normalized_id}")
        if parent_sector_id != sector_id:
            raise CatalogReferenceError(
                f"Le sous-secteur {normalized_id} n'appartient pas au secteur {sector_id}."
            )
        return normalized_id

    async def create_item(
        self,
        *,
        sector_id: str,
        name: str,
        sub_sector_id: str | None = None,
        description: str = "",
        structure_type: str = "",
        address: str = "",
        city: str = "",
        phone: str = "",
        email: str = "",
        now_iso: str | None = None,
    ) -> Structure:
        normalized_sector_id = await self._require_sector(sector_id)
        normalized_sub_sector_id = (
            await self._require_sub_sector(sub_sector_id, sector_id=normalized_sector_id)
            if sub_sector_id
            else None
        )
        current_time = now_iso or self._now_iso()
        item = Structure(
            item_id=self._repository.new_id(),
            sector_id=normalized_sector_id,
            sub_sector_id=normalized_sub_sector_id,
            name=normalize_name(name),
            description=description.strip(),
            structure_type=structure_type.strip(),
            address=address.strip(),
            city=city.strip(),
            phone=phone.strip(),
            email=email.strip(),
            is_active=True,
            created_at=current_time,
            updated_at=current_time,
        )
        return await self._create(item)

    async def update_item(
        self,
        item_id: str,
        *,
        name: str | None = None,
        sub_sector_id: str | None = None,
        description: str | None = None,
        structure_type: str | None = None,
        address: str | None = None,
        city: str | None = None,
        phone: str | None = None,
        email: str | None = None,
        is_active: bool | None = None,
        now_iso: str | None = None,
    ) -> Structure:
        changes: dict[str, Any] = {}
        if name is not None:
            changes["name"] = normalize_name(name)
        if sub_sector_id is not None:
            if sub_sector_id.strip():
                existing = await self.get_item(item_id)
                changes["sub_sector_id"] = await self._require_sub_sector(sub_sector_id, sector_id=existing.sector_id)
            else:
                # An empty id detaches the structure from its sub-sector.
                changes["sub_sector_id"] = None
        for field_name, value in (
            ("description", description),
            ("structure_type", structure_type),
            ("address", address),
            ("city", city),
            ("phone", phone),
            ("email", email),
        ):
            if value is not None:
                changes[field_name] = value.strip()
        if is_active is not None:
            changes["is_active"] = bool(is_active)
        return await self._update(item_id, changes, now_iso=now_iso)


class ComplaintTypeService(CatalogService[ComplaintType]):
    entity = CatalogEntity.COMPLAINT_TYPE
    filter_fields = {"sector_id": "sectorId", "severity": "severity"}
    usages = ((COLLECTION_COMPLAINTS, "complaintTypeId"),)

    @staticmethod
    def _scope_key(item: ComplaintType) -> tuple[Any, ...]:
        return (item.sector_id,)

    async def list_items(self, *, active: bool | None = None, **filters: Any) -> list[ComplaintType]:
        severity = filters.get("severity")
        if isinstance(severity, Severity):
            filters["severity"] = severity.value
        return await super().list_items(active=active, **filters)

    async def create_item(
        self,
        *,
        name: str,
        description: str = "",
        sector_id: str | None = None,
        severity: Severity | str = Severity.MOYENNE,
        auto_assignment: bool = False,
        now_iso: str | None = None,
    ) -> ComplaintType:
        normalized_sector_id = await self._require_sector(sector_id) if sector_id else None
        current_time = now_iso or self._now_iso()
        item = ComplaintType(
            item_id=self._repository.new_id(),
            name=normalize_name(name),
            description=description.strip(),
            sector_id=normalized_sector_id,
            severity=_parse_severity(severity),
            auto_assignment=bool(auto_assignment),
            is_active=True,
            created_at=current_time,
            updated_at=current_time,
        )
        return await self._create(item)

    async def update_item(
        self,
        item_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        severity: Severity | str | None = None,
        auto_assignment: bool | None = None,
        is_active: bool | None = None,
        now_iso: str | None = None,
    ) -> ComplaintType:
        changes: dict[str, Any] = {}
        if name is not None:
            changes["name"] = normalize_name(name)
        if description is not None:
            changes["description"] = description.strip()
        if severity is not None:
            changes["severity"] = _parse_severity(severity)
        if auto_assignment is not None:
            changes["auto_assignment"] = bool(auto_assignment)
        if is_active is not None:
            changes["is_active"] = bool(is_active)
        return await self._update(item_id, changes, now_iso=now_iso)


class TargetTypeService(CatalogService[TargetType]):
    entity = CatalogEntity.TARGET_TYPE
    filter_fields = {"category": "category"}
    usages = ((COLLECTION_COMPLAINTS, "targetTypeId"),)

    async def create_item(
        self,
        *,
        name: str,
        description: str = "",
        category: str = "",
        examples: list[str] | tuple[str, ...] = (),
        now_iso: str | None = None,
    ) -> TargetType:
        current_time = now_iso or self._now_iso()
        item = TargetType(
            item_id=self._repository.new_id(),
            name=normalize_name(name),
            description=description.strip(),
            category=category.strip(),
            examples=_normalize_examples(examples),
            is_active=True,
            created_at=current_time,
            updated_at=current_time,
        )
        return await self._create(item)

    async def update_item(
        self,
        item_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        category: str | None = None,
        examples: list[str] | tuple[str, ...] | None = None,
        is_active: bool | None = None,
        now_iso: str | None = None,
    ) -> TargetType:
        changes: dict[str, Any] = {}
        if name is not None:
            changes["name"] = normalize_name(name)
        if description is not None:
            changes["description"] = description.strip()
        if category is not None:
            changes["category"] = category.strip()
        if examples is not None:
            changes["examples"] = _normalize_examples(examples)
        if is_active is not None:
            changes["is_active"] = bool(is_active)
        return await self._update(item_id, changes, now_iso=now_iso)


def _parse_severity(value: Severity | str) -> Severity:
    if isinstance(value, Severity):
        return value
    try:
        return Severity(str(value).strip().lower())
    except ValueError as exc:
        raise CatalogError(f"Sévérité invalide: {value}") from exc


def _normalize_examples(examples: list[str] | tuple[str, ...]) -> tuple[str, ...]:
    return tuple(example.strip() for example in examples if example and example.strip())


def _field_equals(document: dict[str, Any], field_path: str, value: Any) -> bool:
    found = resolve_field_path(document, field_path)
    return found is not MISSING and found == value


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    normalized = str(value).strip()
    return normalized or None


def _coerce_bool(value: Any, *, field_name: str, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if value in (0, 1):
            return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
    raise CatalogError(f"{field_name} must be boolean-compatible.")
