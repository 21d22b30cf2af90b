from __future__ import annotations

from typing import Callable, TypeVar

from fastapi import Request

from niaxtu_admin.catalog import (
    ComplaintType,
    ComplaintTypeService,
    Sector,
    SectorService,
    Structure,
    StructureService,
    SubSector,
    SubSectorService,
    TargetType,
    TargetTypeService,
)
from niaxtu_admin.complaints import ComplaintService
from niaxtu_admin.settings import AppSettings
from niaxtu_admin.statistics import StatisticsService
from niaxtu_admin.storage.firestore_audit_log_repository import FirestoreAuditLogRepository
from niaxtu_admin.storage.firestore_catalog_repository import FirestoreCatalogLookup, FirestoreCatalogRepository
from niaxtu_admin.storage.firestore_complaint_repository import FirestoreComplaintRepository
from niaxtu_admin.storage.firestore_request_log_repository import FirestoreRequestLogRepository
from niaxtu_admin.storage.firestore_schema import (
    COLLECTION_COMPLAINT_TYPES,
    COLLECTION_SECTORS,
    COLLECTION_STRUCTURES,
    COLLECTION_SUB_SECTORS,
    COLLECTION_TARGET_TYPES,
)
from niaxtu_admin.storage.memory_store import DocumentStore

DependencyT = TypeVar("DependencyT")


def create_sector_service(store: DocumentStore) -> SectorService:
    return SectorService(
        FirestoreCatalogRepository(store, COLLECTION_SECTORS, Sector),
        lookup=FirestoreCatalogLookup(store),
        audit_repository=FirestoreAuditLogRepository(store),
    )


def create_sub_sector_service(store: DocumentStore) -> SubSectorService:
    return SubSectorService(
        FirestoreCatalogRepository(store, COLLECTION_SUB_SECTORS, SubSector),
        lookup=FirestoreCatalogLookup(store),
        audit_repository=FirestoreAuditLogRepository(store),
    )


def create_structure_service(store: DocumentStore) -> StructureService:
    return StructureService(
        FirestoreCatalogRepository(store, COLLECTION_STRUCTURES, Structure),
        lookup=FirestoreCatalogLookup(store),
        audit_repository=FirestoreAuditLogRepository(store),
    )


def create_complaint_type_service(store: DocumentStore) -> ComplaintTypeService:
    return ComplaintTypeService(
        FirestoreCatalogRepository(store, COLLECTION_COMPLAINT_TYPES, ComplaintType),
        lookup=FirestoreCatalogLookup(store),
        audit_repository=FirestoreAuditLogRepository(store),
    )


def create_target_type_service(store: DocumentStore) -> TargetTypeService:
    return TargetTypeService(
        FirestoreCatalogRepository(store, COLLECTION_TARGET_TYPES, TargetType),
        lookup=FirestoreCatalogLookup(store),
        audit_repository=FirestoreAuditLogRepository(store),
    )


def create_complaint_service(store: DocumentStore) -> ComplaintService:
    return ComplaintService(FirestoreComplaintRepository(store))


def create_statistics_service(store: DocumentStore) -> StatisticsService:
    return StatisticsService(
        create_complaint_service(store),
        create_sector_service(store),
        create_complaint_type_service(store),
    )


def get_store(request: Request) -> DocumentStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise RuntimeError("store n'est pas initialisé.")
    return store


def get_settings(request: Request) -> AppSettings:
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        raise RuntimeError("settings n'est pas initialisé.")
    return settings


def _resolve_dependency(
    request: Request,
    *,
    value_key: str,
    factory: Callable[[DocumentStore], DependencyT],
) -> DependencyT:
    dependency = getattr(request.app.state, value_key, None)
    if dependency is not None:
        return dependency
    dependency = factory(get_store(request))
    setattr(request.app.state, value_key, dependency)
    return dependency


def get_sector_service(request: Request) -> SectorService:
    return _resolve_dependency(request, value_key="sector_service", factory=create_sector_service)


def get_sub_sector_service(request: Request) -> SubSectorService:
    return _resolve_dependency(request, value_key="sub_sector_service", factory=create_sub_sector_service)


def get_structure_service(request: Request) -> StructureService:
    return _resolve_dependency(request, value_key="structure_service", factory=create_structure_service)


def get_complaint_type_service(request: Request) -> ComplaintTypeService:
    return _resolve_dependency(request, value_key="complaint_type_service", factory=create_complaint_type_service)


def get_target_type_service(request: Request) -> TargetTypeService:
    return _resolve_dependency(request, value_key="target_type_service", factory=create_target_type_service)


def get_complaint_service(request: Request) -> ComplaintService:
    return _resolve_dependency(request, value_key="complaint_service", factory=create_complaint_service)


def get_statistics_service(request: Request) -> StatisticsService:
    return _resolve_dependency(request, value_key="statistics_service", factory=create_statistics_service)


def get_request_log_repository(request: Request) -> FirestoreRequestLogRepository:
    return _resolve_dependency(request, value_key="request_log_repository", factory=FirestoreRequestLogRepository)


def get_audit_log_repository(request: Request) -> FirestoreAuditLogRepository:
    return _resolve_dependency(request, value_key="audit_log_repository", factory=FirestoreAuditLogRepository)
